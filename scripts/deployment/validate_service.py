#!/usr/bin/env python3
"""
Validation script for URL Shortener service.
Tests the live running service to ensure all functionality works correctly.
"""

import argparse
import sys
import time
from datetime import datetime
from typing import Optional

import requests


class ServiceValidator:
    """Validates URL shortener service functionality."""

    def __init__(self, base_url: str = "http://localhost:3000"):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.test_results = []

    def print_header(self, text: str):
        """Print a formatted header."""
        print(f"\n{'='*60}")
        print(f"  {text}")
        print(f"{'='*60}\n")

    def print_test(self, name: str, passed: bool, details: str = ""):
        """Print test result."""
        status = "PASS" if passed else "FAIL"
        self.test_results.append((name, passed))
        print(f"{status} - {name}")
        if details:
            print(f"       {details}")

    def check_status(self, name: str, method: str, path: str, expected: int, **kwargs) -> Optional[requests.Response]:
        """Send a request and record whether it returned the expected status."""
        try:
            response = self.session.request(method, f"{self.base_url}{path}", timeout=5, **kwargs)
        except requests.RequestException as e:
            self.print_test(name, False, f"Error: {e}")
            return None

        passed = response.status_code == expected
        self.print_test(name, passed, f"Status: {response.status_code} (expected {expected})")
        return response if passed else None

    def test_liveness(self) -> bool:
        """Test liveness probe."""
        response = self.check_status("Liveness", "GET", "/liveness", 200)
        return response is not None and response.json().get("status") == "up"

    def test_readiness(self) -> bool:
        """Test readiness probe."""
        response = self.check_status("Readiness", "GET", "/readiness", 200)
        return response is not None and response.json().get("status") == "ok"

    def test_shorten(self, url: str) -> Optional[str]:
        """Test creating a short URL."""
        response = self.check_status("Shorten URL", "POST", "/shorten", 200, data={"url": url})
        if response is None:
            return None
        return response.json().get("code")

    def test_idempotent(self, url: str, code: str) -> bool:
        """Test that the same URL gets the same code."""
        response = self.check_status("Shorten Again", "POST", "/shorten", 200, data={"url": url})
        same = response is not None and response.json().get("code") == code
        self.print_test("Idempotent Code", same, f"Code: {code}")
        return same

    def test_expand(self, code: str, url: str) -> bool:
        """Test resolving a code."""
        response = self.check_status("Expand Code", "GET", f"/{code}", 200)
        matches = response is not None and response.json().get("url") == url
        self.print_test("Expanded URL Matches", matches, f"URL: {url[:50]}")
        return matches

    def run_all_tests(self) -> bool:
        """Run all validation tests."""
        self.print_header("URL Shortener Service Validation")
        print(f"Testing service at: {self.base_url}")
        print(f"Timestamp: {datetime.now().isoformat()}\n")

        if not self.test_liveness():
            print("\nLiveness check failed. Service may not be running.")
            print(f"   Make sure the service is accessible at {self.base_url}")
            return False

        self.test_readiness()
        print()

        test_url = f"https://example.com/test/{int(time.time())}"
        code = self.test_shorten(test_url)
        if code:
            self.test_idempotent(test_url, code)
            self.test_expand(code, test_url)

        print()

        self.check_status("Short URL Rejection", "POST", "/shorten", 400, data={"url": "abc"})
        self.check_status("Short Code Rejection", "GET", "/ff", 400)
        self.check_status("Malformed Code Rejection", "GET", "/abc-def!", 400)
        self.check_status("Unknown Code", "GET", "/zzzzzzzzzzzzzzzzzzzz", 404)

        self.print_summary()

        return all(passed for _, passed in self.test_results)

    def print_summary(self):
        """Print test summary."""
        total = len(self.test_results)
        passed = sum(1 for _, p in self.test_results if p)
        failed = total - passed

        self.print_header("Test Summary")
        print(f"Total Tests:  {total}")
        print(f"Passed:       {passed}")
        print(f"Failed:       {failed}")

        if failed > 0:
            print("\nFailed tests:")
            for name, passed in self.test_results:
                if not passed:
                    print(f"   - {name}")

        print()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Validate URL Shortener service functionality"
    )
    parser.add_argument(
        "--url",
        default="http://localhost:3000",
        help="Base URL of the service (default: http://localhost:3000)"
    )

    args = parser.parse_args()

    validator = ServiceValidator(args.url)

    try:
        success = validator.run_all_tests()
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\nValidation interrupted by user")
        sys.exit(2)


if __name__ == "__main__":
    main()
