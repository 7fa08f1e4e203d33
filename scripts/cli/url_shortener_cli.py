#!/usr/bin/env python3
"""
Command-line interface for URL shortener.

Talks to the database directly through the shortening engine. Connection
settings come from the SHORTENER_DB_* environment variables.

Usage:
    python url_shortener_cli.py shorten <url>
    python url_shortener_cli.py expand <code>
    python url_shortener_cli.py encode <id>
    python url_shortener_cli.py decode <code>
    python url_shortener_cli.py health
"""

import argparse
import asyncio
import json
import os
import sys

# Add parent directories to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from config import Config, load_config
from shortener import codec
from shortener.common.logging_config import setup_logging
from shortener.common.validators import is_valid_url
from shortener.database.postgres import PostgresURLStore
from shortener.engine import ShortenerEngine
from shortener.errors import ShortenerError


def print_result(data: dict, ok: bool = True) -> int:
    """Print a JSON result to stdout (or stderr on failure) and return the exit code."""
    print(json.dumps({"success": ok, **data}, indent=2), file=sys.stdout if ok else sys.stderr)
    return 0 if ok else 1


class URLShortenerCLI:
    """Command-line interface for URL shortener."""

    def __init__(self, config: Config, verbose: bool = False):
        """Initialize CLI."""
        self.config = config
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.engine = None

    async def initialize(self):
        """Connect to the database and build the engine."""
        store = PostgresURLStore.from_config(self.config, logger=self.logger)
        await store.connect()
        self.engine = ShortenerEngine(
            store=store,
            logger=self.logger,
            default_timeout=self.config.request_timeout_seconds,
        )

    async def cleanup(self):
        """Cleanup resources."""
        if self.engine:
            await self.engine.close()

    async def shorten(self, url: str) -> int:
        """Shorten a URL."""
        is_valid, error = is_valid_url(url)
        if not is_valid:
            return print_result({"error": error}, ok=False)

        try:
            code = await self.engine.shorten(url)
        except ShortenerError as e:
            return print_result({"kind": e.kind.value, "error": str(e)}, ok=False)

        return print_result({"code": code, "url": url})

    async def expand(self, code: str) -> int:
        """Get the original URL for a short code."""
        try:
            url = await self.engine.expand(code)
        except ShortenerError as e:
            return print_result({"kind": e.kind.value, "error": str(e)}, ok=False)

        return print_result({"code": code, "url": url})

    async def health(self) -> int:
        """Check database health."""
        healthy = await self.engine.health_check(timeout=self.config.readiness_timeout_seconds)
        return print_result({"database": "ok" if healthy else "db not ready"}, ok=healthy)


def encode_id(record_id: int) -> int:
    """Print the code for a record id."""
    try:
        code = codec.encode(record_id)
    except ValueError as e:
        return print_result({"error": str(e)}, ok=False)
    return print_result({"id": record_id, "code": code})


def decode_code(code: str) -> int:
    """Print the record id for a code."""
    try:
        record_id = codec.decode(code)
    except ShortenerError as e:
        return print_result({"kind": e.kind.value, "error": str(e)}, ok=False)
    return print_result({"code": code, "id": record_id})


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Get original URL
  %(prog)s expand 004oMw

  # Convert between ids and codes without touching the database
  %(prog)s encode 42
  %(prog)s decode 004oMw

  # Check database health
  %(prog)s health
        """
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")

    expand_parser = subparsers.add_parser("expand", help="Get original URL")
    expand_parser.add_argument("code", help="Short code to lookup")

    encode_parser = subparsers.add_parser("encode", help="Encode a record id")
    encode_parser.add_argument("id", type=int, help="Record id")

    decode_parser = subparsers.add_parser("decode", help="Decode a short code")
    decode_parser.add_argument("code", help="Short code")

    subparsers.add_parser("health", help="Check database health")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    # Codec commands need no database
    if args.command == "encode":
        return encode_id(args.id)
    if args.command == "decode":
        return decode_code(args.code)

    cli = URLShortenerCLI(config=load_config(), verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url)
        elif args.command == "expand":
            return await cli.expand(args.code)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    except ShortenerError as e:
        return print_result({"kind": e.kind.value, "error": str(e)}, ok=False)

    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
