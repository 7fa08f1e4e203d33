"""Validation utilities for URL shortener."""

from typing import Tuple


URL_MIN_LENGTH = 9
URL_MAX_LENGTH = 2048
CODE_MIN_LENGTH = 6


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL submitted for shortening.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(url, str) or len(url) < URL_MIN_LENGTH:
        return False, "input URL is incorrect"

    if len(url) > URL_MAX_LENGTH:
        return False, f"input URL is too long (max {URL_MAX_LENGTH} characters)"

    return True, ""


def is_valid_short_code(short_code: str, min_length: int = CODE_MIN_LENGTH) -> Tuple[bool, str]:
    """Validate a short code before it is expanded.

    Args:
        short_code: The short code to validate
        min_length: Minimum length for short code

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(short_code, str) or len(short_code) < min_length:
        return False, "input URL code is incorrect"

    return True, ""
