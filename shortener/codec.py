"""Identifier codec for URL shortener.

Converts store-assigned integer ids to short base-62 codes and back. The id
is shifted by ``SHIFT`` before rendering so that every issued code decodes to
a value strictly greater than ``SHIFT``; anything at or below it was never
issued and is rejected without touching the store.
"""

import string

from .errors import CodecError, RangeError


# Base62 characters: digits, then lower case, then upper case
BASE62_CHARS = string.digits + string.ascii_lowercase + string.ascii_uppercase
BASE = len(BASE62_CHARS)
CHAR_VALUES = {char: index for index, char in enumerate(BASE62_CHARS)}

SHIFT = 1024 * 1024

# Codes shorter than this are rejected by the web layer
MIN_CODE_LENGTH = 6


def encode(record_id: int) -> str:
    """Encode a record id as a short code.

    Args:
        record_id: Non-negative id assigned by the store

    Returns:
        Base62 code, left-padded with the zero digit to MIN_CODE_LENGTH

    Raises:
        TypeError: If record_id is not an integer
        ValueError: If record_id is negative
    """
    if not isinstance(record_id, int) or isinstance(record_id, bool):
        raise TypeError(f"Record id must be an integer (given type: {type(record_id)})")
    if record_id < 0:
        raise ValueError(f"Record id must be non-negative (given value: {record_id})")

    num = record_id + SHIFT
    result = []
    while num:
        num, rem = divmod(num, BASE)
        result.append(BASE62_CHARS[rem])

    return "".join(reversed(result)).rjust(MIN_CODE_LENGTH, BASE62_CHARS[0])


def decode(code: str) -> int:
    """Decode a short code back to its record id.

    Args:
        code: Code previously produced by encode()

    Returns:
        The record id

    Raises:
        CodecError: If code is empty, has characters outside the alphabet,
            or carries leading zeros encode() would not produce
        RangeError: If code decodes to a value not above SHIFT
    """
    if not code:
        raise CodecError("code is empty")

    raw = 0
    for char in code:
        value = CHAR_VALUES.get(char)
        if value is None:
            raise CodecError(f"code {code!r} has invalid character {char!r}")
        raw = raw * BASE + value

    if raw <= SHIFT:
        raise RangeError(f"code {code!r} is less than encoding shift")

    record_id = raw - SHIFT
    # Only the exact padding encode() produces is accepted
    if code != encode(record_id):
        raise CodecError(f"code {code!r} is not in canonical form")

    return record_id

