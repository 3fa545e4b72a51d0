"""Utility helper functions."""

import base64
import binascii
import uuid
from typing import Optional

_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


def generate_uuid() -> str:
    """
    Generate a new UUID4 string.

    Returns:
        UUID4 string
    """
    return str(uuid.uuid4())


def decode_base64(data: str) -> Optional[bytes]:
    """
    Decode a base64 payload.

    Line breaks and other whitespace are ignored, missing "=" padding is
    restored, and the URL-safe alphabet is accepted.

    Args:
        data: Base64 text

    Returns:
        Decoded bytes, or None if the text is not valid base64
    """
    compact = "".join(data.split()).translate(_URLSAFE_TO_STANDARD)
    compact += "=" * (-len(compact) % 4)
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError):
        return None


def parse_page(page: Optional[str]) -> int:
    """
    Parse a zero-indexed page query parameter.

    Missing, non-numeric and negative values fall back to page 0.
    """
    try:
        value = int(page) if page is not None else 0
    except (TypeError, ValueError):
        return 0
    return max(value, 0)
