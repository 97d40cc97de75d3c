"""Recognise opaque machine-generated identifiers.

Only ever applied to URL path segments and generated filename stems; hex
classification on natural-language words would misfire on words like "cafe".
"""

from __future__ import annotations

import re

# Hex strings shorter than this are treated as words ("beef", "decade").
MIN_HEX_ID_LENGTH = 12

_NUMERIC_RE = re.compile(r"[0-9]+")
_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_UUID_RE = re.compile(
    r"[0-9a-f]{8}-?[0-9a-f]{4}-?[0-9a-f]{4}-?[0-9a-f]{4}-?[0-9a-f]{12}",
    re.IGNORECASE,
)


def is_numeric(token: str) -> bool:
    """Return ``True`` if *token* is non-empty and only ASCII digits (after trimming)."""
    return bool(_NUMERIC_RE.fullmatch(token.strip()))


def is_hex_string(token: str) -> bool:
    """Return ``True`` if *token* is non-empty and only hexadecimal characters."""
    return bool(_HEX_RE.fullmatch(token))


def is_uuid(token: str) -> bool:
    """Return ``True`` for 32 hex digits, optionally grouped 8-4-4-4-12."""
    return bool(_UUID_RE.fullmatch(token))


def looks_like_id(token: str) -> bool:
    """Return ``True`` if *token* looks machine-generated rather than meaningful.

    A token is an identifier if it is all digits, UUID-shaped, or a hex
    string of at least ``MIN_HEX_ID_LENGTH`` characters.

    Example:
        >>> looks_like_id("1970393556641191")
        True
        >>> looks_like_id("senior-engineer")
        False
    """
    token = token.strip()
    if not token:
        return False
    if is_numeric(token) or is_uuid(token):
        return True
    return len(token) >= MIN_HEX_ID_LENGTH and is_hex_string(token)
