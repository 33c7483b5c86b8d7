# services/id_codec.py
"""
Bijection between internal profile keys and the public profile id.

Public ids look like UUIDs so the mobile client can decode them as such:
a fixed prefix followed by the key as 12 zero-padded lowercase hex digits,
e.g. 1 -> "550e8400-e29b-41d4-a716-000000000001". This is a presentation
scheme only; it is reversible by anyone and carries no authority.
"""
from __future__ import annotations

import re

from services.errors import InvalidProfileTokenError

TOKEN_PREFIX = "550e8400-e29b-41d4-a716-"
_SUFFIX_DIGITS = 12
MAX_ID = 16**_SUFFIX_DIGITS - 1

_TOKEN_RE = re.compile(r"^550e8400-e29b-41d4-a716-([0-9a-f]{12})$", re.IGNORECASE)


def id_to_token(internal_id: int) -> str:
    if isinstance(internal_id, bool) or not isinstance(internal_id, int):
        raise TypeError(f"profile id must be an int, got {type(internal_id).__name__}")
    if internal_id < 0 or internal_id > MAX_ID:
        raise ValueError(f"profile id out of range: {internal_id}")
    return f"{TOKEN_PREFIX}{internal_id:0{_SUFFIX_DIGITS}x}"


def token_to_id(token: str) -> int:
    match = _TOKEN_RE.match((token or "").strip())
    if match is None:
        raise InvalidProfileTokenError(token)
    return int(match.group(1), 16)


def is_token(value: str) -> bool:
    return bool(_TOKEN_RE.match((value or "").strip()))
