"""Strict base64url helpers for compact token segments."""
from __future__ import annotations

import base64
import binascii
import re

_B64URL_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def b64url_decode(segment: str) -> bytes:
    """Decode an unpadded, canonical base64url segment.

    Raises ``ValueError`` for padding, characters outside the URL-safe
    alphabet, impossible lengths and non-zero unused trailing bits;
    ``base64.urlsafe_b64decode`` on its own silently drops unknown characters
    and ignores the unused bits of the last character.
    """
    if not _B64URL_ALPHABET.fullmatch(segment):
        raise ValueError("segment is not unpadded base64url")
    if len(segment) % 4 == 1:
        raise ValueError("segment has an impossible base64 length")
    padding = "=" * (-len(segment) % 4)
    try:
        decoded = base64.urlsafe_b64decode(segment + padding)
    except binascii.Error as exc:
        raise ValueError(str(exc)) from exc
    # Two spellings of the same bytes would let a tampered segment verify.
    if base64.urlsafe_b64encode(decoded).rstrip(b"=").decode("ascii") != segment:
        raise ValueError("segment is not canonical base64url")
    return decoded
