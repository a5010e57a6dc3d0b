"""Compact token decoding: segment split, payload decoding and claims parsing."""
from __future__ import annotations

from dataclasses import dataclass

from pydantic import ValidationError

from .claims import Claims
from .encoding import b64url_decode
from .errors import FailureReason, TokenDecodeError

SEGMENT_DELIMITER = "."


@dataclass(frozen=True)
class DecodedToken:
    header_segment: str
    payload_segment: str
    signature_segment: str
    payload: bytes
    signing_input: bytes
    claims: Claims

    @property
    def header_bytes(self) -> bytes:
        """Header segment as signed material; its contents are not interpreted."""
        return self.header_segment.encode("utf-8")


def decode_token(token: str) -> DecodedToken:
    if not isinstance(token, str):
        raise TokenDecodeError(FailureReason.MALFORMED_TOKEN, "Token must be a string")

    parts = token.split(SEGMENT_DELIMITER)
    if len(parts) != 3 or not all(parts):
        raise TokenDecodeError(
            FailureReason.MALFORMED_TOKEN,
            f"Invalid token format: expected 3 non-empty segments, got {len(parts)}",
        )
    header_segment, payload_segment, signature_segment = parts

    # Signed bytes come from the original segments, never from re-encoded values.
    try:
        signing_input = f"{header_segment}{SEGMENT_DELIMITER}{payload_segment}".encode("utf-8")
    except UnicodeEncodeError as exc:
        raise TokenDecodeError(FailureReason.MALFORMED_TOKEN, "Token is not valid text") from exc

    try:
        payload = b64url_decode(payload_segment)
    except ValueError as exc:
        raise TokenDecodeError(FailureReason.INVALID_ENCODING, f"Invalid base64 payload: {exc}") from exc

    try:
        claims = Claims.model_validate_json(payload.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise TokenDecodeError(FailureReason.INVALID_CLAIMS, "Payload is not UTF-8 text") from exc
    except ValidationError as exc:
        raise TokenDecodeError(
            FailureReason.INVALID_CLAIMS,
            f"Invalid JSON payload: {exc.error_count()} error(s), first: {exc.errors()[0]['msg']}",
        ) from exc

    return DecodedToken(
        header_segment=header_segment,
        payload_segment=payload_segment,
        signature_segment=signature_segment,
        payload=payload,
        signing_input=signing_input,
        claims=claims,
    )


__all__ = ["DecodedToken", "SEGMENT_DELIMITER", "decode_token"]
