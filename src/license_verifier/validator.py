"""Expiry and machine-binding checks against caller supplied context."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .claims import Claims
from .errors import ClaimsValidationError, FailureReason, MachineMismatchError

FINGERPRINT_DELIMITER = "|"


@dataclass(frozen=True)
class VerificationContext:
    """Inputs that are not part of the token.

    ``current_time`` must be timezone-aware; the verifier never reads a clock.
    """

    current_time: datetime
    system_fingerprint: Optional[str] = None

    def __post_init__(self) -> None:
        if self.current_time.tzinfo is None or self.current_time.utcoffset() is None:
            raise ValueError("current_time must be timezone-aware")

    @classmethod
    def from_timestamp_ms(
        cls, timestamp_ms: float, system_fingerprint: Optional[str] = None
    ) -> "VerificationContext":
        return cls(
            current_time=datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc),
            system_fingerprint=system_fingerprint,
        )

    @property
    def machine_id(self) -> Optional[str]:
        if self.system_fingerprint is None:
            return None
        return self.system_fingerprint.split(FINGERPRINT_DELIMITER, 1)[0]


def parse_expiry(value: str) -> datetime:
    try:
        expiry = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ClaimsValidationError(
            FailureReason.INVALID_EXPIRY_FORMAT, f"Invalid expiresAt value: {value!r}"
        ) from exc
    if expiry.tzinfo is None or expiry.utcoffset() is None:
        raise ClaimsValidationError(
            FailureReason.INVALID_EXPIRY_FORMAT, f"expiresAt has no timezone: {value!r}"
        )
    return expiry


def validate_claims(claims: Claims, context: VerificationContext) -> None:
    expiry = parse_expiry(claims.expires_at)
    # Inclusive boundary: a license is still valid at its exact expiry instant.
    if context.current_time > expiry:
        raise ClaimsValidationError(FailureReason.EXPIRED, "License expired")

    if claims.machine_id is None:
        return
    if context.system_fingerprint is None:
        raise ClaimsValidationError(
            FailureReason.MACHINE_BINDING_REQUIRED,
            "License requires machine binding, but no system ID provided",
        )
    if context.machine_id != claims.machine_id:
        raise MachineMismatchError(expected=claims.machine_id, actual=context.machine_id)


__all__ = ["FINGERPRINT_DELIMITER", "VerificationContext", "parse_expiry", "validate_claims"]
