"""Verification pipeline: decode, check the signature, validate the claims."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .claims import Claims
from .config import VerifierSettings
from .decoder import decode_token
from .errors import (
    ClaimsValidationError,
    FailureReason,
    LicenseVerificationError,
    SignatureError,
    TokenDecodeError,
)
from .signature import TrustAnchor, verify_signature
from .validator import VerificationContext, validate_claims


@dataclass(frozen=True)
class VerificationOutcome:
    valid: bool
    claims: Optional[Claims] = None
    error: Optional[FailureReason] = None
    message: Optional[str] = None
    details: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def success(cls, claims: Claims) -> "VerificationOutcome":
        return cls(valid=True, claims=claims)

    @classmethod
    def failure(
        cls, exc: LicenseVerificationError, claims: Optional[Claims] = None
    ) -> "VerificationOutcome":
        return cls(valid=False, claims=claims, error=exc.reason, message=exc.message, details=dict(exc.details))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.valid,
            "error": self.error.value if self.error else None,
            "message": self.message,
            "details": dict(sorted(self.details.items())),
            "payload": self.claims.as_dict() if self.claims else None,
        }


def verify_license(
    token: str, trust_anchor: TrustAnchor, context: VerificationContext
) -> VerificationOutcome:
    """Verify ``token`` against ``trust_anchor`` at ``context.current_time``.

    Every stage failure is returned as a failed outcome. Claims are attached
    only once the signature has been verified.
    """
    try:
        decoded = decode_token(token)
    except TokenDecodeError as exc:
        return VerificationOutcome.failure(exc)

    try:
        verify_signature(decoded.signing_input, decoded.signature_segment, trust_anchor)
    except SignatureError as exc:
        return VerificationOutcome.failure(exc)

    try:
        validate_claims(decoded.claims, context)
    except ClaimsValidationError as exc:
        return VerificationOutcome.failure(exc, claims=decoded.claims)

    return VerificationOutcome.success(decoded.claims)


class LicenseVerifier:
    """Binds one trust anchor to :func:`verify_license`.

    ``LicenseVerifier(key)`` is the per-call key mode wrapped once;
    :meth:`embedded` uses the key resolved from settings, falling back to the
    compiled-in default.
    """

    def __init__(self, trust_anchor: TrustAnchor) -> None:
        self._trust_anchor = trust_anchor

    @classmethod
    def embedded(cls, settings: Optional[VerifierSettings] = None) -> "LicenseVerifier":
        settings = settings or VerifierSettings.from_env()
        return cls(settings.public_key)

    @property
    def trust_anchor(self) -> TrustAnchor:
        return self._trust_anchor

    def verify(self, token: str, context: VerificationContext) -> VerificationOutcome:
        return verify_license(token, self._trust_anchor, context)


__all__ = ["LicenseVerifier", "VerificationOutcome", "verify_license"]
