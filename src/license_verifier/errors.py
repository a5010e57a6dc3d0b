"""Failure taxonomy shared by every verification stage."""
from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class FailureReason(str, Enum):
    MALFORMED_TOKEN = "MalformedToken"
    INVALID_ENCODING = "InvalidEncoding"
    INVALID_CLAIMS = "InvalidClaims"
    INVALID_SIGNATURE_ENCODING = "InvalidSignatureEncoding"
    INVALID_SIGNATURE_FORMAT = "InvalidSignatureFormat"
    INVALID_PUBLIC_KEY = "InvalidPublicKey"
    SIGNATURE_INVALID = "SignatureInvalid"
    INVALID_EXPIRY_FORMAT = "InvalidExpiryFormat"
    EXPIRED = "Expired"
    MACHINE_BINDING_REQUIRED = "MachineBindingRequired"
    MACHINE_MISMATCH = "MachineMismatch"


class LicenseVerificationError(RuntimeError):
    """Base class for every stage failure.

    Stage errors never leave :func:`license_verifier.verifier.verify_license`;
    they are turned into a :class:`VerificationOutcome` there.
    """

    def __init__(self, reason: FailureReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message

    @property
    def details(self) -> Dict[str, str]:
        return {}


class TokenDecodeError(LicenseVerificationError):
    """Raised by the token decoder."""


class SignatureError(LicenseVerificationError):
    """Raised by the signature verifier."""


class ClaimsValidationError(LicenseVerificationError):
    """Raised by the claims validator."""


class MachineMismatchError(ClaimsValidationError):
    def __init__(self, expected: str, actual: Optional[str]) -> None:
        super().__init__(
            FailureReason.MACHINE_MISMATCH,
            f"Machine ID mismatch. License bound to {expected}, system is {actual}",
        )
        self.expected = expected
        self.actual = actual

    @property
    def details(self) -> Dict[str, str]:
        return {"expected": self.expected, "actual": self.actual or ""}


__all__ = [
    "ClaimsValidationError",
    "FailureReason",
    "LicenseVerificationError",
    "MachineMismatchError",
    "SignatureError",
    "TokenDecodeError",
]
