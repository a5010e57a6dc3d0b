"""Offline verification of signed license tokens.

The pipeline decodes a compact ``header.payload.signature`` token, checks its
ECDSA P-256 signature against a trust anchor and validates expiry and machine
binding against caller supplied context.
"""

__version__ = "1.0.0"

from .claims import Claims
from .decoder import DecodedToken, decode_token
from .errors import (
    ClaimsValidationError,
    FailureReason,
    LicenseVerificationError,
    MachineMismatchError,
    SignatureError,
    TokenDecodeError,
)
from .signature import load_trust_anchor, verify_signature
from .validator import VerificationContext, validate_claims
from .verifier import LicenseVerifier, VerificationOutcome, verify_license

__all__ = [
    "Claims",
    "ClaimsValidationError",
    "DecodedToken",
    "FailureReason",
    "LicenseVerificationError",
    "LicenseVerifier",
    "MachineMismatchError",
    "SignatureError",
    "TokenDecodeError",
    "VerificationContext",
    "VerificationOutcome",
    "decode_token",
    "load_trust_anchor",
    "validate_claims",
    "verify_license",
    "verify_signature",
]
