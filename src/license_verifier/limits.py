"""Effective limits derived from a verification outcome.

This is caller-side policy: the verifier only exposes claims, while this
module decides what a deployment runs with when the license is missing,
expired or invalid.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from .errors import FailureReason
from .verifier import VerificationOutcome

FREE_TIER_TYPE = "COMMUNITY"
FREE_TIER_CUSTOMER = "Community Free"
FREE_TIER_PRODUCT_LINES = 1
FREE_TIER_USERS = 10
DEFAULT_MAX_USERS = 100

FREE_TIER_WARNING = (
    f"Free Tier: Limited to {FREE_TIER_PRODUCT_LINES} product line and {FREE_TIER_USERS} users."
)
EXPIRED_WARNING = (
    f"License expired. Downgraded to Free Tier ({FREE_TIER_PRODUCT_LINES} product line, {FREE_TIER_USERS} users)."
)
INVALID_WARNING = (
    f"Invalid license. Operating in Free Tier ({FREE_TIER_PRODUCT_LINES} product line, {FREE_TIER_USERS} users)."
)


@dataclass(frozen=True)
class LicenseLimits:
    max_product_lines: int
    max_users: int
    is_valid: bool
    license_type: str
    customer_name: str
    expires_at: Optional[str] = None
    warning: Optional[str] = None
    error: Optional[str] = None

    def as_dict(self) -> Dict[str, object]:
        return {
            "maxProductLines": self.max_product_lines,
            "maxUsers": self.max_users,
            "isValid": self.is_valid,
            "licenseType": self.license_type,
            "customerName": self.customer_name,
            "expiresAt": self.expires_at,
            "warning": self.warning,
            "error": self.error,
        }


def free_tier(
    warning: Optional[str] = None,
    *,
    is_valid: bool = True,
    error: Optional[str] = None,
    customer_name: str = FREE_TIER_CUSTOMER,
    expires_at: Optional[str] = None,
) -> LicenseLimits:
    return LicenseLimits(
        max_product_lines=FREE_TIER_PRODUCT_LINES,
        max_users=FREE_TIER_USERS,
        is_valid=is_valid,
        license_type=FREE_TIER_TYPE,
        customer_name=customer_name,
        expires_at=expires_at,
        warning=warning,
        error=error,
    )


def resolve_limits(outcome: Optional[VerificationOutcome]) -> LicenseLimits:
    """Map ``outcome`` to limits; ``None`` means no license key is configured."""
    if outcome is None:
        return free_tier(FREE_TIER_WARNING)

    claims = outcome.claims
    if outcome.valid and claims is not None:
        return LicenseLimits(
            max_product_lines=claims.max_product_lines,
            max_users=claims.max_users if claims.max_users is not None else DEFAULT_MAX_USERS,
            is_valid=True,
            license_type=claims.license_type,
            customer_name=claims.customer_name,
            expires_at=claims.expires_at,
        )

    error = outcome.error.value if outcome.error else None
    warning = EXPIRED_WARNING if outcome.error is FailureReason.EXPIRED else INVALID_WARNING
    return free_tier(
        warning,
        is_valid=False,
        error=error,
        customer_name=claims.customer_name if claims is not None else "Invalid",
        expires_at=claims.expires_at if claims is not None else None,
    )


__all__ = [
    "DEFAULT_MAX_USERS",
    "FREE_TIER_PRODUCT_LINES",
    "FREE_TIER_USERS",
    "FREE_TIER_WARNING",
    "LicenseLimits",
    "free_tier",
    "resolve_limits",
]
