"""Host-side license status: configured key, current clock and fingerprint."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from .config import VerifierSettings
from .fingerprint import system_fingerprint
from .limits import LicenseLimits, resolve_limits
from .logging_utils import configure_logging
from .validator import VerificationContext
from .verifier import LicenseVerifier, VerificationOutcome

logger = configure_logging()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LicenseService:
    """Verifies the deployment's license key and caches the effective limits."""

    def __init__(
        self,
        settings: Optional[VerifierSettings] = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
        fingerprint: Optional[Callable[[], str]] = None,
    ) -> None:
        if settings is not None:
            configure_logging(settings)
        self.settings = settings or VerifierSettings.from_env()
        self.verifier = LicenseVerifier.embedded(self.settings)
        self._clock = clock
        self._fingerprint = fingerprint or system_fingerprint
        self._outcome: Optional[VerificationOutcome] = None
        self._limits: Optional[LicenseLimits] = None

    # ------------------------------------------------------------------
    def context(self) -> VerificationContext:
        return VerificationContext(
            current_time=self._clock(),
            system_fingerprint=self.settings.system_fingerprint or self._fingerprint(),
        )

    def verify(self) -> Optional[VerificationOutcome]:
        token = self.settings.license_key
        if not token:
            logger.info("No license key configured, running on the free tier")
            return None

        outcome = self.verifier.verify(token, self.context())
        if outcome.valid and outcome.claims is not None:
            logger.info(
                "License verified for %s (%s)", outcome.claims.customer_name, outcome.claims.license_type
            )
        else:
            reason = outcome.error.value if outcome.error else "unknown"
            logger.warning("License rejected: %s (%s)", reason, outcome.message)
        return outcome

    # ------------------------------------------------------------------
    @property
    def outcome(self) -> Optional[VerificationOutcome]:
        self.limits()
        return self._outcome

    def limits(self, *, force: bool = False) -> LicenseLimits:
        if self._limits is not None and not force:
            return self._limits
        self._outcome = self.verify()
        self._limits = resolve_limits(self._outcome)
        return self._limits

    def refresh(self) -> LicenseLimits:
        self._limits = None
        return self.limits(force=True)


__all__ = ["LicenseService"]
