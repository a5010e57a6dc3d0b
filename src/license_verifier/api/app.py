"""FastAPI backend exposing the deployment's license status."""
from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from .. import __version__
from ..logging_utils import configure_logging
from ..service import LicenseService
from .models import HealthResponse, LicenseStatusPayload

logger = configure_logging()


def create_app(service: Optional[LicenseService] = None) -> FastAPI:
    app = FastAPI(title="License verifier", version=__version__, docs_url=None, redoc_url=None)
    app.state.license = service or LicenseService()

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        limits = app.state.license.limits()
        return HealthResponse(
            status="ok" if limits.is_valid else "degraded",
            version=__version__,
            license_valid=limits.is_valid,
        )

    @app.get("/api/license/status", response_model=LicenseStatusPayload)
    def license_status(refresh: bool = False) -> LicenseStatusPayload:
        service_: LicenseService = app.state.license
        limits = service_.refresh() if refresh else service_.limits()
        logger.debug("License status requested (valid=%s)", limits.is_valid)
        return LicenseStatusPayload(
            customerName=limits.customer_name,
            type=limits.license_type,
            maxProductLines=limits.max_product_lines,
            maxUsers=limits.max_users,
            expiresAt=limits.expires_at,
            isValid=limits.is_valid,
            warning=limits.warning,
            error=limits.error,
        )

    return app
