"""Pydantic response models for the status API."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"] = "ok"
    time: datetime = Field(default_factory=_utcnow)
    version: str
    license_valid: bool


class LicenseStatusPayload(BaseModel):
    customerName: str
    type: str
    maxProductLines: int
    maxUsers: int
    expiresAt: Optional[str]
    isValid: bool
    warning: Optional[str] = None
    error: Optional[str] = None
