"""Decoded license claims."""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Claims(BaseModel):
    """Entitlements asserted by a license token payload.

    Field names follow Python conventions; only the wire names used inside
    the token payload are accepted on input, and ``model_dump(by_alias=True)``
    gives the payload shape back.
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="ignore")

    customer_name: str = Field(alias="customerName")
    license_type: str = Field(alias="type", validation_alias=AliasChoices("type", "licenseType"))
    max_product_lines: int = Field(default=0, ge=0, alias="maxProductLines")
    max_users: Optional[int] = Field(default=None, ge=0, alias="maxUsers")
    expires_at: str = Field(alias="expiresAt")
    machine_id: Optional[str] = Field(default=None, alias="machineId")

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
