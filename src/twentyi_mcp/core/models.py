from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ResellerIdentity(BaseModel):
    """Canonical form of whatever /reseller returned; extra fields are kept."""

    id: str

    model_config = ConfigDict(extra="allow")


class AccountBalance(BaseModel):
    balance: float = 0
    currency: str = "USD"
    message: Optional[str] = None

    model_config = ConfigDict(extra="allow")


__all__ = ["ResellerIdentity", "AccountBalance"]
