from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.enums import IdentifierKind


@dataclass(frozen=True)
class Identifier:
    kind: IdentifierKind
    value: str


# -----------------------------------------------------------------------------
# Inbound bodies
# -----------------------------------------------------------------------------


def _number_as_text(v: Any) -> Any:
    # JSON numbers for ids and phones (123456, 79001234567) are sent as text
    if isinstance(v, int) and not isinstance(v, bool):
        return str(v)
    if isinstance(v, float) and not isinstance(v, bool):
        return str(int(v)) if v.is_integer() else str(v)
    return v


class ProdamusRequest(BaseModel):
    """
    Common fields for every forwarded operation.

    Everything is optional at the model level: required-field checks happen in
    the route so the caller gets the full list of missing names in one 400.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    prodamus_url: Optional[str] = Field(default=None, alias="prodamusUrl")
    secret_key: Optional[str] = Field(default=None, alias="secretKey")
    subscription: Optional[str] = None

    @field_validator("subscription", mode="before")
    @classmethod
    def _subscription_as_text(cls, v: Any) -> Any:
        return _number_as_text(v)

    def missing_common(self) -> List[str]:
        missing = []
        if not self.prodamus_url:
            missing.append("prodamusUrl")
        if not self.secret_key:
            missing.append("secretKey")
        if not self.subscription:
            missing.append("subscription")
        return missing


class IdentifiedRequest(ProdamusRequest):
    phone: Optional[str] = None
    email: Optional[str] = None
    profile: Optional[str] = None

    @field_validator("phone", "email", "profile", mode="before")
    @classmethod
    def _identifier_as_text(cls, v: Any) -> Any:
        return _number_as_text(v)

    def has_identifier(self) -> bool:
        return bool(self.phone or self.email or self.profile)


class SetActivityIn(IdentifiedRequest):
    is_active: Optional[bool] = Field(default=None, alias="isActive")


class SetDiscountIn(ProdamusRequest):
    # Range and type are checked by validate_discount so form bodies ("25") work too
    discount: Optional[Any] = None


class SetPaymentDateIn(IdentifiedRequest):
    date: Optional[str] = None


# -----------------------------------------------------------------------------
# Outbound envelopes
# -----------------------------------------------------------------------------

class ActivityEcho(BaseModel):
    subscription: str
    identifier: str
    identifierType: str
    isActive: bool


class DiscountEcho(BaseModel):
    subscription: str
    discount: Any


class PaymentDateEcho(BaseModel):
    subscription: str
    newDate: str
    identifier: str
    identifierType: str


class SuccessEnvelope(BaseModel):
    success: bool = True
    message: str
    data: Any = None
    request: Dict[str, Any]
