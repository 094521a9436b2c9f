from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request

from app.api.deps import get_prodamus_client, parse_body
from app.domain.models import (
    ActivityEcho,
    DiscountEcho,
    PaymentDateEcho,
    SetActivityIn,
    SetDiscountIn,
    SetPaymentDateIn,
    SuccessEnvelope,
)
from app.domain.validators import (
    PAYMENT_DATE_EXAMPLE,
    parse_payment_date,
    resolve_identifier,
    validate_discount,
)
from app.errors import ValidationError
from app.services.prodamus_client import ProdamusClient

logger = logging.getLogger("subscriptions")

router = APIRouter(tags=["subscriptions"])

_EXAMPLE_COMMON: Dict[str, Any] = {
    "prodamusUrl": "https://example.payform.ru",
    "secretKey": "your_secret_key",
    "subscription": "123456",
}
_EXAMPLE_IDENTIFIER: Dict[str, Any] = {
    "phone": "+79001234567",
    "email": "user@example.com (instead of phone)",
    "profile": "user_profile_id (instead of phone)",
}


def _require(missing: List[str], example: Dict[str, Any]) -> None:
    if missing:
        raise ValidationError(
            "Missing required parameters",
            missing=missing,
            example=example,
        )


@router.post("/setActivity", response_model=SuccessEnvelope)
async def set_activity(
    request: Request,
    client: ProdamusClient = Depends(get_prodamus_client),
) -> SuccessEnvelope:
    """Activate or deactivate a customer's subscription."""
    req = await parse_body(request, SetActivityIn)

    missing = req.missing_common()
    if not req.has_identifier():
        missing.append("phone, email, or profile")
    if req.is_active is None:
        missing.append("isActive")
    _require(missing, {**_EXAMPLE_COMMON, **_EXAMPLE_IDENTIFIER, "isActive": False})

    identifier = resolve_identifier(req.phone, req.email, req.profile)

    data = await client.set_activity(
        prodamus_url=req.prodamus_url,
        secret_key=req.secret_key,
        subscription=req.subscription,
        identifier=identifier,
        is_active=req.is_active,
    )

    logger.info(
        "subscription_activity_updated",
        extra={"subscription": req.subscription, "is_active": req.is_active},
    )
    return SuccessEnvelope(
        message=f"Subscription {'activated' if req.is_active else 'deactivated'} successfully",
        data=data,
        request=ActivityEcho(
            subscription=req.subscription,
            identifier=identifier.value,
            identifierType=identifier.kind.value,
            isActive=req.is_active,
        ).model_dump(),
    )


@router.post("/setSubscriptionDiscount", response_model=SuccessEnvelope)
async def set_subscription_discount(
    request: Request,
    client: ProdamusClient = Depends(get_prodamus_client),
) -> SuccessEnvelope:
    """Set the discount applied to future subscription payments."""
    req = await parse_body(request, SetDiscountIn)

    missing = req.missing_common()
    if req.discount is None or req.discount == "":
        missing.append("discount")
    _require(missing, {**_EXAMPLE_COMMON, "discount": 25})
    discount = validate_discount(req.discount)

    data = await client.set_subscription_discount(
        prodamus_url=req.prodamus_url,
        secret_key=req.secret_key,
        subscription=req.subscription,
        discount=discount,
    )

    logger.info("subscription_discount_updated", extra={"subscription": req.subscription})
    return SuccessEnvelope(
        message="Subscription discount updated successfully",
        data=data,
        request=DiscountEcho(subscription=req.subscription, discount=discount).model_dump(),
    )


@router.post("/setSubscriptionPaymentDate", response_model=SuccessEnvelope)
async def set_subscription_payment_date(
    request: Request,
    client: ProdamusClient = Depends(get_prodamus_client),
) -> SuccessEnvelope:
    """Move the next subscription charge to a new date (YYYY-MM-DD HH:MM)."""
    req = await parse_body(request, SetPaymentDateIn)

    missing = req.missing_common()
    if not req.date:
        missing.append("date")
    if not req.has_identifier():
        missing.append("phone, email, or profile")
    _require(missing, {**_EXAMPLE_COMMON, "date": PAYMENT_DATE_EXAMPLE, **_EXAMPLE_IDENTIFIER})

    identifier = resolve_identifier(req.phone, req.email, req.profile)
    # Checked here too so format/past errors win over the identifier-type error
    parse_payment_date(req.date)

    data = await client.set_subscription_payment_date(
        prodamus_url=req.prodamus_url,
        secret_key=req.secret_key,
        subscription=req.subscription,
        date=req.date,
        identifier=identifier,
    )

    logger.info(
        "subscription_payment_date_updated",
        extra={"subscription": req.subscription, "date": req.date},
    )
    return SuccessEnvelope(
        message="Subscription payment date updated successfully",
        data=data,
        request=PaymentDateEcho(
            subscription=req.subscription,
            newDate=req.date,
            identifier=identifier.value,
            identifierType=identifier.kind.value,
        ).model_dump(),
    )
