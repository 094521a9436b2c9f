from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

import httpx

from app.config import settings
from app.domain.enums import CUSTOMER_FIELDS, ProdamusEndpoint
from app.domain.models import Identifier
from app.domain.validators import Number, parse_payment_date, validate_discount
from app.errors import UpstreamError, ValidationError
from app.services import signer

logger = logging.getLogger("prodamus_client")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


# -----------------------------------------------------------------------------
# Parameter builders (pure)
# -----------------------------------------------------------------------------

def _customer_field(identifier: Optional[Identifier], operation: str) -> str:
    if identifier is None:
        raise ValidationError("Either phone or email must be provided")
    field = CUSTOMER_FIELDS.get(identifier.kind)
    if field is None:
        raise ValidationError(
            f"Identifier type '{identifier.kind.value}' is not supported by {operation}; use phone or email"
        )
    return field


def build_activity_params(
    subscription: str,
    identifier: Optional[Identifier],
    is_active: bool,
) -> Dict[str, Any]:
    field = _customer_field(identifier, ProdamusEndpoint.set_activity.value)
    return {
        "subscription": subscription,
        "active_user": "1" if is_active else "0",
        field: identifier.value,
    }


def build_discount_params(subscription: str, discount: Any) -> Dict[str, Any]:
    value: Number = validate_discount(discount)
    return {
        "subscription_id": subscription,
        "discount": value,
    }


def build_payment_date_params(
    subscription: str,
    date: str,
    identifier: Optional[Identifier],
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    parse_payment_date(date, now=now)
    field = _customer_field(identifier, ProdamusEndpoint.set_subscription_payment_date.value)
    return {
        "subscription": subscription,
        "date": date,
        "auth_type": field,
        field: identifier.value,
    }


def provider_domain(prodamus_url: str) -> str:
    """Strip a leading scheme and trailing slashes: 'https://x.payform.ru/' -> 'x.payform.ru'."""
    domain = (prodamus_url or "").strip()
    for scheme in ("https://", "http://"):
        if domain.lower().startswith(scheme):
            domain = domain[len(scheme):]
            break
    return domain.rstrip("/")


def build_url(prodamus_url: str, endpoint: str) -> str:
    return f"https://{provider_domain(prodamus_url)}/rest/{endpoint}/"


def _response_body(resp: httpx.Response) -> Any:
    text = (resp.text or "").strip()
    if not text:
        return None
    try:
        return resp.json()
    except json.JSONDecodeError:
        return text


# -----------------------------------------------------------------------------
# Client
# -----------------------------------------------------------------------------

class ProdamusClient:
    """
    Signs and forwards subscription calls to the Prodamus REST API.

    One outbound POST per call, no retries. A transport can be injected
    (httpx.MockTransport in tests).
    """

    provider_name = "prodamus"

    def __init__(
        self,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout if timeout is not None else settings.PRODAMUS_TIMEOUT_SECONDS
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def make_request(
        self,
        prodamus_url: str,
        endpoint: str,
        params: Mapping[str, Any],
        secret_key: str,
    ) -> Any:
        signature = signer.sign(params, secret_key)
        form = signer.canonicalize(params)
        form["signature"] = signature

        url = build_url(prodamus_url, endpoint)
        logger.info(
            "prodamus_request",
            extra={"endpoint": endpoint, "url": url, "fields": sorted(form)},
        )

        try:
            async with self._client() as client:
                r = await client.post(
                    url,
                    data=form,
                    headers={"Content-Type": FORM_CONTENT_TYPE},
                )
        except httpx.TimeoutException as e:
            logger.error("prodamus_timeout", extra={"endpoint": endpoint, "url": url})
            raise UpstreamError(
                f"Prodamus request timed out after {self.timeout}s",
                endpoint=endpoint,
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("prodamus_transport_error", extra={"endpoint": endpoint, "url": url, "err": str(e)})
            raise UpstreamError(
                f"Prodamus request failed: {e}",
                endpoint=endpoint,
            ) from e

        body = _response_body(r)
        if r.status_code < 200 or r.status_code >= 300:
            logger.error(
                "prodamus_http_error",
                extra={"endpoint": endpoint, "status_code": r.status_code, "body": body},
            )
            raise UpstreamError(
                f"Request failed with status code {r.status_code}",
                endpoint=endpoint,
                provider_status=r.status_code,
                body=body,
            )

        logger.info("prodamus_response", extra={"endpoint": endpoint, "status_code": r.status_code})
        return body

    async def set_activity(
        self,
        *,
        prodamus_url: str,
        secret_key: str,
        subscription: str,
        identifier: Optional[Identifier],
        is_active: bool,
    ) -> Any:
        params = build_activity_params(subscription, identifier, is_active)
        return await self.make_request(prodamus_url, ProdamusEndpoint.set_activity.value, params, secret_key)

    async def set_subscription_discount(
        self,
        *,
        prodamus_url: str,
        secret_key: str,
        subscription: str,
        discount: Any,
    ) -> Any:
        params = build_discount_params(subscription, discount)
        return await self.make_request(
            prodamus_url, ProdamusEndpoint.set_subscription_discount.value, params, secret_key
        )

    async def set_subscription_payment_date(
        self,
        *,
        prodamus_url: str,
        secret_key: str,
        subscription: str,
        date: str,
        identifier: Optional[Identifier],
        now: Optional[datetime] = None,
    ) -> Any:
        params = build_payment_date_params(subscription, date, identifier, now=now)
        return await self.make_request(
            prodamus_url, ProdamusEndpoint.set_subscription_payment_date.value, params, secret_key
        )
