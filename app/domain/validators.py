from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import settings
from app.domain.enums import IdentifierKind
from app.domain.models import Identifier
from app.errors import ValidationError

PAYMENT_DATE_FORMAT = "%Y-%m-%d %H:%M"
PAYMENT_DATE_EXAMPLE = "2025-12-31 23:59"
_PAYMENT_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}", re.ASCII)

Number = Union[int, float]


def resolve_identifier(
    phone: Optional[str] = None,
    email: Optional[str] = None,
    profile: Optional[str] = None,
) -> Optional[Identifier]:
    """
    Pick the single customer identifier the caller supplied.

    Empty strings count as absent. Returns None when nothing was supplied;
    whether that is an error depends on the operation.
    """
    supplied = [
        Identifier(kind, value)
        for kind, value in (
            (IdentifierKind.phone, phone),
            (IdentifierKind.email, email),
            (IdentifierKind.profile, profile),
        )
        if value
    ]
    if len(supplied) > 1:
        raise ValidationError("Provide only one identifier: phone, email, or profile")
    return supplied[0] if supplied else None


def validate_discount(discount: Any) -> Number:
    if isinstance(discount, bool) or discount is None:
        raise ValidationError("Discount must be a number between 0 and 100")

    value: Number
    if isinstance(discount, (int, float)):
        value = discount
    elif isinstance(discount, str):
        text = discount.strip()
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                raise ValidationError("Discount must be a number between 0 and 100") from None
    else:
        raise ValidationError("Discount must be a number between 0 and 100")

    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError("Discount must be a number between 0 and 100")
    if value < 0 or value > 100:
        raise ValidationError("Discount must be between 0 and 100")
    return value


def _tz() -> Optional[ZoneInfo]:
    name = settings.PAYMENT_DATE_TIMEZONE
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError as e:
        raise RuntimeError(f"Unknown PAYMENT_DATE_TIMEZONE: {name}") from e


def current_time() -> datetime:
    """Wall-clock now, naive, in the zone payment dates are written in."""
    tz = _tz()
    if tz is None:
        return datetime.now()
    return datetime.now(tz).replace(tzinfo=None)


def parse_payment_date(date: Optional[str], now: Optional[datetime] = None) -> datetime:
    """
    Parse a YYYY-MM-DD HH:MM payment date and require it to be in the future.

    `now` is naive and expressed in the same zone as the date string.
    """
    if not isinstance(date, str) or not _PAYMENT_DATE_RE.fullmatch(date):
        raise ValidationError(
            "Date must be in YYYY-MM-DD HH:MM format",
            example=PAYMENT_DATE_EXAMPLE,
        )
    try:
        parsed = datetime.strptime(date, PAYMENT_DATE_FORMAT)
    except ValueError:
        raise ValidationError(
            "Date must be in YYYY-MM-DD HH:MM format",
            example=PAYMENT_DATE_EXAMPLE,
        ) from None

    if parsed <= (now or current_time()):
        raise ValidationError("Date cannot be in the past")
    return parsed
