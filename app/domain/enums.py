from __future__ import annotations

from enum import Enum


class IdentifierKind(str, Enum):
    phone = "phone"
    email = "email"
    profile = "profile"


class ProdamusEndpoint(str, Enum):
    set_activity = "setActivity"
    set_subscription_discount = "setSubscriptionDiscount"
    set_subscription_payment_date = "setSubscriptionPaymentDate"


# Provider field that carries each identifier kind. profile has none.
CUSTOMER_FIELDS = {
    IdentifierKind.phone: "customer_phone",
    IdentifierKind.email: "customer_email",
}
