from __future__ import annotations

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base class for errors that carry their own HTTP mapping."""

    status_code: int = 500

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra: Dict[str, Any] = extra

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": False, "error": self.message}
        payload.update(self.extra)
        return payload


class ValidationError(ServiceError):
    """Bad, missing or conflicting caller input."""

    status_code = 400


class UpstreamError(ServiceError):
    """
    Prodamus answered with a non-2xx status, or could not be reached.

    provider_status is None for transport failures and timeouts. We always
    answer the caller with 500.
    """

    def __init__(
        self,
        message: str,
        *,
        endpoint: str,
        provider_status: Optional[int] = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.endpoint = endpoint
        self.provider_status = provider_status
        self.body = body

    def to_payload(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": OPERATION_FAILURES.get(self.endpoint, "External API Error"),
            "details": self.message,
            "status": self.provider_status,
            "prodamusError": self.body,
        }


OPERATION_FAILURES: Dict[str, str] = {
    "setActivity": "Failed to update subscription activity",
    "setSubscriptionDiscount": "Failed to update subscription discount",
    "setSubscriptionPaymentDate": "Failed to update subscription payment date",
}
