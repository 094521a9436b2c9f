from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.errors import ServiceError, UpstreamError

logger = logging.getLogger("errors")

AVAILABLE_ENDPOINTS = {
    "setActivity": "POST /setActivity",
    "setSubscriptionDiscount": "POST /setSubscriptionDiscount",
    "setSubscriptionPaymentDate": "POST /setSubscriptionPaymentDate",
}


def _request_ctx(request: Request) -> dict:
    return {
        "method": request.method,
        "path": request.url.path,
        "request_id": getattr(request.state, "request_id", None),
    }


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if isinstance(exc, UpstreamError):
        logger.error(
            "upstream_error",
            extra={
                **_request_ctx(request),
                "endpoint": exc.endpoint,
                "provider_status": exc.provider_status,
                "err": exc.message,
            },
        )
    else:
        logger.info("request_rejected", extra={**_request_ctx(request), "err": exc.message})
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request parameters",
            "details": [
                {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg")}
                for err in exc.errors()
            ],
        },
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content={
                "success": False,
                "error": "Route not found",
                "message": f"Cannot {request.method} {request.url.path}",
                "availableEndpoints": AVAILABLE_ENDPOINTS,
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", extra=_request_ctx(request))
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "message": "Something went wrong" if settings.is_production else str(exc),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
