from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.errors import ValidationError
from app.services.prodamus_client import ProdamusClient

M = TypeVar("M", bound=BaseModel)

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


@lru_cache(maxsize=1)
def get_prodamus_client() -> ProdamusClient:
    return ProdamusClient()


async def read_body(request: Request) -> Dict[str, Any]:
    """JSON or form body as a plain dict. Empty body -> {}."""
    content_type = (request.headers.get("content-type") or "").lower()

    if any(t in content_type for t in _FORM_TYPES):
        form = await request.form()
        return {k: v for k, v in form.items()}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = await request.json()
    except ValueError:
        raise ValidationError("Request body must be valid JSON") from None
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


async def parse_body(request: Request, model: Type[M]) -> M:
    data = await read_body(request)
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid request parameters",
            details=[
                {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg")}
                for err in e.errors()
            ],
        ) from None
