"""
Prodamus request signing.

The provider recomputes the signature on its side (PHP ``Hmac::create``) and
rejects the call on any mismatch, so the byte layout here is a contract:

1. every value is turned into a string,
2. keys are sorted ascending,
3. the mapping is JSON-encoded compactly with non-ASCII left as-is,
4. HMAC-SHA256 over the UTF-8 bytes, keyed by the UTF-8 secret,
5. lowercase hex digest.

A wrong signature has no local symptom; Prodamus just answers with an auth
error. Keep this module free of I/O and global state.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import math
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from app.errors import ValidationError

logger = logging.getLogger("prodamus_signer")

Scalar = Any


def stringify_value(value: Scalar) -> str:
    """Render a parameter value the way the provider's reference client does."""
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _float_text(value)
    return str(value)


def _float_text(value: float) -> str:
    # Shortest round-trip digits; plain notation in [1e-6, 1e21), else d.ddde±N
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if 1e-6 <= abs(value) < 1e21:
        return format(Decimal(text), "f")
    mantissa, _, exponent = text.partition("e")
    exp = int(exponent)
    return f"{mantissa}e{'+' if exp >= 0 else '-'}{abs(exp)}"


def _require_utf8(name: str, text: str) -> None:
    # Lone surrogates (a JSON "\ud800" escape decodes to one) have no UTF-8 encoding
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        raise ValidationError(f"Parameter '{name}' contains invalid unicode characters") from None


def canonicalize(params: Mapping[str, Scalar]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for key in sorted(params, key=str):
        name = str(key)
        value = stringify_value(params[key])
        _require_utf8(name, name)
        _require_utf8(name, value)
        out[name] = value
    return out


def canonical_json(params: Mapping[str, Scalar]) -> str:
    return json.dumps(canonicalize(params), separators=(",", ":"), ensure_ascii=False)


def sign(
    params: Mapping[str, Scalar],
    secret_key: str,
    *,
    log: Optional[logging.Logger] = None,
) -> str:
    log = log or logger
    _require_utf8("secretKey", secret_key)
    payload = canonical_json(params)
    signature = hmac.new(
        secret_key.encode("utf-8"),
        payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    log.debug("prodamus_signature", extra={"payload": payload, "signature": signature})
    return signature

