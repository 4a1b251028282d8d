"""
Outbound request signing.

Every API call carries X-API-Key, X-Signature and X-Timestamp headers,
where the signature is HMAC-SHA256(secret_key, timestamp + body) over the
exact serialized body that goes on the wire.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import math
import time
from decimal import Decimal
from typing import Any, Callable, Mapping

from .errors import configuration_error
from .models import SignedRequest

# Body signed for requests that carry no payload (GET/DELETE).
EMPTY_BODY = "{}"


def _js_number(value: float) -> str:
    """
    Format a float the way JavaScript's Number#toString does.

    Both use the shortest round-tripping digits; only the layout differs
    (5.0 -> "5", 1e-07 -> "1e-7", 1e+16 -> "10000000000000000").
    NaN and the infinities become null, as in JSON.stringify.
    """
    if math.isnan(value) or math.isinf(value):
        return "null"
    if value == 0:
        return "0"

    sign, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    # Position of the decimal point relative to the first digit
    point = exponent + len(digits)
    digits = digits.rstrip("0")
    count = len(digits)

    if count <= point <= 21:
        text = digits + "0" * (point - count)
    elif 0 < point <= 21:
        text = f"{digits[:point]}.{digits[point:]}"
    elif -6 < point <= 0:
        text = "0." + "0" * -point + digits
    else:
        power = point - 1
        mantissa = digits[0] + (f".{digits[1:]}" if count > 1 else "")
        text = f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"

    return f"-{text}" if sign else text


def _key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, (bool, int, float)):
        return _encode(key)
    raise TypeError(f"Keys must be str, int, float, bool or None, not {type(key).__name__}")


def _encode(value: Any) -> str:
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        return _js_number(value)
    if isinstance(value, Mapping):
        items = (f"{json.dumps(_key(k), ensure_ascii=False)}:{_encode(v)}" for k, v in value.items())
        return "{" + ",".join(items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_encode(item) for item in value) + "]"
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def canonical_json(payload: Any) -> str:
    """
    Serialize a payload the one way both sides agree on.

    Byte-identical to JSON.stringify on the server: compact separators,
    key insertion order preserved, non-ASCII emitted as-is, and numbers
    laid out as JavaScript prints them.

    Examples:
        >>> canonical_json({"phone": "5551234567", "methods": ["sms"]})
        '{"phone":"5551234567","methods":["sms"]}'
        >>> canonical_json({"timeout": 5.0, "amount": 1e-7})
        '{"timeout":5,"amount":1e-7}'
        >>> canonical_json(None)
        '{}'
    """
    if payload is None:
        return EMPTY_BODY
    return _encode(payload)


def hmac_sha256_hex(secret_key: str, message: str | bytes) -> str:
    """Lowercase hex HMAC-SHA256 of message under secret_key."""
    if isinstance(message, str):
        message = message.encode("utf-8")
    return hmac.new(secret_key.encode("utf-8"), message, hashlib.sha256).hexdigest()


def timestamp_ms() -> str:
    """Current time in milliseconds since epoch, as a decimal string."""
    return str(time.time_ns() // 1_000_000)


def sign(secret_key: str | None, timestamp: str, serialized_body: str) -> str:
    """
    Sign a serialized request body.

    Args:
        secret_key: Application secret key
        timestamp: Milliseconds since epoch as a decimal string
        serialized_body: The exact body text that will be transmitted

    Returns:
        Hex HMAC-SHA256 of timestamp + serialized_body

    Raises:
        VeriflyError: CONFIGURATION if secret_key is missing
    """
    if not secret_key:
        raise configuration_error("Secret key is required to sign requests")
    return hmac_sha256_hex(secret_key, f"{timestamp}{serialized_body}")


def sign_request(
    api_key: str,
    secret_key: str | None,
    method: str,
    path: str,
    body: Any = None,
    *,
    clock: Callable[[], str] = timestamp_ms,
) -> SignedRequest:
    """
    Serialize and sign an outbound request.

    Body-less requests are signed over "{}" even though nothing is sent.
    A fresh timestamp is read for every call.

    Args:
        api_key: Public API key
        secret_key: Application secret key
        method: HTTP method
        path: Request path
        body: Logical payload, or None
        clock: Timestamp source (override in tests)

    Returns:
        SignedRequest carrying the serialized body and auth material
    """
    serialized = canonical_json(body)
    timestamp = clock()
    signature = sign(secret_key, timestamp, serialized)
    return SignedRequest(
        method=method.upper(),
        path=path,
        body=serialized,
        timestamp=timestamp,
        signature=signature,
        api_key=api_key,
    )
