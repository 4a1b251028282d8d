"""
Inbound webhook verification.

Webhook deliveries are signed with HMAC-SHA256(secret_key, body). Unlike
outbound requests there is no timestamp prefix; the payload carries its
own event and time fields.

Example:
    >>> webhook = Webhook("your-secret-key")
    >>> event = webhook.construct_event(raw_body, headers["X-Verifly-Signature"])
    >>> if event.type == "verification.success":
    ...     print("Verified:", event.id)
"""

from __future__ import annotations

import hmac
import json
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Union

from .errors import ErrorKind, VeriflyError, configuration_error
from .headers import extract_webhook_signature
from .models import EventType, WebhookEvent
from .signing import canonical_json, hmac_sha256_hex

logger = logging.getLogger(__name__)

Payload = Union[str, bytes, Mapping[str, Any]]

STATUS_EVENT_TYPES: dict[str, EventType] = {
    "verified": EventType.SUCCESS,
    "failed": EventType.FAILED,
    "expired": EventType.EXPIRED,
    "cancelled": EventType.CANCELLED,
}


def _serialize(payload: Payload) -> bytes:
    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return canonical_json(payload).encode("utf-8")


def generate_signature(secret_key: str | None, payload: Payload) -> str:
    """
    Compute the signature the service attaches to a webhook payload.

    Raw str/bytes payloads are signed as-is; mappings are serialized with
    canonical_json first.

    Raises:
        VeriflyError: CONFIGURATION if secret_key is missing
    """
    if not secret_key:
        raise configuration_error("Secret key is required to generate signature")
    return hmac_sha256_hex(secret_key, _serialize(payload))


def verify(secret_key: str | None, payload: Payload, signature: str | None) -> bool:
    """
    Check a webhook signature in constant time.

    Never raises: a missing secret, missing signature or malformed
    payload all yield False, so callers can answer 401 uniformly.

    Args:
        secret_key: Application secret key
        payload: Raw body (str/bytes) or parsed JSON mapping
        signature: Value of the X-Verifly-Signature header

    Returns:
        True if the signature matches the payload
    """
    if not secret_key:
        logger.warning("Webhook verification attempted without a secret key")
        return False
    if not signature:
        return False

    try:
        expected = generate_signature(secret_key, payload)
        return hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8"))
    except Exception:
        return False


def infer_event_type(payload: Mapping[str, Any]) -> Any:
    """
    Event type for a payload: explicit `event` wins, else mapped from `status`.

    Examples:
        >>> infer_event_type({"status": "verified"})
        'verification.success'
        >>> infer_event_type({"event": "custom.type", "status": "verified"})
        'custom.type'
    """
    explicit = payload.get("event")
    if explicit:
        return explicit
    status = payload.get("status")
    if isinstance(status, str) and status in STATUS_EVENT_TYPES:
        return STATUS_EVENT_TYPES[status].value
    return EventType.UNKNOWN.value


def _now_iso() -> str:
    # Same shape as JavaScript's Date.toISOString()
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def _parse(payload: Payload) -> Mapping[str, Any]:
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except ValueError as e:
            raise VeriflyError(ErrorKind.VALIDATION, f"Webhook body is not valid JSON: {e}") from e
    else:
        data = payload
    if not isinstance(data, Mapping):
        raise VeriflyError(ErrorKind.VALIDATION, "Webhook body must be a JSON object")
    return data


def construct_event(secret_key: str | None, payload: Payload, signature: str | None) -> WebhookEvent:
    """
    Verify a webhook and normalize it into a WebhookEvent.

    Without explicit `timestamp` or `verifiedAt` fields the event is
    stamped with the current time, so two calls on such a payload can
    disagree on `timestamp`.

    Raises:
        VeriflyError: CONFIGURATION if secret_key is missing,
            SIGNATURE if verification fails,
            VALIDATION if the verified body is not a JSON object
    """
    if not secret_key:
        raise configuration_error("Secret key is required for webhook verification")
    if not verify(secret_key, payload, signature):
        raise VeriflyError(ErrorKind.SIGNATURE)

    data = _parse(payload)
    event_id = data.get("id") or data.get("sessionId")
    return WebhookEvent(
        id=event_id,
        type=infer_event_type(data),
        data=data,
        timestamp=data.get("timestamp") or data.get("verifiedAt") or _now_iso(),
    )


class Webhook:
    """
    Webhook helper bound to one secret key.

    Args:
        secret_key: Application secret key

    Example (Flask):
        >>> webhook = Webhook(os.environ["VERIFLY_SECRET_KEY"])
        >>>
        >>> @app.post("/webhook")
        >>> def handle():
        ...     if not webhook.verify_headers(request.get_data(), request.headers):
        ...         return "Invalid signature", 401
        ...     return "OK"
    """

    def __init__(self, secret_key: str | None):
        self._secret_key = secret_key

    def __repr__(self) -> str:
        return f"Webhook(secret_key={'set' if self._secret_key else 'missing'})"

    def verify(self, payload: Payload, signature: str | None) -> bool:
        return verify(self._secret_key, payload, signature)

    def verify_headers(self, payload: Payload, headers: Mapping[str, str]) -> bool:
        """Verify using the X-Verifly-Signature header from a header mapping."""
        return verify(self._secret_key, payload, extract_webhook_signature(headers))

    def generate_signature(self, payload: Payload) -> str:
        return generate_signature(self._secret_key, payload)

    def construct_event(self, payload: Payload, signature: str | None) -> WebhookEvent:
        return construct_event(self._secret_key, payload, signature)
