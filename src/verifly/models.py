"""
Data models for Verifly requests, sessions and webhook events.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class SessionStatus(str, Enum):
    """Server-side status of a verification session."""

    PENDING = "pending"
    WAITING = "waiting"
    METHOD_SELECTED = "method_selected"
    VERIFIED = "verified"
    FAILED = "failed"
    EXPIRED = "expired"


class VerificationMethod(str, Enum):
    """Channels a session can verify through."""

    SMS = "sms"
    WHATSAPP = "whatsapp"
    CALL = "call"
    EMAIL = "email"


class EventType(str, Enum):
    """Webhook event types inferred from a payload's status."""

    SUCCESS = "verification.success"
    FAILED = "verification.failed"
    EXPIRED = "verification.expired"
    CANCELLED = "verification.cancelled"
    UNKNOWN = "verification.unknown"


@dataclass(frozen=True)
class SignedRequest:
    """
    An outbound request with its authentication material.

    Attributes:
        method: HTTP method (GET, POST, etc.)
        path: Request path, e.g. /api/verify/create
        body: Serialized body exactly as signed ("{}" for body-less calls)
        timestamp: Milliseconds since epoch as a decimal string
        signature: Hex HMAC-SHA256 of timestamp + body
        api_key: Public API key, passed through untouched
    """
    method: str
    path: str
    body: str
    timestamp: str
    signature: str
    api_key: str

    def headers(self) -> dict[str, str]:
        """Authentication headers for this request."""
        return {
            "X-API-Key": self.api_key,
            "X-Signature": self.signature,
            "X-Timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class WebhookEvent:
    """
    A verified, normalized webhook event.

    Attributes:
        id: Session or request identifier (payload `id`, else `sessionId`)
        type: Explicit `event` field, or a type inferred from `status`
        data: The webhook payload itself (the parsed body for raw input)
        timestamp: Payload `timestamp`, else `verifiedAt`, else the time
            the event was constructed
    """
    id: str | None
    type: Any
    data: Mapping[str, Any]
    timestamp: str
