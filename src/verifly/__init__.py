"""
Verifly SDK for Python

Create and poll identity-verification sessions, and verify signed
webhook deliveries from the Verifly API.
"""

import logging

from ._version import __version__
from .client import AsyncVeriflyClient, VeriflyClient
from .config import ClientOptions
from .diagnostics import DiagnosticSink, logging_sink, noop_sink
from .errors import ErrorKind, VeriflyError
from .models import EventType, SessionStatus, SignedRequest, VerificationMethod, WebhookEvent
from .signing import canonical_json, sign, sign_request
from .webhook import Webhook, construct_event, generate_signature, infer_event_type, verify

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "AsyncVeriflyClient",
    "ClientOptions",
    "DiagnosticSink",
    "ErrorKind",
    "EventType",
    "SessionStatus",
    "SignedRequest",
    "VerificationMethod",
    "VeriflyClient",
    "VeriflyError",
    "Webhook",
    "WebhookEvent",
    "canonical_json",
    "construct_event",
    "generate_signature",
    "infer_event_type",
    "logging_sink",
    "noop_sink",
    "sign",
    "sign_request",
    "verify",
]

# Middleware imports - optional, require framework dependencies
try:
    from .middleware.asgi import VeriflyWebhookASGIMiddleware
    __all__.append("VeriflyWebhookASGIMiddleware")
except ImportError:
    pass

from .middleware.wsgi import VeriflyWebhookWSGIMiddleware

__all__.append("VeriflyWebhookWSGIMiddleware")
