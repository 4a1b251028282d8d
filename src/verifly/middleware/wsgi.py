"""
WSGI middleware for Verifly webhook verification (Flask).
"""

from __future__ import annotations

import json
from io import BytesIO
from typing import Any, Callable, Iterable

from ..errors import ErrorKind, VeriflyError
from ..headers import extract_webhook_signature
from ..webhook import Webhook

DEFAULT_WEBHOOK_PATH = "/webhook"

ENVIRON_KEY = "verifly.event"


def _extract_headers(environ: dict[str, Any]) -> dict[str, str]:
    """Extract HTTP headers from WSGI environ."""
    headers: dict[str, str] = {}
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            # HTTP_X_VERIFLY_SIGNATURE -> x-verifly-signature
            header_name = key[5:].replace("_", "-").lower()
            headers[header_name] = value
        elif key == "CONTENT_TYPE":
            headers["content-type"] = value
    return headers


def _read_body(environ: dict[str, Any]) -> bytes:
    """Read the request body and rewind wsgi.input for downstream apps."""
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    stream = environ.get("wsgi.input")
    body = stream.read(length) if stream is not None and length > 0 else b""
    environ["wsgi.input"] = BytesIO(body)
    return body


class VeriflyWebhookWSGIMiddleware:
    """
    WSGI middleware that verifies Verifly webhook deliveries.

    POST requests to `path` are checked against X-Verifly-Signature. A
    verified delivery is attached to `environ["verifly.event"]` as a
    WebhookEvent; anything else is answered with 401. Other paths pass
    through untouched.

    Args:
        app: WSGI application
        secret_key: Application secret key
        path: Webhook route. Default: /webhook

    Example (Flask):
        >>> app = Flask(__name__)
        >>> app.wsgi_app = VeriflyWebhookWSGIMiddleware(app.wsgi_app, secret_key=SECRET_KEY)
        >>>
        >>> @app.post("/webhook")
        >>> def webhook():
        ...     event = request.environ["verifly.event"]
        ...     return "OK"
    """

    def __init__(
        self,
        app: Callable[..., Iterable[bytes]],
        secret_key: str,
        path: str = DEFAULT_WEBHOOK_PATH,
    ):
        self.app = app
        self.path = path
        self.webhook = Webhook(secret_key)

    def __call__(
        self,
        environ: dict[str, Any],
        start_response: Callable[..., Any],
    ) -> Iterable[bytes]:
        method = environ.get("REQUEST_METHOD", "GET")
        if method != "POST" or environ.get("PATH_INFO", "/") != self.path:
            return self.app(environ, start_response)

        body = _read_body(environ)
        signature = extract_webhook_signature(_extract_headers(environ))

        try:
            event = self.webhook.construct_event(body, signature)
        except VeriflyError as e:
            if e.kind is ErrorKind.VALIDATION:
                return self._error_response(start_response, "400 Bad Request", e.message)
            return self._error_response(start_response, "401 Unauthorized", "Invalid signature")

        environ[ENVIRON_KEY] = event
        return self.app(environ, start_response)

    def _error_response(
        self,
        start_response: Callable[..., Any],
        status: str,
        error: str,
    ) -> Iterable[bytes]:
        body = json.dumps({"error": error}).encode("utf-8")
        start_response(
            status,
            [
                ("Content-Type", "application/json"),
                ("Content-Length", str(len(body))),
            ],
        )
        return [body]
