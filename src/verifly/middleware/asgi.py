"""
ASGI middleware for Verifly webhook verification (FastAPI/Starlette).
"""

from typing import Any, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..errors import ErrorKind, VeriflyError
from ..headers import extract_webhook_signature
from ..webhook import Webhook

DEFAULT_WEBHOOK_PATH = "/webhook"


class VeriflyWebhookASGIMiddleware(BaseHTTPMiddleware):
    """
    ASGI middleware that verifies Verifly webhook deliveries.

    POST requests to `path` are checked against X-Verifly-Signature. A
    verified delivery is attached to `request.state.verifly_event` as a
    WebhookEvent; anything else is answered with 401 before reaching the
    route. Other paths pass through untouched.

    Args:
        app: ASGI application
        secret_key: Application secret key
        path: Webhook route. Default: /webhook

    Example (FastAPI):
        >>> app = FastAPI()
        >>> app.add_middleware(VeriflyWebhookASGIMiddleware, secret_key=SECRET_KEY)
        >>>
        >>> @app.post("/webhook")
        >>> async def webhook(request: Request):
        ...     event = request.state.verifly_event
        ...     if event.type == "verification.success":
        ...         mark_verified(event.id)
        ...     return {"received": True}
    """

    def __init__(
        self,
        app: Any,
        secret_key: str,
        path: str = DEFAULT_WEBHOOK_PATH,
    ):
        super().__init__(app)
        self.path = path
        self.webhook = Webhook(secret_key)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        if request.method != "POST" or request.url.path != self.path:
            return await call_next(request)

        body = await request.body()
        signature = extract_webhook_signature(request.headers)

        try:
            event = self.webhook.construct_event(body, signature)
        except VeriflyError as e:
            if e.kind is ErrorKind.VALIDATION:
                return JSONResponse(status_code=400, content={"error": e.message})
            return JSONResponse(status_code=401, content={"error": "Invalid signature"})

        request.state.verifly_event = event
        return await call_next(request)
