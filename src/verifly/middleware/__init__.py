"""
Verifly webhook middleware for ASGI and WSGI frameworks.

Re-exports middleware classes for convenient imports:
    from verifly.middleware import VeriflyWebhookASGIMiddleware
    from verifly.middleware import VeriflyWebhookWSGIMiddleware
"""

from .wsgi import VeriflyWebhookWSGIMiddleware

__all__: list[str] = ["VeriflyWebhookWSGIMiddleware"]

# ASGI middleware (FastAPI, Starlette)
try:
    from .asgi import VeriflyWebhookASGIMiddleware
    __all__.append("VeriflyWebhookASGIMiddleware")
except ImportError:
    pass
