"""
Verifly API clients.
"""

from __future__ import annotations

from typing import Any

from .config import ClientOptions
from .resources import AsyncVerification, Verification
from .transport import Transport
from .webhook import Webhook


class _BaseClient:
    def __init__(
        self,
        api_key: str | None = None,
        secret_key: str | None = None,
        *,
        options: ClientOptions | None = None,
        **settings: Any,
    ):
        if options is None:
            options = ClientOptions(api_key=api_key or "", secret_key=secret_key or "", **settings)
        elif api_key or secret_key or settings:
            raise TypeError("Pass either options or individual settings, not both")

        self.options = options
        self.transport = Transport(options)
        self.webhook = Webhook(options.secret_key)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.options!r})"

    def with_options(self, **changes: Any):
        """Return a new client with some settings changed."""
        return type(self)(options=self.options.replace(**changes))

    def with_secret_key(self, secret_key: str):
        """Return a new client using a rotated secret key."""
        return self.with_options(secret_key=secret_key)

    def with_debug(self, enabled: bool):
        """Return a new client with diagnostics on or off."""
        return self.with_options(debug=enabled)

    @classmethod
    def from_env(cls, **overrides: Any):
        """Build a client from VERIFLY_* environment variables."""
        return cls(options=ClientOptions.from_env(**overrides))


class VeriflyClient(_BaseClient):
    """
    Synchronous client for the Verifly API.

    The client is immutable: with_secret_key() and with_debug() return a
    new client and leave this one untouched.

    Args:
        api_key: Public API key
        secret_key: Application secret key (required, signs every request)
        timeout_s: Request timeout in seconds. Default: 30.0
        debug: Emit signing diagnostics. Unsafe in production.
        diagnostics: Optional sink for diagnostic events
        options: Prebuilt ClientOptions instead of the settings above

    Example:
        >>> client = VeriflyClient("your-api-key", "your-secret-key")
        >>> session = client.verification.create({"phone": "5551234567", "methods": ["sms"]})
        >>> status = client.verification.get(session["sessionId"])
    """

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.verification = Verification(self.transport)


class AsyncVeriflyClient(_BaseClient):
    """
    Asynchronous client for the Verifly API.

    Example:
        >>> client = AsyncVeriflyClient("your-api-key", "your-secret-key")
        >>> session = await client.verification.create({"email": "a@example.com"})
    """

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.verification = AsyncVerification(self.transport)
