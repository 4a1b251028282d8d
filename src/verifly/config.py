"""
Client configuration.

ClientOptions is immutable. Rotating the secret key or toggling debug
output means building a new value; requests already in flight keep the
options they started with.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field

from .diagnostics import DiagnosticSink, logging_sink, noop_sink
from .errors import configuration_error

DEFAULT_BASE_URL = "https://www.verifly.net"
DEFAULT_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class ClientOptions:
    """
    Settings shared by the transport and resources.

    Attributes:
        api_key: Public API key, sent as X-API-Key
        secret_key: Application secret key used for every HMAC
        timeout_s: Request timeout in seconds. Default: 30.0
        base_url: API root. Default: https://www.verifly.net
        debug: Emit signing and request diagnostics. Unsafe in production.
        diagnostics: Sink for diagnostic events. When debug is set and no
            sink is given, events go to the `verifly.diagnostics` logger.
    """
    api_key: str
    secret_key: str = field(repr=False)
    timeout_s: float = DEFAULT_TIMEOUT_S
    base_url: str = DEFAULT_BASE_URL
    debug: bool = False
    diagnostics: DiagnosticSink | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.api_key:
            raise configuration_error("API key is required")
        if not self.secret_key:
            raise configuration_error(
                "Secret key is required. Get it from Dashboard -> Application -> Secret Key"
            )
        if self.timeout_s <= 0:
            raise configuration_error("timeout_s must be positive")

    @property
    def sink(self) -> DiagnosticSink:
        """The sink diagnostic events are written to (no-op unless enabled)."""
        if self.diagnostics is not None:
            return self.diagnostics
        if self.debug:
            return logging_sink()
        return noop_sink

    def replace(self, **changes) -> ClientOptions:
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(cls, **overrides) -> ClientOptions:
        """
        Build options from environment variables.

        Environment variables:
            VERIFLY_API_KEY - Public API key
            VERIFLY_SECRET_KEY - Application secret key
            VERIFLY_TIMEOUT - Request timeout in seconds (default: 30)
            VERIFLY_BASE_URL - Override API root
            VERIFLY_DEBUG - Set to "true" to enable diagnostics

        Keyword overrides take precedence over the environment.
        """
        timeout = os.getenv("VERIFLY_TIMEOUT")
        try:
            timeout_s = float(timeout) if timeout else DEFAULT_TIMEOUT_S
        except ValueError:
            raise configuration_error(f"VERIFLY_TIMEOUT must be a number, got {timeout!r}") from None

        settings = {
            "api_key": os.getenv("VERIFLY_API_KEY", ""),
            "secret_key": os.getenv("VERIFLY_SECRET_KEY", ""),
            "timeout_s": timeout_s,
            "base_url": os.getenv("VERIFLY_BASE_URL", DEFAULT_BASE_URL),
            "debug": os.getenv("VERIFLY_DEBUG", "false").lower() == "true",
        }
        settings.update(overrides)
        return cls(**settings)
