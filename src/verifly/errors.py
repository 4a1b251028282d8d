"""
Error taxonomy for the Verifly SDK.

Every failure surfaces as a single VeriflyError whose `kind` tells the
caller what went wrong:

    >>> try:
    ...     client.verification.get("missing")
    ... except VeriflyError as e:
    ...     if e.kind is ErrorKind.NOT_FOUND:
    ...         ...
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Kinds of failure raised by the SDK."""

    CONFIGURATION = "configuration"
    SIGNATURE = "signature"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    NOT_FOUND = "not_found"
    RATE_LIMIT = "rate_limit"
    SERVER = "server"
    NETWORK = "network"
    API = "api"


DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.CONFIGURATION: "Invalid client configuration",
    ErrorKind.SIGNATURE: "Invalid webhook signature",
    ErrorKind.VALIDATION: "Invalid parameters",
    ErrorKind.AUTHENTICATION: "Invalid API key",
    ErrorKind.INSUFFICIENT_BALANCE: "Insufficient balance",
    ErrorKind.NOT_FOUND: "Resource not found",
    ErrorKind.RATE_LIMIT: "Rate limit exceeded",
    ErrorKind.SERVER: "Server error",
    ErrorKind.NETWORK: "Network error",
    ErrorKind.API: "Unknown error",
}

# HTTP status -> kind. Anything unlisted maps to ErrorKind.API.
STATUS_KINDS: dict[int, ErrorKind] = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.AUTHENTICATION,
    402: ErrorKind.INSUFFICIENT_BALANCE,
    404: ErrorKind.NOT_FOUND,
    429: ErrorKind.RATE_LIMIT,
    500: ErrorKind.SERVER,
    502: ErrorKind.SERVER,
    503: ErrorKind.SERVER,
}


class VeriflyError(Exception):
    """
    Raised for every SDK failure.

    Attributes:
        kind: What went wrong (see ErrorKind)
        message: Human-readable message (never contains key material)
        status_code: HTTP status if the error came from the API
        response: Response payload from the API, if any. For
            INSUFFICIENT_BALANCE this is the balance `data` block.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str | None = None,
        status_code: int | None = None,
        response: Any = None,
    ):
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        self.status_code = status_code
        self.response = response
        super().__init__(self.message)

    def __repr__(self) -> str:
        return (
            f"VeriflyError(kind={self.kind.value!r}, message={self.message!r}, "
            f"status_code={self.status_code!r})"
        )


def configuration_error(message: str) -> VeriflyError:
    return VeriflyError(ErrorKind.CONFIGURATION, message)


def error_from_response(status_code: int, data: Any) -> VeriflyError:
    """
    Map an HTTP error response to a VeriflyError.

    Args:
        status_code: HTTP status of the response
        data: Decoded JSON body, or None if the body was not JSON

    Returns:
        VeriflyError with the kind for the status code
    """
    body = data if isinstance(data, dict) else {}
    message = body.get("message") or body.get("error") or "Unknown error"
    kind = STATUS_KINDS.get(status_code, ErrorKind.API)

    if kind is ErrorKind.INSUFFICIENT_BALANCE:
        response = body.get("data")
    elif kind in (ErrorKind.VALIDATION, ErrorKind.API):
        response = data
    else:
        response = None

    return VeriflyError(kind, message, status_code=status_code, response=response)
