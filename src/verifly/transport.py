"""
Signed HTTP transport for the Verifly API.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ._version import __version__
from .config import ClientOptions
from .errors import ErrorKind, VeriflyError, error_from_response
from .headers import redact_headers
from .models import SignedRequest
from .signing import sign_request

logger = logging.getLogger(__name__)

# Methods whose body-less calls send nothing on the wire (but still sign "{}")
BODYLESS_METHODS = frozenset({"GET", "DELETE"})


class Transport:
    """
    Sends signed requests and maps failures to VeriflyError.

    Each call opens its own httpx client, so concurrent calls share no
    mutable state.

    Args:
        options: Client configuration

    Example:
        >>> transport = Transport(ClientOptions("api-key", "secret-key"))
        >>> body = transport.request("GET", "/api/verify/balance")
    """

    def __init__(self, options: ClientOptions):
        self.options = options

    def _prepare(
        self,
        method: str,
        path: str,
        body: Any,
    ) -> tuple[SignedRequest, dict[str, str], bytes | None]:
        method = method.upper()
        signed = sign_request(
            self.options.api_key,
            self.options.secret_key,
            method,
            path,
            body,
        )

        headers = {
            "Content-Type": "application/json",
            "User-Agent": f"verifly-python/{__version__}",
        }
        headers.update(signed.headers())

        content: bytes | None = None
        if body is not None or method not in BODYLESS_METHODS:
            content = signed.body.encode("utf-8")

        sink = self.options.sink
        sink("Request", {
            "method": method,
            "path": path,
            "payload": signed.body,
            "timestamp": signed.timestamp,
            "message": f"{signed.timestamp}{signed.body}",
            "signature": signed.signature,
        })
        sink("Final Request", {
            "method": method,
            "url": f"{self.options.base_url}{path}",
            "headers": redact_headers(headers),
        })

        return signed, headers, content

    def _handle_response(self, response: httpx.Response) -> Any:
        """Decode a response body or raise the matching VeriflyError."""
        try:
            data = response.json()
        except ValueError:
            data = None

        logger.debug("%s %s -> %s", response.request.method, response.request.url.path, response.status_code)

        self.options.sink("Response", {
            "status": response.status_code,
            "data": data,
        })

        if response.status_code >= 400:
            raise error_from_response(response.status_code, data)

        if data is None and response.content:
            raise VeriflyError(
                ErrorKind.API,
                f"Invalid response from Verifly API: {response.status_code}",
                status_code=response.status_code,
            )
        return data

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
    ) -> Any:
        """
        Send a signed request synchronously.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Request path below base_url
            body: JSON-serializable payload, or None

        Returns:
            Decoded JSON response body

        Raises:
            VeriflyError: On configuration, network or API errors
        """
        signed, headers, content = self._prepare(method, path, body)

        try:
            with httpx.Client(base_url=self.options.base_url, timeout=self.options.timeout_s) as client:
                response = client.request(
                    signed.method,
                    path,
                    content=content,
                    headers=headers,
                )
        except httpx.HTTPError as e:
            raise VeriflyError(ErrorKind.NETWORK, str(e) or None) from e

        return self._handle_response(response)

    async def arequest(
        self,
        method: str,
        path: str,
        body: Any = None,
    ) -> Any:
        """
        Send a signed request asynchronously.

        Same contract as request().
        """
        signed, headers, content = self._prepare(method, path, body)

        try:
            async with httpx.AsyncClient(base_url=self.options.base_url, timeout=self.options.timeout_s) as client:
                response = await client.request(
                    signed.method,
                    path,
                    content=content,
                    headers=headers,
                )
        except httpx.HTTPError as e:
            raise VeriflyError(ErrorKind.NETWORK, str(e) or None) from e

        return self._handle_response(response)
