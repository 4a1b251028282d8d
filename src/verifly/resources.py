"""
Verification session resources.

Each method wraps one API endpoint and returns the `data` field of the
response envelope. Session state is never cached; every call is a fresh
snapshot from the server.
"""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote

from .transport import Transport


def _session_path(session_id: str, action: str | None = None) -> str:
    path = f"/api/verify/{quote(str(session_id), safe='')}"
    if action:
        path = f"{path}/{action}"
    return path


def _data(body: Any) -> Any:
    if isinstance(body, dict):
        return body.get("data")
    return None


class Verification:
    """
    Manage verification sessions.

    Example:
        >>> session = client.verification.create({
        ...     "phone": "5551234567",
        ...     "methods": ["sms", "whatsapp"],
        ...     "webhookUrl": "https://mysite.com/webhook",
        ...     "lang": "tr",
        ...     "data": {"userId": "12345"},
        ... })
        >>> print(session["iframeUrl"])
    """

    def __init__(self, transport: Transport):
        self._transport = transport

    def create(self, params: Mapping[str, Any]) -> Any:
        """
        Create a verification session.

        Args:
            params: Session parameters: phone, email, methods, lang,
                webhookUrl, redirectUrl, timeout (minutes, 1-15), data

        Returns:
            Session data (sessionId, iframeUrl, ...)
        """
        return _data(self._transport.request("POST", "/api/verify/create", dict(params)))

    def get(self, session_id: str) -> Any:
        """Current status of a session (pending, waiting, verified, ...)."""
        return _data(self._transport.request("GET", _session_path(session_id)))

    def select_method(self, session_id: str, params: Mapping[str, Any]) -> Any:
        """
        Pick the verification method for a session offering several.

        Args:
            session_id: Session ID
            params: `method` (a VerificationMethod value) and optionally
                `recipientContact`
        """
        return _data(self._transport.request("POST", _session_path(session_id, "select-method"), dict(params)))

    def cancel(self, session_id: str) -> Any:
        """Cancel a session. The user can retry."""
        return _data(self._transport.request("POST", _session_path(session_id, "cancel")))

    def abort(self, session_id: str) -> Any:
        """Abort a session permanently."""
        return _data(self._transport.request("POST", _session_path(session_id, "abort")))

    def get_balance(self) -> Any:
        """Account balance and recent transactions."""
        return _data(self._transport.request("GET", "/api/verify/balance"))


class AsyncVerification:
    """Async counterpart of Verification."""

    def __init__(self, transport: Transport):
        self._transport = transport

    async def create(self, params: Mapping[str, Any]) -> Any:
        return _data(await self._transport.arequest("POST", "/api/verify/create", dict(params)))

    async def get(self, session_id: str) -> Any:
        return _data(await self._transport.arequest("GET", _session_path(session_id)))

    async def select_method(self, session_id: str, params: Mapping[str, Any]) -> Any:
        return _data(await self._transport.arequest("POST", _session_path(session_id, "select-method"), dict(params)))

    async def cancel(self, session_id: str) -> Any:
        return _data(await self._transport.arequest("POST", _session_path(session_id, "cancel")))

    async def abort(self, session_id: str) -> Any:
        return _data(await self._transport.arequest("POST", _session_path(session_id, "abort")))

    async def get_balance(self) -> Any:
        return _data(await self._transport.arequest("GET", "/api/verify/balance"))
