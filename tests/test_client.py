"""Tests for VeriflyClient, AsyncVeriflyClient and the transport."""

import hashlib
import hmac

import httpx
import pytest
import respx

from verifly import AsyncVeriflyClient, ErrorKind, VeriflyClient, VeriflyError, noop_sink
from verifly.resources import _session_path

API_KEY = "pk_test_123"
SECRET = "sk_test_secret"
BASE = "https://www.verifly.net"


def assert_signed(request: httpx.Request, signed_body: str) -> None:
    """Check the auth headers of a captured request."""
    timestamp = request.headers["X-Timestamp"]
    assert timestamp.isdigit()
    assert request.headers["X-API-Key"] == API_KEY
    expected = hmac.new(SECRET.encode(), f"{timestamp}{signed_body}".encode(), hashlib.sha256).hexdigest()
    assert request.headers["X-Signature"] == expected


@pytest.fixture
def mock_api():
    """Create a respx mock for the Verifly API."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def client():
    return VeriflyClient(API_KEY, SECRET)


class TestVeriflyClient:
    """Tests for client construction and configuration."""

    def test_requires_api_key(self):
        """Missing API key is a configuration error."""
        with pytest.raises(VeriflyError) as exc_info:
            VeriflyClient("", SECRET)
        assert exc_info.value.kind is ErrorKind.CONFIGURATION

    def test_requires_secret_key(self):
        """Missing secret key is a configuration error."""
        with pytest.raises(VeriflyError) as exc_info:
            VeriflyClient(API_KEY)
        assert exc_info.value.kind is ErrorKind.CONFIGURATION
        assert SECRET not in str(exc_info.value)

    def test_defaults(self, client):
        """Default timeout and base URL are set."""
        assert client.options.timeout_s == 30.0
        assert client.options.base_url == BASE
        assert client.options.debug is False

    def test_repr_hides_secret(self, client):
        """The secret key never appears in repr."""
        assert SECRET not in repr(client)
        assert SECRET not in repr(client.options)

    def test_with_secret_key_returns_new_client(self, client):
        """Rotating the secret leaves the original client untouched."""
        rotated = client.with_secret_key("sk_rotated")
        assert rotated is not client
        assert rotated.options.secret_key == "sk_rotated"
        assert client.options.secret_key == SECRET
        assert rotated.webhook.generate_signature({"a": 1}) != client.webhook.generate_signature({"a": 1})

    def test_with_debug_returns_new_client(self, client):
        """Toggling debug builds a new client."""
        debug_client = client.with_debug(True)
        assert debug_client.options.debug is True
        assert client.options.debug is False

    def test_options_and_settings_are_exclusive(self, client):
        """Passing both options and settings is rejected."""
        with pytest.raises(TypeError):
            VeriflyClient(API_KEY, options=client.options)

    def test_session_path_is_quoted(self):
        """Session ids are quoted into the path."""
        assert _session_path("a/b c") == "/api/verify/a%2Fb%20c"
        assert _session_path("abc", "cancel") == "/api/verify/abc/cancel"


class TestVerificationResource:
    """Tests for the synchronous verification resource."""

    def test_create(self, client, mock_api):
        """create() POSTs the serialized body it signed."""
        route = mock_api.post(f"{BASE}/api/verify/create").respond(
            json={"success": True, "data": {"sessionId": "abc123", "iframeUrl": "https://www.verifly.net/v/abc123"}}
        )

        session = client.verification.create({"phone": "5551234567", "methods": ["sms", "whatsapp"]})

        assert session["sessionId"] == "abc123"
        request = route.calls.last.request
        body = '{"phone":"5551234567","methods":["sms","whatsapp"]}'
        assert request.content.decode() == body
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["User-Agent"].startswith("verifly-python/")
        assert_signed(request, body)

    def test_get_signs_empty_object_and_sends_no_body(self, client, mock_api):
        """GET requests sign {} but send no body."""
        route = mock_api.get(f"{BASE}/api/verify/abc123").respond(
            json={"data": {"sessionId": "abc123", "status": "pending"}}
        )

        status = client.verification.get("abc123")

        assert status["status"] == "pending"
        request = route.calls.last.request
        assert request.content == b""
        assert_signed(request, "{}")

    def test_select_method(self, client, mock_api):
        """select_method() POSTs to the session's select-method endpoint."""
        route = mock_api.post(f"{BASE}/api/verify/abc123/select-method").respond(
            json={"data": {"status": "method_selected"}}
        )

        result = client.verification.select_method("abc123", {"method": "sms", "recipientContact": "5551234567"})

        assert result["status"] == "method_selected"
        assert_signed(route.calls.last.request, '{"method":"sms","recipientContact":"5551234567"}')

    @pytest.mark.parametrize("action", ["cancel", "abort"])
    def test_cancel_and_abort_send_empty_object(self, client, mock_api, action):
        """Body-less POSTs send and sign {}."""
        route = mock_api.post(f"{BASE}/api/verify/abc123/{action}").respond(json={"data": {"ok": True}})

        result = getattr(client.verification, action)("abc123")

        assert result == {"ok": True}
        request = route.calls.last.request
        assert request.content == b"{}"
        assert_signed(request, "{}")

    def test_get_balance(self, client, mock_api):
        """get_balance() returns the data block."""
        mock_api.get(f"{BASE}/api/verify/balance").respond(
            json={"data": {"balance": 42.5, "recentTransactions": []}}
        )

        balance = client.verification.get_balance()

        assert balance["balance"] == 42.5

    def test_fresh_timestamp_per_request(self, client, mock_api):
        """Every request gets its own signature."""
        route = mock_api.get(f"{BASE}/api/verify/balance").respond(json={"data": {}})

        client.verification.get_balance()
        client.verification.get_balance()

        first, second = (call.request for call in route.calls)
        assert_signed(first, "{}")
        assert_signed(second, "{}")


class TestErrorMapping:
    """Tests for HTTP error mapping."""

    @pytest.mark.parametrize(
        "status, kind",
        [
            (400, ErrorKind.VALIDATION),
            (401, ErrorKind.AUTHENTICATION),
            (402, ErrorKind.INSUFFICIENT_BALANCE),
            (404, ErrorKind.NOT_FOUND),
            (429, ErrorKind.RATE_LIMIT),
            (500, ErrorKind.SERVER),
            (502, ErrorKind.SERVER),
            (503, ErrorKind.SERVER),
            (418, ErrorKind.API),
        ],
    )
    def test_status_codes(self, client, mock_api, status, kind):
        """Status codes map to error kinds."""
        mock_api.get(f"{BASE}/api/verify/abc123").respond(status, json={"message": "nope"})

        with pytest.raises(VeriflyError) as exc_info:
            client.verification.get("abc123")

        assert exc_info.value.kind is kind
        assert exc_info.value.status_code == status
        assert exc_info.value.message == "nope"

    def test_error_field_used_as_message(self, client, mock_api):
        """`error` is used when `message` is absent."""
        mock_api.get(f"{BASE}/api/verify/abc123").respond(404, json={"error": "Session not found"})

        with pytest.raises(VeriflyError) as exc_info:
            client.verification.get("abc123")

        assert exc_info.value.message == "Session not found"

    def test_insufficient_balance_carries_data(self, client, mock_api):
        """402 errors carry the balance data."""
        mock_api.post(f"{BASE}/api/verify/create").respond(
            402, json={"message": "Insufficient balance", "data": {"balance": 0, "required": 1}}
        )

        with pytest.raises(VeriflyError) as exc_info:
            client.verification.create({"phone": "5551234567"})

        assert exc_info.value.response == {"balance": 0, "required": 1}

    def test_validation_carries_response(self, client, mock_api):
        """400 errors carry the full response."""
        body = {"message": "Invalid phone", "fields": ["phone"]}
        mock_api.post(f"{BASE}/api/verify/create").respond(400, json=body)

        with pytest.raises(VeriflyError) as exc_info:
            client.verification.create({"phone": "x"})

        assert exc_info.value.response == body

    def test_non_json_error(self, client, mock_api):
        """A non-JSON error body still maps by status."""
        mock_api.get(f"{BASE}/api/verify/balance").respond(503, text="Service Unavailable")

        with pytest.raises(VeriflyError) as exc_info:
            client.verification.get_balance()

        assert exc_info.value.kind is ErrorKind.SERVER
        assert exc_info.value.message == "Unknown error"

    def test_network_error(self, client, mock_api):
        """Transport failures become network errors."""
        mock_api.get(f"{BASE}/api/verify/balance").mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(VeriflyError) as exc_info:
            client.verification.get_balance()

        assert exc_info.value.kind is ErrorKind.NETWORK
        assert exc_info.value.status_code is None

    def test_timeout(self, client, mock_api):
        """Timeouts become network errors."""
        mock_api.get(f"{BASE}/api/verify/balance").mock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(VeriflyError) as exc_info:
            client.verification.get_balance()

        assert exc_info.value.kind is ErrorKind.NETWORK

    def test_invalid_success_body(self, client, mock_api):
        """A 200 with a non-JSON body is an API error."""
        mock_api.get(f"{BASE}/api/verify/balance").respond(200, text="<html>")

        with pytest.raises(VeriflyError) as exc_info:
            client.verification.get_balance()

        assert exc_info.value.kind is ErrorKind.API


class TestDiagnostics:
    """Tests for the opt-in diagnostic sink."""

    def test_no_events_by_default(self, mock_api, caplog):
        """Without debug or a sink nothing is emitted."""
        client = VeriflyClient(API_KEY, SECRET)
        mock_api.get(f"{BASE}/api/verify/balance").respond(json={"data": {}})

        with caplog.at_level("DEBUG", logger="verifly.diagnostics"):
            client.verification.get_balance()

        assert client.options.sink is noop_sink
        assert not [r for r in caplog.records if r.name == "verifly.diagnostics"]

    def test_sink_receives_signing_material(self, mock_api):
        """The sink sees the signed message and signature, never the secret."""
        events = []
        client = VeriflyClient(API_KEY, SECRET, diagnostics=lambda name, fields: events.append((name, dict(fields))))
        route = mock_api.post(f"{BASE}/api/verify/create").respond(json={"data": {"sessionId": "abc123"}})

        client.verification.create({"email": "user@example.com"})

        names = [name for name, _ in events]
        assert names == ["Request", "Final Request", "Response"]

        request_fields = events[0][1]
        sent = route.calls.last.request
        assert request_fields["signature"] == sent.headers["X-Signature"]
        assert request_fields["message"] == sent.headers["X-Timestamp"] + '{"email":"user@example.com"}'
        assert events[2][1]["status"] == 200

        for _, fields in events:
            assert SECRET not in repr(fields)

    def test_debug_logs_through_logging(self, mock_api, caplog):
        """debug=True without a sink writes to the verifly logger."""
        client = VeriflyClient(API_KEY, SECRET, debug=True)
        mock_api.get(f"{BASE}/api/verify/balance").respond(json={"data": {}})

        with caplog.at_level("DEBUG", logger="verifly.diagnostics"):
            client.verification.get_balance()

        assert any("[Verifly SDK] Request" in record.getMessage() for record in caplog.records)


class TestAsyncVerificationResource:
    """Tests for the async verification resource."""

    @pytest.mark.asyncio
    async def test_create(self, mock_api):
        """Async create() signs and sends the serialized body."""
        route = mock_api.post(f"{BASE}/api/verify/create").respond(json={"data": {"sessionId": "abc123"}})
        client = AsyncVeriflyClient(API_KEY, SECRET)

        session = await client.verification.create({"email": "user@example.com", "lang": "tr"})

        assert session == {"sessionId": "abc123"}
        assert_signed(route.calls.last.request, '{"email":"user@example.com","lang":"tr"}')

    @pytest.mark.asyncio
    async def test_get(self, mock_api):
        """Async get() signs {}."""
        route = mock_api.get(f"{BASE}/api/verify/abc123").respond(json={"data": {"status": "verified"}})
        client = AsyncVeriflyClient(API_KEY, SECRET)

        status = await client.verification.get("abc123")

        assert status["status"] == "verified"
        assert_signed(route.calls.last.request, "{}")

    @pytest.mark.asyncio
    async def test_select_cancel_abort_balance(self, mock_api):
        """Remaining async methods hit their endpoints."""
        mock_api.post(f"{BASE}/api/verify/abc123/select-method").respond(json={"data": {"step": "select"}})
        mock_api.post(f"{BASE}/api/verify/abc123/cancel").respond(json={"data": {"step": "cancel"}})
        mock_api.post(f"{BASE}/api/verify/abc123/abort").respond(json={"data": {"step": "abort"}})
        mock_api.get(f"{BASE}/api/verify/balance").respond(json={"data": {"balance": 1}})
        client = AsyncVeriflyClient(API_KEY, SECRET)

        assert await client.verification.select_method("abc123", {"method": "call"}) == {"step": "select"}
        assert await client.verification.cancel("abc123") == {"step": "cancel"}
        assert await client.verification.abort("abc123") == {"step": "abort"}
        assert await client.verification.get_balance() == {"balance": 1}

    @pytest.mark.asyncio
    async def test_error(self, mock_api):
        """Async errors map the same way."""
        mock_api.get(f"{BASE}/api/verify/abc123").respond(429, json={"message": "Slow down"})
        client = AsyncVeriflyClient(API_KEY, SECRET)

        with pytest.raises(VeriflyError) as exc_info:
            await client.verification.get("abc123")

        assert exc_info.value.kind is ErrorKind.RATE_LIMIT
