"""
Header names and case-insensitive header lookup.
"""

from __future__ import annotations

from typing import Mapping

# Header carrying the webhook signature on inbound deliveries
WEBHOOK_SIGNATURE_HEADER = "x-verifly-signature"


def get_header(headers: Mapping[str, str], name: str) -> str | None:
    """
    Look up a header value regardless of the case of its name.

    Examples:
        >>> get_header({"X-Verifly-Signature": "abc"}, "x-verifly-signature")
        'abc'
        >>> get_header({}, "x-verifly-signature") is None
        True
    """
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def extract_webhook_signature(headers: Mapping[str, str]) -> str | None:
    """Return the X-Verifly-Signature value, stripped, or None if absent."""
    value = get_header(headers, WEBHOOK_SIGNATURE_HEADER)
    if value is None:
        return None
    return value.strip() or None


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """
    Copy headers for diagnostic output, truncating the API key.

    The signature and timestamp are left intact; diagnostics exist to show
    them.
    """
    result: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() == "x-api-key" and value:
            result[key] = f"{value[:4]}..."
        else:
            result[key] = value
    return result
