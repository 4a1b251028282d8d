"""
Handling Verifly errors by kind.

Usage:
    VERIFLY_API_KEY=... VERIFLY_SECRET_KEY=... python examples/error_handling.py
"""

from verifly import ErrorKind, VeriflyClient, VeriflyError

ADVICE = {
    ErrorKind.AUTHENTICATION: "Please check your API key and secret key",
    ErrorKind.VALIDATION: "Invalid input",
    ErrorKind.INSUFFICIENT_BALANCE: "Please add balance to your account",
    ErrorKind.NOT_FOUND: "Resource not found",
    ErrorKind.RATE_LIMIT: "Too many requests, please wait",
    ErrorKind.SERVER: "Server error, please try again later",
    ErrorKind.NETWORK: "Could not reach Verifly",
}


def describe(error: VeriflyError) -> str:
    advice = ADVICE.get(error.kind, "Unknown error")
    return f"{advice}: {error.message} (status={error.status_code})"


def main() -> None:
    try:
        VeriflyClient("your-api-key")
    except VeriflyError as e:
        print("Setup error:", e.message)

    client = VeriflyClient.from_env()

    try:
        client.verification.create({"phone": "123", "methods": ["sms"]})
    except VeriflyError as e:
        print(describe(e))
        if e.kind is ErrorKind.VALIDATION and isinstance(e.response, dict):
            print("Field errors:", (e.response.get("data") or {}).get("errors"))
        if e.kind is ErrorKind.INSUFFICIENT_BALANCE and e.response:
            print("Current balance:", e.response.get("currentBalance"))
            print("Minimum required:", e.response.get("minimumRequired"))
            print("Deficit:", e.response.get("deficit"))

    try:
        client.verification.get("non-existent-session-id")
    except VeriflyError as e:
        if e.kind is ErrorKind.NOT_FOUND:
            print("Session not found")
        else:
            print(describe(e))


if __name__ == "__main__":
    main()
