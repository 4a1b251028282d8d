"""
Create a verification session and poll its status.

Usage:
    VERIFLY_API_KEY=... VERIFLY_SECRET_KEY=... python examples/basic.py

Set VERIFLY_DEBUG=true to log signing diagnostics (never in production).
"""

import asyncio
import logging

from verifly import AsyncVeriflyClient, ErrorKind, SessionStatus, VerificationMethod, VeriflyError

TERMINAL = {SessionStatus.VERIFIED.value, SessionStatus.FAILED.value, SessionStatus.EXPIRED.value}


async def main() -> None:
    client = AsyncVeriflyClient.from_env()

    try:
        session = await client.verification.create({
            "phone": "5551234567",
            "methods": [VerificationMethod.SMS.value, VerificationMethod.WHATSAPP.value],
            "lang": "tr",
            "timeout": 5,
        })
        print("Session ID:", session["sessionId"])
        print("Iframe URL:", session["iframeUrl"])

        for _ in range(10):
            await asyncio.sleep(2)
            status = await client.verification.get(session["sessionId"])
            print("Status:", status["status"])
            if status["status"] in TERMINAL:
                break

        balance = await client.verification.get_balance()
        print("Balance:", balance["balance"])

    except VeriflyError as e:
        print("Error:", e.message)
        if e.kind is ErrorKind.INSUFFICIENT_BALANCE:
            print("Balance data:", e.response)
        elif e.kind is ErrorKind.AUTHENTICATION:
            print("Check your API key and secret key")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    asyncio.run(main())
