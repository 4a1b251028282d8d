"""
FastAPI webhook receiver for Verifly.

Usage:
    # Install dependencies
    pip install -e ".[fastapi]"

    # Run the server
    uvicorn examples.fastapi_webhook:app --port 8009 --reload

    # Or directly
    python examples/fastapi_webhook.py

Test with curl (signature from verifly.generate_signature):
    curl -X POST http://localhost:8009/webhook/verifly \
        -H "Content-Type: application/json" \
        -H "X-Verifly-Signature: <signature>" \
        -d '{"sessionId":"abc123","status":"verified"}'

Environment variables:
    VERIFLY_SECRET_KEY - Application secret key (required)
    VERIFLY_WEBHOOK_PATH - Webhook route (default: /webhook/verifly)
"""

import logging
import os

from fastapi import FastAPI, Request

from verifly import EventType, VeriflyWebhookASGIMiddleware

logger = logging.getLogger("verifly.examples.fastapi")

# Configuration from environment
SECRET_KEY = os.environ["VERIFLY_SECRET_KEY"]
WEBHOOK_PATH = os.getenv("VERIFLY_WEBHOOK_PATH", "/webhook/verifly")

app = FastAPI(
    title="Verifly Webhook Demo",
    description="Receives signed Verifly webhook deliveries",
    version="0.1.0",
)

# Rejects unsigned or tampered deliveries with 401 before the route runs
app.add_middleware(
    VeriflyWebhookASGIMiddleware,
    secret_key=SECRET_KEY,
    path=WEBHOOK_PATH,
)


@app.post(WEBHOOK_PATH)
async def webhook(request: Request):
    """Dispatch a verified webhook event."""
    event = request.state.verifly_event
    logger.info("Webhook received: %s for %s", event.type, event.id)

    if event.type == EventType.SUCCESS:
        # Mark the user as verified, unlock the account, ...
        logger.info("Verification successful: %s", event.data.get("sessionId"))
    elif event.type == EventType.FAILED:
        logger.warning("Verification failed: %s", event.data.get("sessionId"))
    elif event.type == EventType.EXPIRED:
        logger.info("Verification expired: %s", event.data.get("sessionId"))
    elif event.type == EventType.CANCELLED:
        logger.info("Verification cancelled: %s", event.data.get("sessionId"))
    else:
        logger.info("Unknown event type: %s", event.type)

    return {"received": True}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8009)
