"""
Flask webhook receiver for Verifly.

Shows the manual flow without middleware: verify, construct the event,
then dispatch on its type.

Usage:
    # Install dependencies
    pip install -e ".[flask]"

    # Run the server
    flask --app examples.flask_webhook run --port 8010

Environment variables:
    VERIFLY_API_KEY - Public API key
    VERIFLY_SECRET_KEY - Application secret key
"""

import logging

from flask import Flask, jsonify, request

from verifly import ErrorKind, EventType, VeriflyClient, VeriflyError

logger = logging.getLogger("verifly.examples.flask")

verifly = VeriflyClient.from_env()

app = Flask(__name__)


@app.post("/webhook/verifly")
def webhook():
    """Verify and handle a webhook delivery."""
    body = request.get_data()
    signature = request.headers.get("X-Verifly-Signature")

    if not signature:
        return "No signature provided", 401

    try:
        event = verifly.webhook.construct_event(body, signature)
    except VeriflyError as e:
        if e.kind is ErrorKind.SIGNATURE:
            return "Invalid signature", 401
        logger.exception("Webhook error")
        return "Error processing webhook", 500

    handlers = {
        EventType.SUCCESS.value: lambda data: logger.info("Verified: %s", data.get("sessionId")),
        EventType.FAILED.value: lambda data: logger.warning("Failed: %s", data.get("sessionId")),
        EventType.EXPIRED.value: lambda data: logger.info("Expired: %s", data.get("sessionId")),
        EventType.CANCELLED.value: lambda data: logger.info("Cancelled: %s", data.get("sessionId")),
    }
    handler = handlers.get(event.type)
    if handler is None:
        logger.info("Unknown event type: %s", event.type)
    else:
        handler(event.data)

    # Always acknowledge verified deliveries
    return "OK", 200


@app.post("/verify/start")
def start_verification():
    """Create a session and hand the iframe URL to the frontend."""
    params = request.get_json(force=True)
    session = verifly.verification.create({
        "phone": params.get("phone"),
        "methods": ["sms", "whatsapp"],
        "webhookUrl": request.host_url.rstrip("/") + "/webhook/verifly",
    })
    return jsonify({"sessionId": session["sessionId"], "iframeUrl": session["iframeUrl"]})


@app.route("/health")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(host="0.0.0.0", port=8010, debug=True)
