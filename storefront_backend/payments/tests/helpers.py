# payments/tests/helpers.py

import json

from payments.services.signatures import build_signature_header

WEBHOOK_SECRET = "whsec_test_secret"

PAYMENTS_TEST_SETTINGS = {
    "GATEWAY": "fake",
    "CURRENCY": "usd",
    "STRIPE": {
        "SECRET_KEY": "",
        "WEBHOOK_SECRET": WEBHOOK_SECRET,
        "WEBHOOK_TOLERANCE": 300,
    },
}


def make_event(*, event_id, event_type, intent_id, amount, order_id=None, currency="usd"):
    metadata = {"order_id": str(order_id)} if order_id else {}
    return {
        "id": event_id,
        "type": event_type,
        "data": {
            "object": {
                "id": intent_id,
                "object": "payment_intent",
                "amount": amount,
                "amount_received": amount if event_type.endswith("succeeded") else 0,
                "currency": currency,
                "metadata": metadata,
            }
        },
    }


def signed(event, secret=WEBHOOK_SECRET):
    body = json.dumps(event).encode("utf-8")
    return body, build_signature_header(raw_body=body, secret=secret)
