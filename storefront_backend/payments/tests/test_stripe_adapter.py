# payments/tests/test_stripe_adapter.py

import io
import json
from unittest import mock
from urllib.error import HTTPError, URLError
from urllib.parse import parse_qs

from django.test import SimpleTestCase

from core.exceptions import PaymentProcessorError
from payments.gateway.stripe_adapter import StripeGateway


class _FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def _intent_json(**overrides):
    data = {
        "id": "pi_123",
        "object": "payment_intent",
        "client_secret": "pi_123_secret_abc",
        "status": "requires_payment_method",
        "amount": 19440,
        "currency": "usd",
        "metadata": {"order_id": "o1", "user_id": "u1"},
    }
    data.update(overrides)
    return json.dumps(data).encode("utf-8")


class StripeGatewayTests(SimpleTestCase):
    def setUp(self):
        self.gateway = StripeGateway("sk_test_123")

    @mock.patch("payments.gateway.stripe_adapter.urlopen")
    def test_create_intent_request_shape(self, urlopen):
        urlopen.return_value = _FakeResponse(_intent_json())

        intent = self.gateway.create_intent(
            amount_minor=19440,
            currency="USD",
            metadata={"order_id": "o1", "user_id": "u1"},
            idempotency_key="order-o1",
        )

        req = urlopen.call_args[0][0]
        self.assertEqual(req.get_method(), "POST")
        self.assertEqual(req.full_url, "https://api.stripe.com/v1/payment_intents")
        self.assertEqual(req.get_header("Authorization"), "Bearer sk_test_123")
        self.assertEqual(req.get_header("Idempotency-key"), "order-o1")

        form = parse_qs(req.data.decode("utf-8"))
        self.assertEqual(form["amount"], ["19440"])
        self.assertEqual(form["currency"], ["usd"])
        self.assertEqual(form["metadata[order_id]"], ["o1"])

        self.assertEqual(intent.id, "pi_123")
        self.assertEqual(intent.client_secret, "pi_123_secret_abc")
        self.assertEqual(intent.amount, 19440)

    @mock.patch("payments.gateway.stripe_adapter.urlopen")
    def test_retrieve_intent(self, urlopen):
        urlopen.return_value = _FakeResponse(_intent_json(status="succeeded"))

        intent = self.gateway.retrieve_intent("pi_123")

        req = urlopen.call_args[0][0]
        self.assertEqual(req.get_method(), "GET")
        self.assertTrue(req.full_url.endswith("/payment_intents/pi_123"))
        self.assertEqual(intent.status, "succeeded")

    @mock.patch("payments.gateway.stripe_adapter.urlopen")
    def test_http_error_becomes_processor_error(self, urlopen):
        body = json.dumps({"error": {"message": "No such payment_intent"}}).encode("utf-8")
        urlopen.side_effect = HTTPError(
            "https://api.stripe.com/v1/payment_intents/pi_x", 404, "Not Found", {}, io.BytesIO(body)
        )

        with self.assertRaises(PaymentProcessorError) as ctx:
            self.gateway.retrieve_intent("pi_x")

        self.assertIn("No such payment_intent", ctx.exception.message)

    @mock.patch("payments.gateway.stripe_adapter.urlopen")
    def test_network_error_becomes_processor_error(self, urlopen):
        urlopen.side_effect = URLError("connection refused")

        with self.assertRaises(PaymentProcessorError):
            self.gateway.retrieve_intent("pi_123")

    @mock.patch("payments.gateway.stripe_adapter.urlopen")
    def test_non_json_response(self, urlopen):
        urlopen.return_value = _FakeResponse(b"<html>bad gateway</html>")

        with self.assertRaises(PaymentProcessorError):
            self.gateway.retrieve_intent("pi_123")

    def test_missing_secret_key(self):
        with self.assertRaises(PaymentProcessorError):
            StripeGateway("").retrieve_intent("pi_123")
