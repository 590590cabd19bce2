# core/tests/test_exceptions.py

from django.core.exceptions import PermissionDenied
from django.http import Http404
from django.test import TestCase
from rest_framework import exceptions as drf_exceptions

from core.exceptions import (
    InsufficientStockError,
    InvalidInputError,
    PaymentProcessorError,
    SignatureInvalidError,
    api_exception_handler,
)

CONTEXT = {"view": None}


class DomainErrorRenderingTests(TestCase):
    def test_domain_error_uses_its_code_and_status(self):
        res = api_exception_handler(
            InsufficientStockError(
                "Insufficient stock for Mug",
                details={"product_id": "p1", "requested": 3, "available": 1},
            ),
            CONTEXT,
        )

        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_STOCK")
        self.assertEqual(res.data["error"]["message"], "Insufficient stock for Mug")
        self.assertEqual(res.data["error"]["details"]["available"], 1)

    def test_details_omitted_when_absent(self):
        res = api_exception_handler(InvalidInputError("quantity must be an integer"), CONTEXT)

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")
        self.assertNotIn("details", res.data["error"])

    def test_default_message(self):
        res = api_exception_handler(SignatureInvalidError(), CONTEXT)

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "SIGNATURE_INVALID")
        self.assertEqual(res.data["error"]["message"], "Invalid webhook signature.")

    def test_processor_error_is_bad_gateway(self):
        with self.assertLogs("core.exceptions", level="ERROR"):
            res = api_exception_handler(PaymentProcessorError("Stripe URLError: timeout"), CONTEXT)

        self.assertEqual(res.status_code, 502)
        self.assertEqual(res.data["error"]["code"], "PAYMENT_PROCESSOR_ERROR")


class FrameworkErrorRenderingTests(TestCase):
    def test_django_404(self):
        res = api_exception_handler(Http404("nope"), CONTEXT)

        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")

    def test_django_permission_denied(self):
        res = api_exception_handler(PermissionDenied(), CONTEXT)

        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.data["error"]["code"], "FORBIDDEN")

    def test_validation_error_keeps_field_details(self):
        exc = drf_exceptions.ValidationError({"quantity": ["A valid integer is required."]})
        res = api_exception_handler(exc, CONTEXT)

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")
        self.assertIn("quantity", res.data["error"]["details"])

    def test_not_authenticated(self):
        res = api_exception_handler(drf_exceptions.NotAuthenticated(), CONTEXT)

        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.data["error"]["code"], "UNAUTHENTICATED")

    def test_throttled_sets_retry_after(self):
        res = api_exception_handler(drf_exceptions.Throttled(wait=30), CONTEXT)

        self.assertEqual(res.status_code, 429)
        self.assertEqual(res.data["error"]["code"], "THROTTLED")
        self.assertEqual(res["Retry-After"], "30")


class UnexpectedErrorRenderingTests(TestCase):
    def test_unexpected_error_does_not_leak_detail(self):
        with self.assertLogs("core.exceptions", level="ERROR"):
            res = api_exception_handler(RuntimeError("db password is hunter2"), CONTEXT)

        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.data["error"]["code"], "INTERNAL_ERROR")
        self.assertNotIn("hunter2", res.data["error"]["message"])
