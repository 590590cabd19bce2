"""
PATH: core/exceptions.py

STOREFRONT ERROR TAXONOMY + API ERROR ENVELOPE

Purpose:
- Centralized domain errors for cart / order / payment services.
- One response shape for every failure:
    {"error": {"code": "<MACHINE_CODE>", "message": "<human text>"}}

Rules:
- Services raise these errors; they never build HTTP responses.
- Views do not catch them; the DRF exception handler below renders them.
- Unexpected exceptions are logged and reported as INTERNAL_ERROR
  without leaking internal detail to the client.
"""

from __future__ import annotations

import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import set_rollback

logger = logging.getLogger(__name__)


# ============================================================
# DOMAIN ERRORS
# ============================================================


class StorefrontError(Exception):
    """Base exception for all storefront service failures."""

    code = "INTERNAL_ERROR"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An unexpected error occurred."

    def __init__(self, message: str | None = None, *, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class InvalidInputError(StorefrontError):
    """Malformed input. Nothing was applied."""

    code = "VALIDATION_ERROR"
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed."


class NotFoundError(StorefrontError):
    code = "NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found."


class ForbiddenError(StorefrontError):
    code = "FORBIDDEN"
    http_status = status.HTTP_403_FORBIDDEN
    default_message = "Access denied."


class InsufficientStockError(StorefrontError):
    """Business-rule conflict; safe to retry after adjusting the cart."""

    code = "INSUFFICIENT_STOCK"
    http_status = status.HTTP_409_CONFLICT
    default_message = "Insufficient stock."


class InvalidTransitionError(StorefrontError):
    code = "INVALID_TRANSITION"
    http_status = status.HTTP_409_CONFLICT
    default_message = "Invalid order status transition."


class PaymentProcessorError(StorefrontError):
    """Upstream payment processor failure (client may try again)."""

    code = "PAYMENT_PROCESSOR_ERROR"
    http_status = status.HTTP_502_BAD_GATEWAY
    default_message = "Payment processor request failed."


class SignatureInvalidError(StorefrontError):
    """Webhook rejected before any state was touched."""

    code = "SIGNATURE_INVALID"
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid webhook signature."


# ============================================================
# API ERROR NORMALIZATION
# ============================================================


def error_response(*, code: str, message: str, http_status: int, details=None, headers=None):
    body = {"code": code, "message": message}
    if details is not None:
        body["details"] = details
    return Response({"error": body}, status=http_status, headers=headers)


_DRF_CODES = {
    drf_exceptions.ValidationError: "VALIDATION_ERROR",
    drf_exceptions.ParseError: "VALIDATION_ERROR",
    drf_exceptions.NotAuthenticated: "UNAUTHENTICATED",
    drf_exceptions.AuthenticationFailed: "UNAUTHENTICATED",
    drf_exceptions.PermissionDenied: "FORBIDDEN",
    drf_exceptions.NotFound: "NOT_FOUND",
    drf_exceptions.MethodNotAllowed: "METHOD_NOT_ALLOWED",
    drf_exceptions.UnsupportedMediaType: "UNSUPPORTED_MEDIA_TYPE",
    drf_exceptions.Throttled: "THROTTLED",
}


def _drf_code(exc: drf_exceptions.APIException) -> str:
    for exc_class, code in _DRF_CODES.items():
        if isinstance(exc, exc_class):
            return code
    return "ERROR"


def api_exception_handler(exc, context):
    """
    REST_FRAMEWORK["EXCEPTION_HANDLER"].

    Order:
    1) StorefrontError (domain) -> its own code/status
    2) Django Http404 / PermissionDenied -> DRF equivalents
    3) DRF APIException -> mapped code, original status
    4) anything else -> INTERNAL_ERROR (logged)
    """
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else ""

    if isinstance(exc, StorefrontError):
        set_rollback()
        if exc.http_status >= 500:
            logger.error(
                "Storefront service error",
                extra={"view": view_name, "code": exc.code, "error": exc.message},
            )
        return error_response(
            code=exc.code,
            message=exc.message,
            http_status=exc.http_status,
            details=exc.details,
        )

    if isinstance(exc, Http404):
        exc = drf_exceptions.NotFound()
    elif isinstance(exc, PermissionDenied):
        exc = drf_exceptions.PermissionDenied()

    if isinstance(exc, drf_exceptions.APIException):
        set_rollback()

        headers = {}
        if getattr(exc, "auth_header", None):
            headers["WWW-Authenticate"] = exc.auth_header
        if getattr(exc, "wait", None):
            headers["Retry-After"] = "%d" % exc.wait

        if isinstance(exc, drf_exceptions.ValidationError):
            return error_response(
                code="VALIDATION_ERROR",
                message="Validation failed.",
                http_status=exc.status_code,
                details=exc.detail,
                headers=headers or None,
            )

        return error_response(
            code=_drf_code(exc),
            message=str(exc.detail),
            http_status=exc.status_code,
            headers=headers or None,
        )

    set_rollback()
    logger.exception("Unhandled API error", extra={"view": view_name})
    return error_response(
        code=StorefrontError.code,
        message=StorefrontError.default_message,
        http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
