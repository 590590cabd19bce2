# payments/views/webhook.py

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from payments.services.reconciler import handle_webhook

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "HTTP_STRIPE_SIGNATURE"


class WebhookThrottle(AnonRateThrottle):
    scope = "webhook"


class StripeWebhookView(APIView):
    """
    Payment processor webhook.

    - No session/JWT auth: the signature over the raw body is the credential.
    - request.body is read directly; request.data is never touched, so the
      bytes verified are the bytes the processor signed.
    - 2xx only after the event is durably recorded; failures bubble up as
      4xx (signature / payload) or 500 (retry later).
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [WebhookThrottle]

    @extend_schema(
        tags=["Payments"],
        request=None,
        responses={
            200: OpenApiResponse(description="Event acknowledged"),
            400: OpenApiResponse(description="Missing/invalid signature or malformed payload"),
        },
    )
    def post(self, request):
        result = handle_webhook(request.body, request.META.get(SIGNATURE_HEADER))

        return Response(
            {
                "received": True,
                "event_id": result.event_id,
                "outcome": result.outcome,
                "duplicate": result.duplicate,
            },
            status=status.HTTP_200_OK,
        )
