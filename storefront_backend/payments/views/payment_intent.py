# payments/views/payment_intent.py

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema, inline_serializer
from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from payments.services.reconciler import create_payment_intent, get_payment_status


class CreatePaymentIntentInputSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()


PaymentIntentResponseSerializer = inline_serializer(
    name="PaymentIntentResponse",
    fields={
        "client_secret": serializers.CharField(),
        "payment_intent_id": serializers.CharField(),
    },
)

PaymentStatusResponseSerializer = inline_serializer(
    name="PaymentStatusResponse",
    fields={
        "status": serializers.CharField(),
        "order_id": serializers.UUIDField(),
        "order_status": serializers.CharField(),
    },
)


class CreatePaymentIntentView(APIView):
    """
    Create (or reuse) the payment intent for one of the caller's orders.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Payments"],
        request=CreatePaymentIntentInputSerializer,
        responses={
            200: PaymentIntentResponseSerializer,
            403: OpenApiResponse(description="Order belongs to another user"),
            404: OpenApiResponse(description="Order not found"),
            502: OpenApiResponse(description="Payment processor failure"),
        },
    )
    def post(self, request):
        serializer = CreatePaymentIntentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_payment_intent(serializer.validated_data["order_id"], request.user)
        return Response(result, status=status.HTTP_200_OK)


class PaymentStatusView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Payments"], responses={200: PaymentStatusResponseSerializer})
    def get(self, request, order_id):
        return Response(get_payment_status(order_id, request.user), status=status.HTTP_200_OK)
