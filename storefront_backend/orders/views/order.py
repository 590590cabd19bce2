# orders/views/order.py

"""
ORDER API VIEWS

Customer:
- POST /orders/          -> create a PENDING order (stock reserved)
- GET  /orders/          -> own orders, newest first

Admin:
- GET   /orders/admin/all/      -> every order (?status=, limit/offset)
- PATCH /orders/<id>/status/    -> lifecycle transition

Shared:
- GET /orders/<id>/      -> owner or admin
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import generics, status
from rest_framework.pagination import LimitOffsetPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import ForbiddenError, NotFoundError
from orders.models import Order
from orders.serializers import (
    CreateOrderInputSerializer,
    OrderSerializer,
    UpdateOrderStatusInputSerializer,
)
from orders.services.order_builder import create_order
from orders.services.order_lifecycle import transition_order
from users.permissions import IsAdmin, is_admin


def _order_queryset():
    return Order.objects.select_related("user").prefetch_related("items__product")


class AdminOrderPagination(LimitOffsetPagination):
    default_limit = 50
    max_limit = 200


class OrderListCreateView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    pagination_class = None

    def get_queryset(self):
        return _order_queryset().filter(user=self.request.user)

    @extend_schema(tags=["Orders"], description="List the authenticated user's orders")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Orders"],
        request=CreateOrderInputSerializer,
        responses={201: OrderSerializer},
        examples=[
            OpenApiExample(
                "Two lines",
                value={
                    "items": [
                        {"product_id": "0b7f6a52-3c1e-4d8e-9a55-2f3c1d8e7a10", "quantity": 2},
                    ],
                    "shipping_address": "1 Market St, Springfield",
                },
                request_only=True,
            )
        ],
        description="Create a PENDING order; stock is reserved atomically",
    )
    def post(self, request, *args, **kwargs):
        serializer = CreateOrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = create_order(
            user=request.user,
            lines=serializer.validated_data["items"],
            shipping_address=serializer.validated_data["shipping_address"],
        )

        order = _order_queryset().get(pk=order.pk)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class AdminOrderListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    serializer_class = OrderSerializer
    pagination_class = AdminOrderPagination
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status"]

    def get_queryset(self):
        return _order_queryset().order_by("-created_at")

    @extend_schema(tags=["Orders"], description="All orders (admin); filter by ?status=")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(tags=["Orders"], responses={200: OrderSerializer})
    def get(self, request, order_id):
        order = _order_queryset().filter(pk=order_id).first()
        if order is None:
            raise NotFoundError("Order not found")

        if order.user_id != request.user.pk and not is_admin(request.user):
            raise ForbiddenError("Access denied")

        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class OrderStatusView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    serializer_class = OrderSerializer

    @extend_schema(
        tags=["Orders"],
        request=UpdateOrderStatusInputSerializer,
        responses={200: OrderSerializer},
        description="Move an order along its lifecycle (illegal jumps -> 409)",
    )
    def patch(self, request, order_id):
        serializer = UpdateOrderStatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        transition_order(order_id, serializer.validated_data["status"])

        order = _order_queryset().get(pk=order_id)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)
