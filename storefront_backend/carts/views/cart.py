# carts/views/cart.py

"""
CART API VIEWS

Purpose:
- Authenticated customer's cart: read, add, set quantity, remove, clear.

Hard rules:
- Money is server-owned: prices come from the catalog at read time.
- Views delegate to carts.services.cart_manager; domain errors are
  rendered by core.exceptions.api_exception_handler.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from carts.serializers import CartSerializer
from carts.services import cart_manager
from carts.services.cart_manager import MAX_LINE_QUANTITY


# =====================================================
# SWAGGER INPUT SERIALIZERS
# =====================================================

class AddCartItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(
        min_value=1, max_value=MAX_LINE_QUANTITY, required=False, default=1
    )


class SetCartItemQuantityInputSerializer(serializers.Serializer):
    # <= 0 removes the line
    quantity = serializers.IntegerField(max_value=MAX_LINE_QUANTITY)


# =====================================================
# VIEWS
# =====================================================

class CartView(APIView):
    """
    GET    -> current cart (created empty on first access)
    POST   -> add a product (accumulates quantity)
    DELETE -> remove every line
    """

    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(
        tags=["Cart"],
        responses={200: CartSerializer},
        description="Get (or lazily create) the authenticated user's cart",
    )
    def get(self, request):
        cart = cart_manager.get_cart(request.user)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Cart"],
        request=AddCartItemInputSerializer,
        responses={200: CartSerializer},
        examples=[
            OpenApiExample(
                "Add two units",
                value={"product_id": "0b7f6a52-3c1e-4d8e-9a55-2f3c1d8e7a10", "quantity": 2},
                request_only=True,
            )
        ],
        description="Add a product to the cart (increments quantity if the line exists)",
    )
    def post(self, request):
        serializer = AddCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = cart_manager.add_item(
            request.user,
            serializer.validated_data["product_id"],
            serializer.validated_data["quantity"],
        )
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Cart"],
        responses={204: None},
        description="Clear the cart (no-op if the user has no cart)",
    )
    def delete(self, request):
        cart_manager.clear(request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartItemView(APIView):
    """
    PUT    -> set a line's quantity (<= 0 removes it)
    DELETE -> remove a line
    """

    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(
        tags=["Cart"],
        request=SetCartItemQuantityInputSerializer,
        responses={200: CartSerializer},
        description="Set the quantity of a cart line addressed by product id",
    )
    def put(self, request, product_id):
        serializer = SetCartItemQuantityInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = cart_manager.set_quantity(
            request.user,
            product_id,
            serializer.validated_data["quantity"],
        )
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Cart"],
        responses={200: CartSerializer},
        description="Remove a cart line addressed by product id",
    )
    def delete(self, request, product_id):
        cart = cart_manager.remove_item(request.user, product_id)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)
