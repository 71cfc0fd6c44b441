"""Orders API endpoints for gig orders and warehouse orders.

Write endpoints are idempotent when an `Idempotency-Key` header is provided:
the first response is stored and replayed, and reusing a key with a different
payload returns 409.
"""

from common.choices import OrderStatus
from common.permissions import BUYER, PARTY, STORE_OWNER, authorize
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from . import selectors, services
from .serializers import (
    AssignStockSerializer,
    GigOrderCreateSerializer,
    GigOrderSerializer,
    GigOrderUpdateCreateSerializer,
    GigOrderUpdateSerializer,
    GigPaymentIntentSerializer,
    ProductOrderCreateSerializer,
    ProductOrderSerializer,
    StatusUpdateSerializer,
)

IDEMPOTENCY_KEY = OpenApiParameter(
    name="Idempotency-Key",
    location=OpenApiParameter.HEADER,
    required=False,
    description="Makes the request idempotent within scope+path+method",
    type=str,
)

LIST_FILTERS = [
    OpenApiParameter(name="role", description="buyer or seller", required=False, type=str),
    OpenApiParameter(name="status", description="Order status filter", required=False, type=str),
    OpenApiParameter(name="page", description="Page number", required=False, type=int),
]


def _respond(request, handler):
    """Run handler, through the idempotency store when the client sent a key."""
    idem_key = request.headers.get("Idempotency-Key")
    if idem_key:
        body, code = services.with_idempotency(
            key=idem_key,
            user=request.user,
            path=str(request.path),
            method=str(request.method),
            request_hash=services.compute_request_hash(getattr(request, "data", None)),
            handler=handler,
        )
        return Response(body, status=code)

    body, code = handler()
    return Response(body, status=code)


def _visible_gig_order(request, order_id):
    order = services.get_gig_order(order_id=order_id)
    authorize(request.user, order, PARTY, detail="Not authorized to view this order")
    return order


def _visible_product_order(request, order_id):
    order = services.get_product_order(order_id=order_id)
    authorize(request.user, order, BUYER, STORE_OWNER, detail="Not authorized to view this order")
    return order


# Gig orders


class GigPaymentIntentView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Gig Orders"],
        summary="Create payment intent for a gig",
        description="Amount is the accepted inquiry total when `inquiry_id` is given, else the gig bulk price.",
        request=GigPaymentIntentSerializer,
        examples=[
            OpenApiExample(
                "Intent",
                value={"client_secret": "pi_123_secret_abc", "payment_intent_id": "pi_123"},
                response_only=True,
            )
        ],
    )
    def post(self, request):
        s = GigPaymentIntentSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        intent = services.create_payment_intent_for_gig(buyer=request.user, **s.validated_data)
        return Response({"client_secret": intent.client_secret, "payment_intent_id": intent.intent_id})


class GigOrderListCreateView(generics.ListAPIView):
    """List the caller's gig orders or place a new one after payment."""

    permission_classes = [IsAuthenticated]
    serializer_class = GigOrderSerializer

    def get_throttles(self):
        self.throttle_scope = "orders_write" if self.request.method == "POST" else "orders"
        return super().get_throttles()

    def get_queryset(self):
        params = self.request.query_params
        return selectors.gig_orders_for_user(self.request.user, role=params.get("role"), status=params.get("status"))

    @extend_schema(tags=["Gig Orders"], summary="List my gig orders", parameters=LIST_FILTERS)
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Gig Orders"],
        summary="Create gig order",
        description="Verifies the payment intent against the negotiated total before the order is stored.",
        parameters=[IDEMPOTENCY_KEY],
        request=GigOrderCreateSerializer,
        responses={201: GigOrderSerializer},
    )
    def post(self, request):
        s = GigOrderCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        def _handler():
            order = services.create_gig_order(buyer=request.user, **s.validated_data)
            return GigOrderSerializer(order).data, 201

        return _respond(request, _handler)


class GigOrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get_throttles(self):
        self.throttle_scope = "orders" if self.request.method == "GET" else "orders_write"
        return super().get_throttles()

    @extend_schema(tags=["Gig Orders"], summary="Get gig order", responses={200: GigOrderSerializer})
    def get(self, request, order_id: int):
        return Response(GigOrderSerializer(_visible_gig_order(request, order_id)).data)

    @extend_schema(
        tags=["Gig Orders"],
        summary="Update gig order status",
        description="Seller only. PENDING -> IN_PROGRESS -> DELIVERED -> COMPLETED, one step at a time.",
        parameters=[IDEMPOTENCY_KEY],
        request=StatusUpdateSerializer,
        responses={200: GigOrderSerializer},
    )
    def patch(self, request, order_id: int):
        order = services.get_gig_order(order_id=order_id)
        s = StatusUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        def _handler():
            updated = services.update_status(order=order, actor=request.user, new_status=s.validated_data["status"])
            return GigOrderSerializer(updated).data, 200

        return _respond(request, _handler)


class GigOrderCancelView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Gig Orders"],
        summary="Cancel gig order",
        description="Buyer only, while PENDING. The payment is refunded best-effort; see `refund_status`.",
        parameters=[IDEMPOTENCY_KEY],
        request=None,
        responses={200: GigOrderSerializer},
    )
    def put(self, request, order_id: int):
        order = services.get_gig_order(order_id=order_id)

        def _handler():
            cancelled = services.cancel_order(order=order, actor=request.user)
            return GigOrderSerializer(cancelled).data, 200

        return _respond(request, _handler)


class GigOrderUpdatesView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = GigOrderUpdateSerializer
    throttle_scope = "orders"

    def get_queryset(self):
        order = _visible_gig_order(self.request, self.kwargs["order_id"])
        return selectors.updates_for_gig_order(order.id)

    @extend_schema(tags=["Gig Orders"], summary="List progress updates for a gig order")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Gig Orders"],
        summary="Post a progress update",
        request=GigOrderUpdateCreateSerializer,
        responses={201: GigOrderUpdateSerializer},
    )
    def post(self, request, order_id: int):
        s = GigOrderUpdateCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        update = services.create_gig_order_update(order_id=order_id, actor=request.user, **s.validated_data)
        return Response(GigOrderUpdateSerializer(update).data, status=status.HTTP_201_CREATED)


class GigOrderUpdateDeleteView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(tags=["Gig Orders"], summary="Delete a progress update", responses={204: None})
    def delete(self, request, update_id: int):
        services.delete_gig_order_update(update_id=update_id, actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


# Warehouse orders


class ProductOrderSummaryView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"

    @extend_schema(
        tags=["Warehouse Orders"],
        summary="Order summary for my stores",
        description=(
            "Order counts per status, the average value of completed or delivered orders, and orders per day."
        ),
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        return Response(selectors.order_summary_for_owner(request.user))


class ProductOrderListCreateView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProductOrderSerializer

    def get_throttles(self):
        self.throttle_scope = "orders_write" if self.request.method == "POST" else "orders"
        return super().get_throttles()

    def get_queryset(self):
        params = self.request.query_params
        return selectors.product_orders_for_user(
            self.request.user, role=params.get("role"), status=params.get("status")
        )

    @extend_schema(tags=["Warehouse Orders"], summary="List my warehouse orders", parameters=LIST_FILTERS)
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Warehouse Orders"],
        summary="Create warehouse order",
        description=(
            "Totals are computed from product prices. With `payment_intent_id` the payment is verified first and "
            "the order is stored as paid; without it an intent is created and its `client_secret` returned."
        ),
        parameters=[IDEMPOTENCY_KEY],
        request=ProductOrderCreateSerializer,
        responses={201: ProductOrderSerializer},
        examples=[
            OpenApiExample(
                "Unpaid order",
                value={"store_id": 4, "items": [{"product_id": 10, "quantity": 3}], "shipping_address": "Pune"},
                request_only=True,
            )
        ],
    )
    def post(self, request):
        s = ProductOrderCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)
        data["items"] = [dict(item) for item in data["items"]]

        def _handler():
            order, client_secret = services.create_product_order(buyer=request.user, **data)
            body = dict(ProductOrderSerializer(order).data)
            body["client_secret"] = client_secret
            return body, 201

        return _respond(request, _handler)


class ProductOrderDetailView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"

    @extend_schema(tags=["Warehouse Orders"], summary="Get warehouse order", responses={200: ProductOrderSerializer})
    def get(self, request, order_id: int):
        return Response(ProductOrderSerializer(_visible_product_order(request, order_id)).data)


class ProductOrderStatusView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Warehouse Orders"],
        summary="Accept warehouse order",
        description=(
            "Store owner only. The only manual transition is PENDING -> ACCEPTED, which requires a "
            "succeeded payment; later steps happen through assign-stock, ship and track."
        ),
        parameters=[IDEMPOTENCY_KEY],
        request=StatusUpdateSerializer,
        responses={200: ProductOrderSerializer},
        examples=[OpenApiExample("Accept", value={"status": OrderStatus.ACCEPTED}, request_only=True)],
    )
    def put(self, request, order_id: int):
        order = services.get_product_order(order_id=order_id)
        s = StatusUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        def _handler():
            updated = services.update_status(order=order, actor=request.user, new_status=s.validated_data["status"])
            return ProductOrderSerializer(updated).data, 200

        return _respond(request, _handler)


class ProductOrderCancelView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Warehouse Orders"],
        summary="Cancel warehouse order",
        description="Buyer only, while PENDING. A paid order is refunded best-effort; see `refund_status`.",
        parameters=[IDEMPOTENCY_KEY],
        request=None,
        responses={200: ProductOrderSerializer},
    )
    def put(self, request, order_id: int):
        order = services.get_product_order(order_id=order_id)

        def _handler():
            cancelled = services.cancel_order(order=order, actor=request.user)
            return ProductOrderSerializer(cancelled).data, 200

        return _respond(request, _handler)


class ProductOrderConfirmPaymentView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Warehouse Orders"],
        summary="Confirm payment",
        description="Buyer re-verifies the order's payment intent after completing the card step.",
        parameters=[IDEMPOTENCY_KEY],
        request=None,
        responses={200: ProductOrderSerializer},
    )
    def post(self, request, order_id: int):
        def _handler():
            order = services.confirm_product_order_payment(order_id=order_id, actor=request.user)
            return ProductOrderSerializer(order).data, 200

        return _respond(request, _handler)


class AssignStockView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Warehouse Orders"],
        summary="Assign stock",
        description=(
            "Store owner only, for ACCEPTED orders. Deducts every line from the given warehouses in one "
            "transaction and moves the order to IN_PROGRESS; any shortfall leaves stock and order untouched."
        ),
        parameters=[IDEMPOTENCY_KEY],
        request=AssignStockSerializer,
        responses={200: ProductOrderSerializer},
        examples=[
            OpenApiExample(
                "Two warehouses",
                value={
                    "items": [
                        {"warehouse_id": 1, "product_id": 10, "quantity": 2},
                        {"warehouse_id": 2, "product_id": 10, "quantity": 1},
                    ]
                },
                request_only=True,
            )
        ],
    )
    def post(self, request, order_id: int):
        s = AssignStockSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        items = [dict(item) for item in s.validated_data["items"]]

        def _handler():
            order = services.assign_stock(order_id=order_id, actor=request.user, items=items)
            return ProductOrderSerializer(order).data, 200

        return _respond(request, _handler)
