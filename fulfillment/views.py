"""Shipment endpoints for warehouse orders."""

from common.choices import TrackingStatus
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .serializers import (
    CreateShipmentSerializer,
    ShipmentSerializer,
    ShippingMethodSerializer,
    TrackingUpdateSerializer,
)


class CreateShipmentView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Fulfillment"],
        summary="Ship order",
        description="Store owner only, for IN_PROGRESS orders. Assigns a tracking number and completes the order.",
        request=CreateShipmentSerializer,
        responses={201: ShipmentSerializer},
        examples=[OpenApiExample("Ship", value={"warehouse_id": 1, "shipping_method_id": 2}, request_only=True)],
    )
    def post(self, request, order_id: int):
        s = CreateShipmentSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        shipment = services.create_shipment(order_id=order_id, actor=request.user, **s.validated_data)
        return Response(ShipmentSerializer(shipment).data, status=status.HTTP_201_CREATED)


class TrackingUpdateView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Fulfillment"],
        summary="Update tracking status",
        description="Store owner only. DELIVERED is final and marks the order delivered.",
        request=TrackingUpdateSerializer,
        responses={200: ShipmentSerializer},
        examples=[OpenApiExample("Delivered", value={"tracking_status": TrackingStatus.DELIVERED}, request_only=True)],
    )
    def put(self, request, order_id: int):
        s = TrackingUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        shipment = services.update_tracking_status(
            order_id=order_id, actor=request.user, tracking_status=s.validated_data["tracking_status"]
        )
        return Response(ShipmentSerializer(shipment).data)


class ShipmentDetailView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"

    @extend_schema(tags=["Fulfillment"], summary="Get shipment for an order", responses={200: ShipmentSerializer})
    def get(self, request, order_id: int):
        shipment = services.get_shipment(order_id=order_id, actor=request.user)
        return Response(ShipmentSerializer(shipment).data)


class ShippingMethodListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ShippingMethodSerializer

    def get_queryset(self):
        return services.list_shipping_methods()

    @extend_schema(tags=["Fulfillment"], summary="List shipping methods")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)
