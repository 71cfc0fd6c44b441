"""Inventory endpoints for warehouses and stock, plus owner reports.

Every endpoint is restricted to the owner of the store behind the warehouse
or product being touched.
"""

from catalog.models import Product
from common.exceptions import NotFoundError, ValidationError
from common.permissions import OWNER, STORE_OWNER, authorize
from django.conf import settings
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from . import selectors, services
from .serializers import (
    AssignLocationSerializer,
    InventorySerializer,
    LowStockSerializer,
    StockInSerializer,
    StockMovementSerializer,
    StockOutSerializer,
    StockReportSerializer,
    WarehouseSerializer,
    WarehouseUpdateSerializer,
    WarehouseUtilizationSerializer,
)


def _owned_product(user, product_id: int) -> Product:
    try:
        product = Product.objects.select_related("store").get(id=product_id)
    except Product.DoesNotExist:
        raise NotFoundError("Product not found.")
    authorize(user, product, STORE_OWNER, detail="Only the store owner can view this stock.")
    return product


class StockInView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Stock in",
        description="Add units of a product to a warehouse. Fails when the warehouse capacity would be exceeded.",
        request=StockInSerializer,
        responses={201: StockMovementSerializer},
        examples=[
            OpenApiExample(
                "Stock in",
                value={"warehouse_id": 1, "product_id": 10, "quantity": 25, "location": "A-3"},
                request_only=True,
            )
        ],
    )
    def post(self, request):
        s = StockInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data
        warehouse = selectors.get_warehouse(data["warehouse_id"])
        authorize(request.user, warehouse, STORE_OWNER, detail="Only the store owner can add stock.")
        movement = services.stock_in(
            warehouse_id=warehouse.id,
            product_id=data["product_id"],
            quantity=data["quantity"],
            location=data.get("location") or None,
            reference=data.get("reference", ""),
        )
        return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)


class StockOutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Stock out",
        description="Remove units of a product from a warehouse. Never drives stock below zero.",
        request=StockOutSerializer,
        responses={201: StockMovementSerializer},
    )
    def post(self, request):
        s = StockOutSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data
        warehouse = selectors.get_warehouse(data["warehouse_id"])
        authorize(request.user, warehouse, STORE_OWNER, detail="Only the store owner can remove stock.")
        movement = services.stock_out(
            warehouse_id=warehouse.id,
            product_id=data["product_id"],
            quantity=data["quantity"],
            reference=data.get("reference", ""),
        )
        return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)


class ProductMovementListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = StockMovementSerializer

    @extend_schema(tags=["Inventory Endpoints"], summary="List stock movements for a product (newest first)")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        product = _owned_product(self.request.user, self.kwargs["product_id"])
        return selectors.movements_for_product(product.id)


class ProductInventoryListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InventorySerializer

    @extend_schema(tags=["Inventory Endpoints"], summary="List stock of a product across warehouses")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        product = _owned_product(self.request.user, self.kwargs["product_id"])
        return selectors.inventory_for_product(product.id)


class WarehouseInventoryListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InventorySerializer

    @extend_schema(tags=["Inventory Endpoints"], summary="List stock held in a warehouse")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        warehouse = selectors.get_warehouse(self.kwargs["warehouse_id"])
        authorize(self.request.user, warehouse, STORE_OWNER, detail="Only the store owner can view this stock.")
        return selectors.inventory_for_warehouse(warehouse.id)


class WarehouseListCreateView(generics.ListCreateAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = WarehouseSerializer

    @extend_schema(tags=["Inventory Endpoints"], summary="List my warehouses")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(tags=["Inventory Endpoints"], summary="Create a warehouse for one of my stores")
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)

    def get_queryset(self):
        return selectors.warehouses_for_owner(self.request.user)

    def perform_create(self, serializer):
        store = serializer.validated_data["store"]
        authorize(self.request.user, store, OWNER, detail="Only the store owner can add warehouses.")
        serializer.save()


class WarehouseDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def _owned(self, request, warehouse_id):
        warehouse = selectors.get_warehouse(warehouse_id)
        authorize(request.user, warehouse, STORE_OWNER, detail="Only the store owner can manage this warehouse.")
        return warehouse

    @extend_schema(tags=["Inventory Endpoints"], summary="Get a warehouse", responses={200: WarehouseSerializer})
    def get(self, request, warehouse_id):
        return Response(WarehouseSerializer(self._owned(request, warehouse_id)).data)

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Update a warehouse",
        description="Capacity can never be set below the units already stored.",
        request=WarehouseUpdateSerializer,
        responses={200: WarehouseSerializer},
    )
    def patch(self, request, warehouse_id):
        warehouse = self._owned(request, warehouse_id)
        s = WarehouseUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        warehouse = services.update_warehouse(warehouse_id=warehouse.id, **s.validated_data)
        return Response(WarehouseSerializer(warehouse).data)

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Delete a warehouse",
        description="Only an empty warehouse without stock history or shipments can be deleted.",
        responses={204: None},
    )
    def delete(self, request, warehouse_id):
        warehouse = self._owned(request, warehouse_id)
        services.delete_warehouse(warehouse_id=warehouse.id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AssignLocationView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Assign a product location",
        description="Set the aisle, rack or bin of a product already stocked in the warehouse.",
        request=AssignLocationSerializer,
        responses={200: InventorySerializer},
        examples=[
            OpenApiExample(
                "Assign location", value={"warehouse_id": 1, "product_id": 10, "location": "A-3-2"}, request_only=True
            )
        ],
    )
    def patch(self, request):
        s = AssignLocationSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data
        warehouse = selectors.get_warehouse(data["warehouse_id"])
        authorize(request.user, warehouse, STORE_OWNER, detail="Only the store owner can move stock.")
        row = services.assign_location(
            warehouse_id=warehouse.id, product_id=data["product_id"], location=data["location"]
        )
        return Response(InventorySerializer(row).data)


# Reports


class StockReportView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = StockReportSerializer

    @extend_schema(tags=["Inventory Reports"], summary="Stock held across my warehouses, with its value")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        return selectors.stock_report(self.request.user)


class LowStockReportView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = LowStockSerializer

    @extend_schema(
        tags=["Inventory Reports"],
        summary="Stock rows at or below the low-stock threshold",
        parameters=[
            OpenApiParameter(name="threshold", description="Defaults to LOW_STOCK_THRESHOLD", required=False, type=int)
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        raw = self.request.query_params.get("threshold")
        threshold = settings.LOW_STOCK_THRESHOLD
        if raw not in (None, ""):
            try:
                threshold = int(raw)
            except ValueError:
                raise ValidationError("threshold must be a non-negative integer.")
            if threshold < 0:
                raise ValidationError("threshold must be a non-negative integer.")
        return selectors.low_stock(self.request.user, threshold)


class WarehouseUtilizationView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = WarehouseUtilizationSerializer

    @extend_schema(tags=["Inventory Reports"], summary="Capacity used versus available per warehouse")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        return selectors.warehouses_for_owner(self.request.user)


# EOF
