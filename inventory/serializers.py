"""Serializers for inventory domain.

Read serializers for warehouses, inventory rows, movements and reports, plus
input serializers for stock and warehouse commands.
"""

from decimal import ROUND_HALF_UP, Decimal

from rest_framework import serializers

from .models import Inventory, StockMovement, Warehouse


class WarehouseSerializer(serializers.ModelSerializer):
    available_capacity = serializers.IntegerField(read_only=True)

    class Meta:
        model = Warehouse
        fields = [
            "id",
            "store",
            "name",
            "location",
            "capacity",
            "used_capacity",
            "available_capacity",
            "created_at",
        ]
        read_only_fields = ["id", "used_capacity", "available_capacity", "created_at"]


class InventorySerializer(serializers.ModelSerializer):
    """Read-only stock row with the product title for convenience."""

    product_title = serializers.CharField(source="product.title", read_only=True)

    class Meta:
        model = Inventory
        fields = [
            "id",
            "warehouse",
            "product",
            "product_title",
            "quantity",
            "location",
            "updated_at",
        ]
        read_only_fields = fields


class StockMovementSerializer(serializers.ModelSerializer):
    """Read-only representation of stock movements."""

    class Meta:
        model = StockMovement
        fields = [
            "id",
            "warehouse",
            "product",
            "change_type",
            "quantity",
            "reference",
            "created_at",
        ]
        read_only_fields = fields


class StockInSerializer(serializers.Serializer):
    warehouse_id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    location = serializers.CharField(max_length=64, required=False, allow_blank=True)
    reference = serializers.CharField(max_length=120, required=False, allow_blank=True, default="")


class StockOutSerializer(serializers.Serializer):
    warehouse_id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    reference = serializers.CharField(max_length=120, required=False, allow_blank=True, default="")


class WarehouseUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=120, required=False)
    location = serializers.CharField(max_length=200, required=False, allow_blank=True)
    capacity = serializers.IntegerField(min_value=0, required=False)


class AssignLocationSerializer(serializers.Serializer):
    warehouse_id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    location = serializers.CharField(max_length=64, allow_blank=True)


class StockReportSerializer(serializers.ModelSerializer):
    warehouse_name = serializers.CharField(source="warehouse.name", read_only=True)
    product_title = serializers.CharField(source="product.title", read_only=True)
    stock_value = serializers.DecimalField(max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = Inventory
        fields = ["warehouse", "warehouse_name", "product", "product_title", "quantity", "stock_value"]
        read_only_fields = fields


class LowStockSerializer(serializers.ModelSerializer):
    warehouse_name = serializers.CharField(source="warehouse.name", read_only=True)
    product_title = serializers.CharField(source="product.title", read_only=True)

    class Meta:
        model = Inventory
        fields = ["warehouse", "warehouse_name", "product", "product_title", "quantity", "location"]
        read_only_fields = fields


class WarehouseUtilizationSerializer(serializers.ModelSerializer):
    """Ledger capacity use per warehouse; the percentage is rounded to two places."""

    available_capacity = serializers.IntegerField(read_only=True)
    utilization_percentage = serializers.SerializerMethodField()

    class Meta:
        model = Warehouse
        fields = ["id", "name", "location", "capacity", "used_capacity", "available_capacity", "utilization_percentage"]
        read_only_fields = fields

    def get_utilization_percentage(self, obj) -> str:
        if not obj.capacity:
            return "0.00"
        percentage = Decimal(int(obj.used_capacity) * 100) / Decimal(int(obj.capacity))
        return str(percentage.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


# EOF
