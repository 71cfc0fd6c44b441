"""DRF serializers for gig and warehouse orders.

Output serializers render stored orders; input serializers validate request
bodies into plain data before any service runs.
"""

from decimal import Decimal

from common.choices import OrderStatus
from rest_framework import serializers

from .models import GigOrder, GigOrderUpdate, ProductOrder, ProductOrderItem


class GigOrderSerializer(serializers.ModelSerializer):
    gig_title = serializers.CharField(source="gig.title", read_only=True)

    class Meta:
        model = GigOrder
        fields = [
            "id",
            "gig",
            "gig_title",
            "inquiry",
            "buyer",
            "seller",
            "final_quantity",
            "final_price",
            "total_price",
            "status",
            "payment_intent_id",
            "requirement",
            "shipping_address",
            "delivery_method",
            "refund_status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class GigOrderUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = GigOrderUpdate
        fields = ["id", "gig_order", "seller", "title", "content", "expected_delivery_date", "created_at"]
        read_only_fields = fields


class ProductOrderItemSerializer(serializers.ModelSerializer):
    """Order line with computed line_total."""

    product_title = serializers.CharField(source="product.title", read_only=True)
    line_total = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = ProductOrderItem
        fields = ["id", "product", "product_title", "quantity", "unit_price", "line_total"]
        read_only_fields = fields

    def get_line_total(self, obj: ProductOrderItem) -> Decimal:
        return (obj.unit_price or Decimal("0.00")) * Decimal(int(obj.quantity))


class ProductOrderSerializer(serializers.ModelSerializer):
    items = ProductOrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = ProductOrder
        fields = [
            "id",
            "buyer",
            "store",
            "items",
            "total_price",
            "status",
            "payment_intent_id",
            "payment_status",
            "shipping_address",
            "refund_status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class GigPaymentIntentSerializer(serializers.Serializer):
    gig_id = serializers.IntegerField()
    inquiry_id = serializers.IntegerField(required=False, allow_null=True)


class GigOrderCreateSerializer(serializers.Serializer):
    gig_id = serializers.IntegerField()
    inquiry_id = serializers.IntegerField()
    payment_intent_id = serializers.CharField(max_length=255)
    requirement = serializers.CharField()
    shipping_address = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    delivery_method = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class GigOrderUpdateCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    content = serializers.CharField()
    expected_delivery_date = serializers.DateTimeField(required=False, allow_null=True)


class OrderLineSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)


class ProductOrderCreateSerializer(serializers.Serializer):
    store_id = serializers.IntegerField()
    items = OrderLineSerializer(many=True, allow_empty=False)
    shipping_address = serializers.CharField(required=False, allow_blank=True, default="")
    payment_intent_id = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    total_price = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)


class StockLineSerializer(serializers.Serializer):
    warehouse_id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)


class AssignStockSerializer(serializers.Serializer):
    items = StockLineSerializer(many=True, allow_empty=False)
