from common.choices import TrackingStatus
from rest_framework import serializers

from .models import Shipment, ShippingMethod


class ShippingMethodSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShippingMethod
        fields = ["id", "name", "carrier", "cost", "estimated_days"]
        read_only_fields = fields


class ShipmentSerializer(serializers.ModelSerializer):
    shipping_method = ShippingMethodSerializer(read_only=True)
    order_status = serializers.CharField(source="order.status", read_only=True)

    class Meta:
        model = Shipment
        fields = [
            "id",
            "order",
            "order_status",
            "warehouse",
            "shipping_method",
            "tracking_number",
            "tracking_status",
            "shipped_at",
            "delivered_at",
        ]
        read_only_fields = fields


class CreateShipmentSerializer(serializers.Serializer):
    warehouse_id = serializers.IntegerField(min_value=1)
    shipping_method_id = serializers.IntegerField(min_value=1)


class TrackingUpdateSerializer(serializers.Serializer):
    tracking_status = serializers.CharField(max_length=20)
