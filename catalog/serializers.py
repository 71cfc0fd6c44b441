"""Serializers for the catalog app."""

from rest_framework import serializers

from .models import Gig, Product, Store


class StoreSerializer(serializers.ModelSerializer):
    class Meta:
        model = Store
        fields = ["id", "owner", "name", "description", "is_active", "created_at"]
        read_only_fields = ["id", "owner", "created_at"]


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "store", "title", "sku", "price", "is_active"]
        read_only_fields = ["id"]

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price must not be negative.")
        return value


class GigSerializer(serializers.ModelSerializer):
    class Meta:
        model = Gig
        fields = ["id", "seller", "title", "description", "bulk_price", "min_order_quantity", "is_active"]
        read_only_fields = ["id", "seller"]

    def validate_bulk_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Bulk price must be positive.")
        return value
