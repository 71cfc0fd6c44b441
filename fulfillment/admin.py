from django.contrib import admin

from .models import Shipment, ShippingMethod


@admin.register(ShippingMethod)
class ShippingMethodAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "carrier", "cost", "estimated_days", "is_active")
    list_filter = ("carrier", "is_active")


@admin.register(Shipment)
class ShipmentAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "tracking_number", "tracking_status", "warehouse", "shipped_at", "delivered_at")
    list_filter = ("tracking_status",)
    search_fields = ("tracking_number",)
    readonly_fields = ("tracking_number", "shipped_at", "delivered_at")
