"""Admin registrations for inventory app."""

from django.contrib import admin

from .models import Inventory, StockMovement, Warehouse


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "store", "capacity", "used_capacity", "updated_at")
    search_fields = ("name", "store__name")
    readonly_fields = ("used_capacity",)


@admin.register(Inventory)
class InventoryAdmin(admin.ModelAdmin):
    list_display = ("id", "warehouse", "product", "quantity", "location", "updated_at")
    search_fields = ("product__sku", "product__title", "warehouse__name")
    readonly_fields = ("quantity",)


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ("id", "warehouse", "product", "change_type", "quantity", "reference", "created_at")
    list_filter = ("change_type",)
    search_fields = ("product__sku", "reference")

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# EOF
