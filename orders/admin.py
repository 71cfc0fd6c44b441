from django.contrib import admin

from .models import GigOrder, GigOrderUpdate, IdempotencyKey, ProductOrder, ProductOrderItem


@admin.register(GigOrder)
class GigOrderAdmin(admin.ModelAdmin):
    list_display = ("id", "gig", "buyer", "seller", "status", "total_price", "refund_status", "created_at")
    list_filter = ("status", "refund_status", "created_at")
    search_fields = ("payment_intent_id", "buyer__email", "seller__email")
    date_hierarchy = "created_at"


@admin.register(GigOrderUpdate)
class GigOrderUpdateAdmin(admin.ModelAdmin):
    list_display = ("id", "gig_order", "seller", "title", "expected_delivery_date", "created_at")
    search_fields = ("title",)


class ProductOrderItemInline(admin.TabularInline):
    model = ProductOrderItem
    extra = 0
    readonly_fields = ("product", "quantity", "unit_price")


@admin.register(ProductOrder)
class ProductOrderAdmin(admin.ModelAdmin):
    list_display = ("id", "store", "buyer", "status", "payment_status", "total_price", "refund_status", "created_at")
    list_filter = ("status", "payment_status", "refund_status", "created_at")
    search_fields = ("payment_intent_id", "buyer__email", "store__name")
    date_hierarchy = "created_at"
    inlines = [ProductOrderItemInline]


@admin.register(IdempotencyKey)
class IdempotencyKeyAdmin(admin.ModelAdmin):
    list_display = ("id", "key", "scope", "path", "method", "response_code", "created_at")
    list_filter = ("method", "response_code", "created_at")
    search_fields = ("key", "scope", "path")
    date_hierarchy = "created_at"
