"""Admin registration for catalog models."""

from django.contrib import admin

from .models import Gig, Product, Store


class ProductInline(admin.TabularInline):
    model = Product
    extra = 0
    fields = ("title", "sku", "price", "is_active")


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "is_active", "created_at")
    search_fields = ("name", "owner__email")
    list_filter = ("is_active",)
    inlines = [ProductInline]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("title", "store", "sku", "price", "is_active")
    search_fields = ("title", "sku")
    list_filter = ("is_active",)


@admin.register(Gig)
class GigAdmin(admin.ModelAdmin):
    list_display = ("title", "seller", "bulk_price", "min_order_quantity", "is_active")
    search_fields = ("title", "seller__email")
    list_filter = ("is_active",)
