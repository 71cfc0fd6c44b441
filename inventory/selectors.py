"""Selectors for inventory domain (multi-warehouse)."""

from common.exceptions import NotFoundError
from django.db.models import DecimalField, ExpressionWrapper, F

from .models import Inventory, StockMovement, Warehouse


def get_warehouse(warehouse_id: int) -> Warehouse:
    try:
        return Warehouse.objects.select_related("store").get(id=warehouse_id)
    except Warehouse.DoesNotExist:
        raise NotFoundError("Warehouse not found.")


def warehouses_for_owner(user):
    return Warehouse.objects.select_related("store").filter(store__owner=user).order_by("name", "id")


def movements_for_product(product_id: int):
    return (
        StockMovement.objects.filter(product_id=product_id).select_related("warehouse").order_by("-created_at", "-id")
    )


def inventory_for_product(product_id: int):
    return Inventory.objects.filter(product_id=product_id).select_related("warehouse", "product").order_by(
        "warehouse_id"
    )


def inventory_for_warehouse(warehouse_id: int):
    return Inventory.objects.filter(warehouse_id=warehouse_id).select_related("product").order_by("product_id")


# Reports over the owner's warehouses


def stock_report(user):
    """Every stock row the owner holds, valued at the current product price."""
    value = ExpressionWrapper(
        F("quantity") * F("product__price"), output_field=DecimalField(max_digits=16, decimal_places=2)
    )
    return (
        Inventory.objects.filter(warehouse__store__owner=user)
        .select_related("warehouse", "product")
        .annotate(stock_value=value)
        .order_by("warehouse__name", "warehouse_id", "product_id")
    )


def low_stock(user, threshold: int):
    return (
        Inventory.objects.filter(warehouse__store__owner=user, quantity__lte=threshold)
        .select_related("warehouse", "product")
        .order_by("quantity", "warehouse_id", "product_id")
    )


# EOF
