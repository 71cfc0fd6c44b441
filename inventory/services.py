"""Inventory services (multi-warehouse): transactional stock movements.

Every mutation runs inside one transaction with the affected rows locked, so a
batch either applies completely or leaves no trace.
"""

import logging
from collections import OrderedDict

from catalog.models import Product
from common.exceptions import (
    CapacityExceededError,
    InsufficientStockError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from django.db import transaction
from django.db.models import ProtectedError

from .models import Inventory, StockMovement, Warehouse

logger = logging.getLogger("marketplace.inventory")


def _positive_quantity(quantity) -> int:
    if isinstance(quantity, bool) or (isinstance(quantity, float) and not quantity.is_integer()):
        raise ValidationError("Quantity must be a positive integer.")
    try:
        value = int(quantity)
    except (TypeError, ValueError):
        raise ValidationError("Quantity must be a positive integer.")
    if value <= 0:
        raise ValidationError("Quantity must be a positive integer.")
    return value


def _aggregate(items) -> "OrderedDict[tuple[int, int], int]":
    """Merge duplicate (warehouse, product) lines, sorted by key."""

    totals: dict[tuple[int, int], int] = {}
    for item in items:
        try:
            key = (int(item["warehouse_id"]), int(item["product_id"]))
        except (KeyError, TypeError, ValueError):
            raise ValidationError("Each item needs warehouse_id, product_id and quantity.")
        totals[key] = totals.get(key, 0) + _positive_quantity(item.get("quantity"))
    return OrderedDict(sorted(totals.items()))


@transaction.atomic
def reserve_and_deduct(items, reference: str = "") -> list[StockMovement]:
    """Deduct stock for several (warehouse, product) lines all-or-nothing.

    Rows are locked in (warehouse_id, product_id) order. Every line is checked
    before any row is written; a single shortfall raises InsufficientStockError.
    """
    wanted = _aggregate(items)
    if not wanted:
        raise ValidationError("At least one item is required.")

    rows: dict[tuple[int, int], Inventory] = {}
    for warehouse_id, product_id in wanted:
        row = (
            Inventory.objects.select_for_update()
            .filter(warehouse_id=warehouse_id, product_id=product_id)
            .first()
        )
        if row is not None:
            rows[(warehouse_id, product_id)] = row

    for key, quantity in wanted.items():
        row = rows.get(key)
        available = int(row.quantity) if row is not None else 0
        if quantity > available:
            logger.info(
                "stock_insufficient",
                extra={
                    "warehouse_id": key[0],
                    "product_id": key[1],
                    "requested": quantity,
                    "available": available,
                    "reference": reference,
                },
            )
            raise InsufficientStockError(
                f"Insufficient stock for product {key[1]} in warehouse {key[0]}: "
                f"requested {quantity}, available {available}."
            )

    released: dict[int, int] = {}
    movements = []
    for key, quantity in wanted.items():
        row = rows[key]
        row.quantity = int(row.quantity) - quantity
        row.save(update_fields=["quantity", "updated_at"])
        released[key[0]] = released.get(key[0], 0) + quantity
        movements.append(
            StockMovement.objects.create(
                warehouse_id=key[0],
                product_id=key[1],
                change_type=StockMovement.TYPE_OUTGOING,
                quantity=quantity,
                reference=reference,
            )
        )

    for warehouse in Warehouse.objects.select_for_update().filter(id__in=sorted(released)).order_by("id"):
        warehouse.used_capacity = max(0, int(warehouse.used_capacity) - released[warehouse.id])
        warehouse.save(update_fields=["used_capacity", "updated_at"])

    logger.info(
        "stock_deducted",
        extra={"lines": len(movements), "units": sum(wanted.values()), "reference": reference},
    )
    return movements


@transaction.atomic
def stock_in(
    *, warehouse_id: int, product_id: int, quantity: int, location: str | None = None, reference: str = ""
) -> StockMovement:
    quantity = _positive_quantity(quantity)
    try:
        warehouse = Warehouse.objects.select_for_update().get(id=warehouse_id)
    except Warehouse.DoesNotExist:
        raise NotFoundError("Warehouse not found.")
    if not Product.objects.filter(id=product_id, store_id=warehouse.store_id).exists():
        if Product.objects.filter(id=product_id).exists():
            raise ValidationError("Product is not sold by this warehouse's store.")
        raise NotFoundError("Product not found.")

    if int(warehouse.used_capacity) + quantity > int(warehouse.capacity):
        raise CapacityExceededError(
            f"Not enough space in warehouse {warehouse.id}: "
            f"{warehouse.available_capacity} units free, {quantity} requested."
        )

    row, _ = Inventory.objects.select_for_update().get_or_create(
        warehouse=warehouse, product_id=product_id, defaults={"quantity": 0}
    )
    row.quantity = int(row.quantity) + quantity
    fields = ["quantity", "updated_at"]
    if location:
        row.location = location
        fields.append("location")
    row.save(update_fields=fields)

    warehouse.used_capacity = int(warehouse.used_capacity) + quantity
    warehouse.save(update_fields=["used_capacity", "updated_at"])

    movement = StockMovement.objects.create(
        warehouse=warehouse,
        product_id=product_id,
        change_type=StockMovement.TYPE_INCOMING,
        quantity=quantity,
        reference=reference,
    )
    logger.info(
        "stock_in",
        extra={"warehouse_id": warehouse.id, "product_id": product_id, "quantity": quantity, "reference": reference},
    )
    return movement


def stock_out(*, warehouse_id: int, product_id: int, quantity: int, reference: str = "") -> StockMovement:
    movements = reserve_and_deduct(
        [{"warehouse_id": warehouse_id, "product_id": product_id, "quantity": quantity}],
        reference=reference,
    )
    return movements[0]


def _locked_warehouse(warehouse_id: int) -> Warehouse:
    try:
        return Warehouse.objects.select_for_update().get(id=warehouse_id)
    except Warehouse.DoesNotExist:
        raise NotFoundError("Warehouse not found.")


@transaction.atomic
def update_warehouse(*, warehouse_id: int, **changes) -> Warehouse:
    """Apply name, location or capacity changes; capacity never drops below what is stored."""
    warehouse = _locked_warehouse(warehouse_id)
    capacity = changes.get("capacity")
    if capacity is not None and int(capacity) < int(warehouse.used_capacity):
        raise ValidationError(
            f"Capacity cannot be lower than the {warehouse.used_capacity} units already stored in warehouse "
            f"{warehouse.id}."
        )
    fields = [name for name in ("name", "location", "capacity") if changes.get(name) is not None]
    for name in fields:
        setattr(warehouse, name, changes[name])
    if fields:
        warehouse.save(update_fields=fields + ["updated_at"])
        logger.info("warehouse_updated", extra={"warehouse_id": warehouse.id, "fields": fields})
    return warehouse


@transaction.atomic
def delete_warehouse(*, warehouse_id: int) -> None:
    """Delete an empty warehouse that has no stock history."""
    warehouse = _locked_warehouse(warehouse_id)
    if Inventory.objects.filter(warehouse=warehouse, quantity__gt=0).exists():
        raise StateConflictError("Warehouse still holds stock.")
    try:
        warehouse.delete()
    except ProtectedError:
        raise StateConflictError("Warehouse has stock movements or shipments and cannot be deleted.")
    logger.info("warehouse_deleted", extra={"warehouse_id": warehouse_id})


@transaction.atomic
def assign_location(*, warehouse_id: int, product_id: int, location: str) -> Inventory:
    """Record where a product sits inside a warehouse (aisle, rack or bin)."""
    row = Inventory.objects.select_for_update().filter(warehouse_id=warehouse_id, product_id=product_id).first()
    if row is None:
        raise NotFoundError("This product is not stocked in this warehouse.")
    row.location = location
    row.save(update_fields=["location", "updated_at"])
    return row


# EOF
