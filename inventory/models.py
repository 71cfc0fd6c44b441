"""Inventory models (multi-warehouse).

Tracks stock per (warehouse, product) with an append-only movement log.
"""

from common.choices import MovementType
from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Warehouse(TimeStampedModel):
    """Storage site owned by a store, with a unit capacity ceiling."""

    store = models.ForeignKey("catalog.Store", related_name="warehouses", on_delete=models.CASCADE)
    name = models.CharField(max_length=120)
    location = models.CharField(max_length=200, blank=True)
    capacity = models.PositiveIntegerField(default=0)
    used_capacity = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["name", "id"]
        constraints = [
            models.CheckConstraint(
                name="warehouse_used_capacity_non_negative", condition=models.Q(used_capacity__gte=0)
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} ({self.used_capacity}/{self.capacity})"

    @property
    def available_capacity(self) -> int:
        return max(0, int(self.capacity) - int(self.used_capacity))


class Inventory(TimeStampedModel):
    warehouse = models.ForeignKey(Warehouse, related_name="inventories", on_delete=models.CASCADE)
    product = models.ForeignKey("catalog.Product", related_name="inventories", on_delete=models.PROTECT)
    quantity = models.IntegerField(default=0)
    location = models.CharField(max_length=64, blank=True, help_text="Bin or aisle within the warehouse")

    class Meta:
        ordering = ["-updated_at", "id"]
        verbose_name_plural = "inventories"
        constraints = [
            models.CheckConstraint(name="inventory_non_negative", condition=models.Q(quantity__gte=0)),
            models.UniqueConstraint(fields=["warehouse", "product"], name="unique_inventory_per_warehouse_product"),
        ]
        indexes = [
            models.Index(fields=["product"], name="inventory_product_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Inventory<{self.warehouse_id}:{self.product_id}> q={self.quantity}"


class StockMovementQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise TypeError("Stock movements are append-only")

    def delete(self):
        raise TypeError("Stock movements are append-only")


class StockMovement(models.Model):
    """Immutable audit entry for a quantity change; quantity is always positive."""

    TYPE_INCOMING = MovementType.INCOMING
    TYPE_OUTGOING = MovementType.OUTGOING
    TYPE_CHOICES = MovementType.choices

    warehouse = models.ForeignKey(Warehouse, related_name="movements", on_delete=models.PROTECT)
    product = models.ForeignKey("catalog.Product", related_name="movements", on_delete=models.PROTECT)
    change_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    quantity = models.PositiveIntegerField()
    reference = models.CharField(max_length=120, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = StockMovementQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(name="movement_positive", condition=models.Q(quantity__gt=0)),
        ]
        indexes = [
            models.Index(fields=["product", "created_at"], name="movement_product_created_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.change_type} {self.quantity} of {self.product_id} @ {self.warehouse_id}"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise TypeError("Stock movements are append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise TypeError("Stock movements are append-only")
