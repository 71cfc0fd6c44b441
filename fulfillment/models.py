"""Shipments for warehouse orders.

One shipment per product order; the tracking number is assigned when the
shipment is created and never changes.
"""

from common.choices import TrackingStatus
from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ShippingMethod(TimeStampedModel):
    name = models.CharField(max_length=100)
    carrier = models.CharField(max_length=100)
    cost = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    estimated_days = models.PositiveIntegerField(default=1)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["cost", "name"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.carrier} {self.name}"


class Shipment(TimeStampedModel):
    TRACKING_NUMBER_LENGTH = 8

    order = models.OneToOneField("orders.ProductOrder", related_name="shipment", on_delete=models.CASCADE)
    warehouse = models.ForeignKey("inventory.Warehouse", related_name="shipments", on_delete=models.PROTECT)
    shipping_method = models.ForeignKey(ShippingMethod, related_name="shipments", on_delete=models.PROTECT)
    tracking_number = models.CharField(max_length=TRACKING_NUMBER_LENGTH, unique=True)
    tracking_status = models.CharField(
        max_length=20, choices=TrackingStatus.choices, default=TrackingStatus.PENDING, db_index=True
    )
    shipped_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Shipment<{self.tracking_number}> order={self.order_id}"

    @property
    def is_delivered(self) -> bool:
        return self.tracking_status == TrackingStatus.DELIVERED
