"""Catalog app models.

Listings that orders point at: seller-owned stores and their products,
and gigs (service or bulk-supply listings) offered by sellers.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Store(TimeStampedModel):
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="stores", on_delete=models.CASCADE)
    name = models.CharField(max_length=120)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ["name", "id"]

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class Product(TimeStampedModel):
    """Store catalog item fulfilled from warehouse inventory."""

    store = models.ForeignKey(Store, related_name="products", on_delete=models.CASCADE)
    title = models.CharField(max_length=200)
    sku = models.CharField(max_length=64, blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ["-id"]
        constraints = [
            models.CheckConstraint(name="product_price_non_negative", condition=models.Q(price__gte=0)),
        ]
        indexes = [
            models.Index(fields=["store", "is_active"], name="product_store_active_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.title


class Gig(TimeStampedModel):
    """A seller's service or bulk-supply listing, negotiated through inquiries."""

    seller = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="gigs", on_delete=models.CASCADE)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    bulk_price = models.DecimalField(max_digits=12, decimal_places=2)
    min_order_quantity = models.PositiveIntegerField(default=1)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ["-id"]
        constraints = [
            models.CheckConstraint(name="gig_bulk_price_positive", condition=models.Q(bulk_price__gt=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.title
