from decimal import Decimal

from common.choices import OrderStatus, PaymentStatus, RefundStatus
from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class GigOrder(TimeStampedModel):
    """Order placed against a gig once an inquiry is accepted and paid.

    Quantity and price are copied from the accepted inquiry so later edits to
    the gig never change what was paid for.
    """

    STATUS_CHOICES = OrderStatus.choices

    gig = models.ForeignKey("catalog.Gig", related_name="orders", on_delete=models.PROTECT)
    inquiry = models.OneToOneField(
        "inquiries.Inquiry", related_name="order", null=True, blank=True, on_delete=models.SET_NULL
    )
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="gig_orders", on_delete=models.CASCADE)
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="gig_sales", on_delete=models.CASCADE)
    final_quantity = models.PositiveIntegerField()
    final_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=14, decimal_places=2)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=OrderStatus.PENDING, db_index=True)
    payment_intent_id = models.CharField(max_length=255, unique=True)
    requirement = models.TextField()
    shipping_address = models.TextField(blank=True, null=True)
    delivery_method = models.CharField(max_length=64, blank=True, null=True)
    refund_status = models.CharField(max_length=16, choices=RefundStatus.choices, default=RefundStatus.NONE)

    class Meta:
        ordering = ["-id"]
        indexes = [
            models.Index(fields=["buyer", "status", "created_at"], name="gigorder_buyer_status_idx"),
            models.Index(fields=["seller", "status", "created_at"], name="gigorder_seller_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="gigorder_total_non_negative", condition=models.Q(total_price__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"GigOrder#{self.id} gig={self.gig_id} status={self.status}"

    @property
    def is_paid(self) -> bool:
        return bool(self.payment_intent_id)


class GigOrderUpdate(TimeStampedModel):
    """Progress note posted by the seller on a gig order."""

    gig_order = models.ForeignKey(GigOrder, related_name="updates", on_delete=models.CASCADE)
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="gig_order_updates", on_delete=models.CASCADE)
    title = models.CharField(max_length=200)
    content = models.TextField()
    expected_delivery_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"GigOrderUpdate#{self.id} order={self.gig_order_id}"


class ProductOrder(TimeStampedModel):
    """Warehouse order for store products; stock is assigned after acceptance."""

    STATUS_CHOICES = OrderStatus.choices

    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="product_orders", on_delete=models.CASCADE)
    store = models.ForeignKey("catalog.Store", related_name="orders", on_delete=models.PROTECT)
    total_price = models.DecimalField(max_digits=14, decimal_places=2)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=OrderStatus.PENDING, db_index=True)
    payment_intent_id = models.CharField(max_length=255, unique=True, null=True, blank=True)
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.REQUIRES_PAYMENT
    )
    shipping_address = models.TextField(blank=True)
    refund_status = models.CharField(max_length=16, choices=RefundStatus.choices, default=RefundStatus.NONE)

    class Meta:
        ordering = ["-id"]
        indexes = [
            models.Index(fields=["buyer", "status", "created_at"], name="productorder_buyer_status_idx"),
            models.Index(fields=["store", "status", "created_at"], name="productorder_store_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="productorder_total_non_negative", condition=models.Q(total_price__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"ProductOrder#{self.id} store={self.store_id} status={self.status}"

    @property
    def is_paid(self) -> bool:
        return bool(self.payment_intent_id) and self.payment_status == PaymentStatus.SUCCEEDED


class ProductOrderItem(TimeStampedModel):
    """Line item within a product order; snapshots the unit price."""

    order = models.ForeignKey(ProductOrder, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey("catalog.Product", related_name="order_items", on_delete=models.PROTECT)
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["order", "product"], name="orderitem_order_product_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="orderitem_price_non_negative", condition=models.Q(unit_price__gte=0)),
            models.CheckConstraint(name="orderitem_quantity_positive", condition=models.Q(quantity__gt=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"ProductOrderItem#{self.id} order={self.order_id} product={self.product_id} qty={self.quantity}"

    @property
    def line_total(self) -> Decimal:
        return (self.unit_price or Decimal("0.00")) * Decimal(int(self.quantity))


class IdempotencyKey(TimeStampedModel):
    """Stores idempotent request results to prevent duplicate processing."""

    key = models.CharField(max_length=128)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.CASCADE)
    scope = models.CharField(max_length=128)
    path = models.CharField(max_length=255)
    method = models.CharField(max_length=16)
    request_hash = models.CharField(max_length=64, null=True, blank=True)
    response_code = models.IntegerField(null=True, blank=True)
    response_json = models.JSONField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["key", "scope", "path", "method"], name="uniq_idem_scope_path_method"),
        ]
