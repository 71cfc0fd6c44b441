from django.db import models


class PaymentIntentClaim(models.Model):
    """Binds a processor intent to the one order it pays for, across order types."""

    intent_id = models.CharField(max_length=255, unique=True)
    order_type = models.CharField(max_length=16)
    order_id = models.PositiveBigIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["order_type", "order_id"], name="intentclaim_order_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.intent_id} -> {self.order_type}#{self.order_id}"
