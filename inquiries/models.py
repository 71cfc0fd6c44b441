from common.choices import InquiryStatus
from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Inquiry(TimeStampedModel):
    """Bulk-purchase negotiation between a buyer and a gig's supplier.

    ``round`` counts counter-offers; ``final_*`` are frozen once on acceptance.
    """

    STATUS_PENDING = InquiryStatus.PENDING
    STATUS_NEGOTIATING = InquiryStatus.NEGOTIATING
    STATUS_ACCEPTED = InquiryStatus.ACCEPTED
    STATUS_REJECTED = InquiryStatus.REJECTED
    STATUS_CHOICES = InquiryStatus.choices
    FINAL_STATUSES = (InquiryStatus.ACCEPTED, InquiryStatus.REJECTED)

    gig = models.ForeignKey("catalog.Gig", related_name="inquiries", on_delete=models.CASCADE)
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="inquiries_made", on_delete=models.CASCADE)
    supplier = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="inquiries_received", on_delete=models.CASCADE
    )
    requested_quantity = models.PositiveIntegerField()
    requested_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    proposed_quantity = models.PositiveIntegerField(null=True, blank=True)
    proposed_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    final_quantity = models.PositiveIntegerField(null=True, blank=True)
    final_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    message = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    round = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name_plural = "inquiries"
        indexes = [
            models.Index(fields=["buyer", "created_at"], name="inquiry_buyer_created_idx"),
            models.Index(fields=["supplier", "created_at"], name="inquiry_supplier_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="inquiry_round_positive", condition=models.Q(round__gte=1)),
            models.CheckConstraint(
                name="inquiry_requested_quantity_positive", condition=models.Q(requested_quantity__gt=0)
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Inquiry#{self.id} gig={self.gig_id} status={self.status} round={self.round}"

    @property
    def is_final(self) -> bool:
        return self.status in self.FINAL_STATUSES
