"""Shared enumerations and choices used across apps."""

from django.db import models


class MovementType(models.TextChoices):
    INCOMING = "INCOMING", "Incoming"
    OUTGOING = "OUTGOING", "Outgoing"


class InquiryStatus(models.TextChoices):
    """Negotiation states for a supplier inquiry."""

    PENDING = "PENDING", "Pending"
    NEGOTIATING = "NEGOTIATING", "Negotiating"
    ACCEPTED = "ACCEPTED", "Accepted"
    REJECTED = "REJECTED", "Rejected"


class OrderStatus(models.TextChoices):
    """Lifecycle statuses shared by gig and product orders."""

    PENDING = "PENDING", "Pending"
    ACCEPTED = "ACCEPTED", "Accepted"
    IN_PROGRESS = "IN_PROGRESS", "In progress"
    COMPLETED = "COMPLETED", "Completed"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELLED = "CANCELLED", "Cancelled"


class PaymentStatus(models.TextChoices):
    REQUIRES_PAYMENT = "REQUIRES_PAYMENT", "Requires payment"
    SUCCEEDED = "SUCCEEDED", "Succeeded"
    CANCELLED = "CANCELLED", "Cancelled"


class RefundStatus(models.TextChoices):
    """Outcome of the best-effort refund issued on cancellation."""

    NONE = "NONE", "None"
    SUCCEEDED = "SUCCEEDED", "Succeeded"
    FAILED = "FAILED", "Failed"


class TrackingStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    IN_TRANSIT = "IN_TRANSIT", "In transit"
    DELIVERED = "DELIVERED", "Delivered"
    RETURNED = "RETURNED", "Returned"
