"""Read-side queries for inquiries."""

from django.db.models import Q

from .models import Inquiry

ROLE_BUYER = "buyer"
ROLE_SUPPLIER = "supplier"


def inquiries_for_user(user, role: str | None = None):
    """Inquiries the user made or received, newest first."""
    if role == ROLE_BUYER:
        scope = Q(buyer=user)
    elif role == ROLE_SUPPLIER:
        scope = Q(supplier=user)
    else:
        scope = Q(buyer=user) | Q(supplier=user)
    return Inquiry.objects.filter(scope).select_related("gig", "buyer", "supplier").order_by("-created_at", "-id")
