"""Read-side queries for gig and warehouse orders."""

from decimal import Decimal

from common.choices import OrderStatus
from django.db.models import Avg, Count, Q
from django.db.models.functions import TruncDate

from .models import GigOrder, GigOrderUpdate, ProductOrder

ROLE_BUYER = "buyer"
ROLE_SELLER = "seller"
FULFILLED = (OrderStatus.COMPLETED, OrderStatus.DELIVERED)


def gig_orders_for_user(user, role: str | None = None, status: str | None = None):
    if role == ROLE_BUYER:
        scope = Q(buyer=user)
    elif role == ROLE_SELLER:
        scope = Q(seller=user)
    else:
        scope = Q(buyer=user) | Q(seller=user)
    qs = GigOrder.objects.filter(scope).select_related("gig", "buyer", "seller").order_by("-id")
    if status:
        qs = qs.filter(status=status)
    return qs


def product_orders_for_user(user, role: str | None = None, status: str | None = None):
    if role == ROLE_BUYER:
        scope = Q(buyer=user)
    elif role == ROLE_SELLER:
        scope = Q(store__owner=user)
    else:
        scope = Q(buyer=user) | Q(store__owner=user)
    qs = ProductOrder.objects.filter(scope).select_related("store", "buyer").prefetch_related("items").order_by("-id")
    if status:
        qs = qs.filter(status=status)
    return qs


def updates_for_gig_order(order_id: int):
    return GigOrderUpdate.objects.filter(gig_order_id=order_id).order_by("-created_at", "-id")


def order_summary_for_owner(user) -> dict:
    """Status counts, average fulfilled order value and orders per day for the owner's stores."""
    qs = ProductOrder.objects.filter(store__owner=user)
    counts = {row["status"]: row["count"] for row in qs.values("status").annotate(count=Count("id")).order_by()}
    average = qs.filter(status__in=FULFILLED).aggregate(avg=Avg("total_price"))["avg"]
    daily = qs.annotate(day=TruncDate("created_at")).values("day").annotate(orders=Count("id")).order_by("day")
    return {
        "status_counts": {value: counts.get(value, 0) for value in OrderStatus.values},
        "average_order_value": str(Decimal(average or 0).quantize(Decimal("0.01"))),
        "daily_orders": [{"date": row["day"].isoformat(), "orders": row["orders"]} for row in daily],
    }
