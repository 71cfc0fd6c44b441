"""Email utilities for the orders app.

Uses Django's email backend, with links composed from FRONTEND_URL.
"""

from django.conf import settings
from django.core.mail import send_mail


def _order_url(kind: str, order_id: int) -> str:
    frontend = getattr(settings, "FRONTEND_URL", "")
    if not frontend:
        return ""
    return f"{frontend.rstrip('/')}/{kind}/{order_id}"


def send_order_status_email(order, kind: str) -> None:
    """Tell the buyer their order moved to a new status.

    ``kind`` is ``gig-orders`` or ``orders``; it names the order type in the
    subject and the frontend path. Silently no-ops if the buyer has no email.
    """
    to_email = getattr(order.buyer, "email", None)
    if not to_email:
        return

    label = "Gig order" if kind == "gig-orders" else "Order"
    subject = f"{label} #{order.id} is now {order.get_status_display().lower()}"
    body = f"{label}: #{order.id}\nStatus: {order.status}\nTotal: {order.total_price}\n"
    order_url = _order_url(kind, order.id)
    if order_url:
        body += f"\nYou can view your order here: {order_url}\n"

    send_mail(
        subject,
        body,
        getattr(settings, "DEFAULT_FROM_EMAIL", None),
        [to_email],
        fail_silently=True,
    )
