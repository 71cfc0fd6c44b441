"""Shipment creation and tracking for warehouse orders.

Both operations lock the order row and move it through the warehouse flow in
the same transaction as the shipment write.
"""

import logging
import uuid

from common.choices import OrderStatus, TrackingStatus
from common.exceptions import NotFoundError, StateConflictError, ValidationError
from common.permissions import BUYER, STORE_OWNER, authorize
from django.db import IntegrityError, transaction
from django.utils import timezone
from inventory.models import Warehouse
from orders.models import ProductOrder
from orders.services import advance

from .models import Shipment, ShippingMethod

logger = logging.getLogger("marketplace.fulfillment")

MAX_TRACKING_ATTEMPTS = 5


def generate_tracking_number() -> str:
    return uuid.uuid4().hex[: Shipment.TRACKING_NUMBER_LENGTH].upper()


def _locked_order(order_id) -> ProductOrder:
    try:
        return ProductOrder.objects.select_for_update().select_related("store").get(id=order_id)
    except ProductOrder.DoesNotExist:
        raise NotFoundError("Order not found")


def list_shipping_methods():
    return ShippingMethod.objects.filter(is_active=True)


@transaction.atomic
def create_shipment(*, order_id, actor, warehouse_id, shipping_method_id) -> Shipment:
    """Ship an IN_PROGRESS order from one of its store's warehouses."""
    order = _locked_order(order_id)
    authorize(actor, order, STORE_OWNER, detail="Only the store owner can ship this order")
    if Shipment.objects.filter(order=order).exists():
        raise StateConflictError("Shipment already exists for this order")
    if order.status != OrderStatus.IN_PROGRESS:
        raise StateConflictError("Only orders in progress can be shipped.")

    try:
        warehouse = Warehouse.objects.get(id=warehouse_id)
    except Warehouse.DoesNotExist:
        raise NotFoundError("Warehouse not found")
    if warehouse.store_id != order.store_id:
        raise ValidationError("Warehouse does not belong to this store.")
    try:
        method = ShippingMethod.objects.get(id=shipping_method_id, is_active=True)
    except ShippingMethod.DoesNotExist:
        raise NotFoundError("Shipping method not found")

    shipment = None
    for _ in range(MAX_TRACKING_ATTEMPTS):
        tracking_number = generate_tracking_number()
        if Shipment.objects.filter(tracking_number=tracking_number).exists():
            continue
        try:
            with transaction.atomic():
                shipment = Shipment.objects.create(
                    order=order,
                    warehouse=warehouse,
                    shipping_method=method,
                    tracking_number=tracking_number,
                    tracking_status=TrackingStatus.PENDING,
                    shipped_at=timezone.now(),
                )
            break
        except IntegrityError:
            if Shipment.objects.filter(order=order).exists():
                raise StateConflictError("Shipment already exists for this order")
    if shipment is None:
        raise StateConflictError("Could not allocate a tracking number, please retry.")

    advance(order, "ship", actor)
    logger.info(
        "shipment_created",
        extra={"order_id": order.id, "shipment_id": shipment.id, "tracking_number": shipment.tracking_number},
    )
    return shipment


@transaction.atomic
def update_tracking_status(*, order_id, actor, tracking_status: str) -> Shipment:
    if tracking_status not in TrackingStatus.values:
        raise ValidationError(f"Invalid tracking status: {tracking_status}")
    order = _locked_order(order_id)
    authorize(actor, order, STORE_OWNER, detail="Only the store owner can update tracking")
    try:
        shipment = Shipment.objects.select_for_update().get(order=order)
    except Shipment.DoesNotExist:
        raise NotFoundError("Shipment not found")
    if shipment.is_delivered:
        raise StateConflictError("Shipment has already been delivered.")

    prev = shipment.tracking_status
    shipment.tracking_status = tracking_status
    fields = ["tracking_status", "updated_at"]
    if tracking_status == TrackingStatus.DELIVERED:
        shipment.delivered_at = timezone.now()
        fields.append("delivered_at")
        advance(order, "deliver", actor)
    shipment.save(update_fields=fields)
    logger.info(
        "tracking_updated",
        extra={"order_id": order.id, "shipment_id": shipment.id, "status_from": prev, "status_to": tracking_status},
    )
    return shipment


def get_shipment(*, order_id, actor) -> Shipment:
    try:
        order = ProductOrder.objects.select_related("store").get(id=order_id)
    except ProductOrder.DoesNotExist:
        raise NotFoundError("Order not found")
    authorize(actor, order, BUYER, STORE_OWNER, detail="Not authorized to view this shipment")
    try:
        return Shipment.objects.select_related("shipping_method", "warehouse").get(order=order)
    except Shipment.DoesNotExist:
        raise NotFoundError("Shipment not found")
