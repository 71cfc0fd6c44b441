"""Order orchestration for gig orders and warehouse (product) orders.

Payment is verified before any paid order row is written, status changes run
through the transition tables in ``orders.state``, and stock assignment is a
single transaction that either deducts every line or nothing.
"""

import hashlib
import json
import logging
from datetime import timedelta
from decimal import Decimal
from typing import Callable, Optional, Tuple

from catalog.models import Gig, Product, Store
from common.choices import OrderStatus, PaymentStatus, RefundStatus
from common.exceptions import (
    NotFoundError,
    PaymentNotCompletedError,
    SelfOrderForbiddenError,
    StateConflictError,
    ValidationError,
)
from common.permissions import BUYER, SELLER, STORE_OWNER, authorize
from django.db import IntegrityError, transaction
from django.utils import timezone
from inquiries.models import Inquiry
from inventory.models import Warehouse
from inventory.services import reserve_and_deduct
from payments import services as payments
from payments.gateway.port import CustomerInfo, IntentResult

from .emails import send_order_status_email
from .models import GigOrder, GigOrderUpdate, IdempotencyKey, ProductOrder, ProductOrderItem
from .state import GIG_FLOW, WAREHOUSE_FLOW

logger = logging.getLogger("marketplace.orders")

CENT = Decimal("0.01")


def flow_for(order):
    return GIG_FLOW if isinstance(order, GigOrder) else WAREHOUSE_FLOW


def _kind(order) -> str:
    return "gig-orders" if isinstance(order, GigOrder) else "orders"


def _lock(order):
    """Re-read an order under a row lock."""
    try:
        return type(order).objects.select_for_update().get(pk=order.pk)
    except type(order).DoesNotExist:
        raise NotFoundError("Order not found")


def _record_status_change(order, prev: str, actor) -> None:
    """Log the transition and notify the buyer; neither can undo the change."""
    logger.info(
        "order_status_changed",
        extra={
            "order_id": order.id,
            "order_type": flow_for(order).name,
            "actor_id": getattr(actor, "id", None),
            "status_from": prev,
            "status_to": order.status,
        },
    )
    try:
        send_order_status_email(order, _kind(order))
    except Exception:
        logger.warning("order_email_failed", extra={"order_id": order.id}, exc_info=True)


def _customer_info(user) -> CustomerInfo:
    name = (user.get_full_name() or user.username or "").strip()
    return CustomerInfo(name=name, email=user.email or "")


# Gig orders


def _accepted_inquiry(*, inquiry_id, buyer, gig: Gig) -> Inquiry:
    try:
        inquiry = Inquiry.objects.get(id=inquiry_id)
    except Inquiry.DoesNotExist:
        raise NotFoundError("Inquiry not found")
    authorize(buyer, inquiry, BUYER, detail="This inquiry belongs to another buyer.")
    if inquiry.gig_id != gig.id:
        raise ValidationError("Inquiry does not belong to this gig.")
    if inquiry.status != Inquiry.STATUS_ACCEPTED or inquiry.final_quantity is None or inquiry.final_price is None:
        raise ValidationError("Final negotiation details not set")
    return inquiry


def _get_gig(gig_id) -> Gig:
    try:
        return Gig.objects.get(id=gig_id)
    except Gig.DoesNotExist:
        raise NotFoundError("Gig not found")


def create_payment_intent_for_gig(*, buyer, gig_id, inquiry_id=None) -> IntentResult:
    """Create an intent sized to the accepted inquiry total, else the gig bulk price."""
    gig = _get_gig(gig_id)
    amount = gig.bulk_price
    if inquiry_id:
        inquiry = _accepted_inquiry(inquiry_id=inquiry_id, buyer=buyer, gig=gig)
        amount = (Decimal(inquiry.final_quantity) * inquiry.final_price).quantize(CENT)
    return payments.create_intent(
        amount=amount,
        description=f"Payment for gig: {gig.title}",
        customer_info=_customer_info(buyer),
        metadata={"gig_id": gig.id, "buyer_id": buyer.id, "inquiry_id": inquiry_id or ""},
    )


def create_gig_order(
    *,
    buyer,
    gig_id,
    inquiry_id,
    payment_intent_id: str,
    requirement: str,
    shipping_address: str | None = None,
    delivery_method: str | None = None,
) -> GigOrder:
    if not gig_id or not inquiry_id or not payment_intent_id or not requirement:
        raise ValidationError("Missing required fields")
    gig = _get_gig(gig_id)
    inquiry = _accepted_inquiry(inquiry_id=inquiry_id, buyer=buyer, gig=gig)
    if GigOrder.objects.filter(inquiry=inquiry).exists():
        raise StateConflictError("An order already exists for this inquiry.")
    payments.ensure_unclaimed(payment_intent_id)

    total = (Decimal(inquiry.final_quantity) * inquiry.final_price).quantize(CENT)
    payments.verify_succeeded(
        payment_intent_id, expected_amount=total, expected_metadata={"buyer_id": buyer.id, "gig_id": gig.id}
    )

    try:
        with transaction.atomic():
            order = GigOrder.objects.create(
                gig=gig,
                inquiry=inquiry,
                buyer=buyer,
                seller_id=gig.seller_id,
                final_quantity=inquiry.final_quantity,
                final_price=inquiry.final_price,
                total_price=total,
                payment_intent_id=payment_intent_id,
                requirement=requirement,
                shipping_address=shipping_address or None,
                delivery_method=delivery_method or None,
                status=OrderStatus.PENDING,
            )
            payments.claim_intent(payment_intent_id, order_type=GIG_FLOW.name, order_id=order.id)
    except IntegrityError:
        raise StateConflictError("An order already exists for this payment or inquiry.")
    logger.info(
        "order_created",
        extra={"order_id": order.id, "order_type": GIG_FLOW.name, "buyer_id": buyer.id, "total": str(total)},
    )
    return order


def create_gig_order_update(*, order_id, actor, title: str, content: str, expected_delivery_date=None):
    if not title or not content:
        raise ValidationError("Missing required fields: title and content are required.")
    order = get_gig_order(order_id=order_id)
    authorize(actor, order, SELLER, detail="Only the seller can add updates for this order")
    update = GigOrderUpdate.objects.create(
        gig_order=order,
        seller=actor,
        title=title,
        content=content,
        expected_delivery_date=expected_delivery_date,
    )
    logger.info("gig_order_update_created", extra={"order_id": order.id, "update_id": update.id})
    return update


def delete_gig_order_update(*, update_id, actor) -> None:
    try:
        update = GigOrderUpdate.objects.get(id=update_id)
    except GigOrderUpdate.DoesNotExist:
        raise NotFoundError("Order update not found")
    authorize(actor, update, SELLER, detail="Only the seller who posted this update can delete it")
    update.delete()


def get_gig_order(*, order_id) -> GigOrder:
    try:
        return GigOrder.objects.select_related("gig", "buyer", "seller").get(id=order_id)
    except GigOrder.DoesNotExist:
        raise NotFoundError("Order not found")


# Warehouse orders


def get_product_order(*, order_id) -> ProductOrder:
    try:
        return ProductOrder.objects.select_related("store", "buyer").get(id=order_id)
    except ProductOrder.DoesNotExist:
        raise NotFoundError("Order not found")


def _price_lines(store: Store, items) -> Tuple[list, Decimal]:
    if not items:
        raise ValidationError("An order needs at least one item.")
    wanted: dict[int, int] = {}
    for item in items:
        try:
            product_id, quantity = int(item["product_id"]), int(item["quantity"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError("Each item needs product_id and quantity.")
        if quantity <= 0:
            raise ValidationError("Quantity must be a positive integer.")
        wanted[product_id] = wanted.get(product_id, 0) + quantity

    products = {p.id: p for p in Product.objects.filter(id__in=wanted, store=store, is_active=True)}
    missing = sorted(set(wanted) - set(products))
    if missing:
        raise ValidationError(f"Products {missing} are not sold by this store.")

    lines = [(products[pid], qty) for pid, qty in sorted(wanted.items())]
    total = sum((p.price * qty for p, qty in lines), Decimal("0.00")).quantize(CENT)
    return lines, total


def create_product_order(
    *,
    buyer,
    store_id,
    items,
    shipping_address: str = "",
    payment_intent_id: str | None = None,
    total_price: Decimal | None = None,
) -> Tuple[ProductOrder, Optional[str]]:
    """Create a warehouse order; returns the order and a client secret when payment is still due.

    A supplied intent is verified against the computed total before anything
    is written. Without one, an intent is created and the order waits in
    REQUIRES_PAYMENT until the buyer confirms it.
    """
    try:
        store = Store.objects.get(id=store_id)
    except Store.DoesNotExist:
        raise NotFoundError("Store not found")
    if store.owner_id == buyer.id:
        raise SelfOrderForbiddenError()

    lines, total = _price_lines(store, items)
    if total_price is not None and Decimal(total_price).quantize(CENT) != total:
        raise ValidationError(f"Total price does not match the order lines ({total}).")

    client_secret = None
    if payment_intent_id:
        payments.ensure_unclaimed(payment_intent_id)
        payments.verify_succeeded(
            payment_intent_id, expected_amount=total, expected_metadata={"buyer_id": buyer.id, "store_id": store.id}
        )
        payment_status = PaymentStatus.SUCCEEDED
    else:
        intent = payments.create_intent(
            amount=total,
            description=f"Order from store: {store.name}",
            customer_info=_customer_info(buyer),
            metadata={"store_id": store.id, "buyer_id": buyer.id},
        )
        payment_intent_id = intent.intent_id
        client_secret = intent.client_secret
        payment_status = PaymentStatus.REQUIRES_PAYMENT

    try:
        with transaction.atomic():
            order = ProductOrder.objects.create(
                buyer=buyer,
                store=store,
                total_price=total,
                payment_intent_id=payment_intent_id,
                payment_status=payment_status,
                shipping_address=shipping_address or "",
                status=OrderStatus.PENDING,
            )
            ProductOrderItem.objects.bulk_create(
                [
                    ProductOrderItem(order=order, product=product, quantity=qty, unit_price=product.price)
                    for product, qty in lines
                ]
            )
            payments.claim_intent(payment_intent_id, order_type=WAREHOUSE_FLOW.name, order_id=order.id)
    except IntegrityError:
        raise StateConflictError("This payment has already been used for an order.")
    logger.info(
        "order_created",
        extra={
            "order_id": order.id,
            "order_type": WAREHOUSE_FLOW.name,
            "buyer_id": buyer.id,
            "total": str(total),
            "payment_status": payment_status,
        },
    )
    return order, client_secret


def confirm_product_order_payment(*, order_id, actor) -> ProductOrder:
    order = get_product_order(order_id=order_id)
    authorize(actor, order, BUYER, detail="Only the buyer can confirm payment for this order")
    if order.payment_status == PaymentStatus.SUCCEEDED:
        return order
    if order.status == OrderStatus.CANCELLED:
        raise StateConflictError("Order has been cancelled.")

    payments.verify_succeeded(
        order.payment_intent_id,
        expected_amount=order.total_price,
        expected_metadata={"buyer_id": order.buyer_id, "store_id": order.store_id},
    )
    with transaction.atomic():
        order = _lock(order)
        if order.status == OrderStatus.CANCELLED:
            raise StateConflictError("Order has been cancelled.")
        order.payment_status = PaymentStatus.SUCCEEDED
        order.save(update_fields=["payment_status", "updated_at"])
    logger.info("order_payment_confirmed", extra={"order_id": order.id, "intent_id": order.payment_intent_id})
    return order


# Shared lifecycle


def cancel_order(*, order, actor):
    """Cancel a PENDING order for its buyer, then settle its payment intent.

    The cancellation is committed first. A confirmed payment is refunded. An
    intent the buyer never confirmed is checked with the processor: captured
    money is refunded, anything else is voided. A refund failure is recorded
    in ``refund_status`` and never rolls the cancellation back.
    """
    authorize(actor, order, BUYER, detail="Unauthorized: Only the buyer can cancel this order")
    with transaction.atomic():
        order = _lock(order)
        prev = order.status
        try:
            order.status = flow_for(order).apply(order.status, "cancel")
        except StateConflictError:
            raise StateConflictError("Order cannot be canceled after it has been started")
        order.save(update_fields=["status", "updated_at"])
    _record_status_change(order, prev, actor)

    if not order.payment_intent_id:
        return order
    if order.is_paid:
        result = payments.refund(order.payment_intent_id)
    else:
        result = payments.release_unconfirmed(order.payment_intent_id)

    fields = {}
    if result.success and result.status == payments.CANCELED:
        fields["payment_status"] = PaymentStatus.CANCELLED
    else:
        fields["refund_status"] = RefundStatus.SUCCEEDED if result.success else RefundStatus.FAILED
        if result.success and not order.is_paid:
            # captured at the processor before the buyer confirmed
            fields["payment_status"] = PaymentStatus.SUCCEEDED
    for name, value in fields.items():
        setattr(order, name, value)
    type(order).objects.filter(pk=order.pk).update(updated_at=timezone.now(), **fields)
    return order


def update_status(*, order, actor, new_status: str):
    """Move an order along a manual transition of its flow."""
    if isinstance(order, GigOrder):
        authorize(actor, order, SELLER, detail="Only the seller can update the order status")
    else:
        authorize(actor, order, STORE_OWNER, detail="Only the store owner can update the order status")
    if new_status not in OrderStatus.values:
        raise ValidationError(f"Invalid order status: {new_status}")

    with transaction.atomic():
        order = _lock(order)
        prev = order.status
        transition = flow_for(order).transition_to(order.status, new_status)
        if transition.action == "accept" and order.payment_status != PaymentStatus.SUCCEEDED:
            raise PaymentNotCompletedError("Order cannot be accepted before payment succeeds.")
        order.status = transition.target
        order.save(update_fields=["status", "updated_at"])
    _record_status_change(order, prev, actor)
    return order


def advance(order, action: str, actor=None):
    """Apply a system-driven transition to an order already locked by the caller."""
    prev = order.status
    order.status = flow_for(order).apply(order.status, action)
    order.save(update_fields=["status", "updated_at"])
    transaction.on_commit(lambda: _record_status_change(order, prev, actor))
    return order


def assign_stock(*, order_id, actor, items) -> ProductOrder:
    """Deduct stock for an accepted order and move it to IN_PROGRESS.

    ``items`` lists ``{warehouse_id, product_id, quantity}``; per product the
    quantities must add up to the order lines exactly.
    """
    with transaction.atomic():
        try:
            order = ProductOrder.objects.select_for_update().get(id=order_id)
        except ProductOrder.DoesNotExist:
            raise NotFoundError("Order not found")
        authorize(actor, order, STORE_OWNER, detail="Only the store owner can assign stock")
        WAREHOUSE_FLOW.apply(order.status, "assign_stock")

        if not items:
            raise ValidationError("At least one stock line is required.")
        warehouse_ids = set()
        assigned: dict[int, int] = {}
        for item in items:
            try:
                warehouse_ids.add(int(item["warehouse_id"]))
                pid = int(item["product_id"])
                assigned[pid] = assigned.get(pid, 0) + int(item["quantity"])
            except (KeyError, TypeError, ValueError):
                raise ValidationError("Each item needs warehouse_id, product_id and quantity.")
        owned = Warehouse.objects.filter(id__in=warehouse_ids, store_id=order.store_id)
        if set(owned.values_list("id", flat=True)) != warehouse_ids:
            raise ValidationError("Stock can only be assigned from this store's warehouses.")

        ordered: dict[int, int] = {}
        for line in order.items.all():
            ordered[line.product_id] = ordered.get(line.product_id, 0) + int(line.quantity)
        if assigned != ordered:
            raise ValidationError("Assigned quantities must match the order lines.")

        reserve_and_deduct(items, reference=f"order:{order.id}")
        advance(order, "assign_stock", actor)
    return order


# Idempotency


def with_idempotency(
    *,
    key: str,
    user,
    path: str,
    method: str,
    handler: Callable[[], Tuple[dict, int]],
    request_hash: Optional[str] = None,
) -> Tuple[dict, int]:
    """Run handler idempotently and persist its response for the given key and scope.

    - Scope is derived from the caller: for authenticated users, "user:<id>"; otherwise "anon".
    - If a record exists and the stored `request_hash` differs from the provided one, returns 409.
    - If a record exists but response is not yet stored, returns 409 to indicate in-progress.
    - If the handler raises, the key is released so the client can retry.
    """

    scope = f"user:{getattr(user, 'id', None)}" if getattr(user, "id", None) else "anon"
    method = str(method).upper()
    path = str(path)

    try:
        with transaction.atomic():
            idem = IdempotencyKey.objects.create(
                key=key,
                user=user if getattr(user, "id", None) else None,
                scope=scope,
                path=path,
                method=method,
                request_hash=request_hash,
                expires_at=timezone.now() + timedelta(hours=24),
            )
    except IntegrityError:
        idem = IdempotencyKey.objects.get(key=key, scope=scope, path=path, method=method)
        # Guard against key reuse with different fingerprints
        if idem.request_hash and request_hash and idem.request_hash != request_hash:
            return {"detail": "Idempotency key reused with different request payload"}, 409
        if idem.response_json is not None and idem.response_code is not None:
            return idem.response_json, int(idem.response_code)
        return {"detail": "Request in progress"}, 409

    try:
        body, code = handler()
    except Exception:
        IdempotencyKey.objects.filter(id=idem.id).delete()
        raise

    IdempotencyKey.objects.filter(id=idem.id).update(response_json=_json_safe(body), response_code=code)
    return body, code


def _json_safe(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


def compute_request_hash(data: Optional[dict]) -> Optional[str]:
    """Compute a canonical SHA256 hash of the request body.

    Uses sorted keys JSON representation to stabilize the hash across equivalent payloads.
    Returns None when data is falsy.
    """
    if not data:
        return None
    try:
        payload = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    except (TypeError, ValueError):
        return None
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
