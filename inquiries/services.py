"""Negotiation services for supplier inquiries.

Transitions::

    PENDING/NEGOTIATING --counter-offer--> NEGOTIATING (round + 1)
    PENDING/NEGOTIATING --accept--> ACCEPTED (finals frozen, round unchanged)
    PENDING/NEGOTIATING --reject--> REJECTED (round unchanged)

ACCEPTED and REJECTED are terminal.
"""

import logging
from decimal import Decimal

from catalog.models import Gig
from common.exceptions import InquiryFinalizedError, NotFoundError, StateConflictError, ValidationError
from common.permissions import BUYER, PARTY, SELLER, authorize
from django.db import transaction

from .models import Inquiry

logger = logging.getLogger("marketplace.inquiries")


def create_inquiry(
    *,
    gig_id,
    buyer,
    supplier_id,
    requested_quantity,
    requested_price: Decimal | None = None,
    message: str = "",
) -> Inquiry:
    if not gig_id or not supplier_id or not requested_quantity:
        raise ValidationError("Missing required fields")
    try:
        gig = Gig.objects.get(id=gig_id)
    except Gig.DoesNotExist:
        raise NotFoundError("Gig not found")
    if int(supplier_id) != gig.seller_id:
        raise ValidationError("Supplier must be the owner of the gig.")
    if buyer.id == gig.seller_id:
        raise ValidationError("You cannot send an inquiry for your own gig.")

    inquiry = Inquiry.objects.create(
        gig=gig,
        buyer=buyer,
        supplier_id=gig.seller_id,
        requested_quantity=int(requested_quantity),
        requested_price=requested_price,
        message=message or "",
        status=Inquiry.STATUS_PENDING,
        round=1,
    )
    logger.info(
        "inquiry_created",
        extra={"inquiry_id": inquiry.id, "gig_id": gig.id, "buyer_id": buyer.id, "supplier_id": gig.seller_id},
    )
    return inquiry


@transaction.atomic
def update_inquiry(
    *,
    inquiry_id,
    actor,
    proposed_quantity: int | None = None,
    proposed_price: Decimal | None = None,
    message: str | None = None,
    status: str | None = None,
) -> Inquiry:
    """Apply a counter-offer, acceptance or rejection under a row lock."""
    try:
        inquiry = Inquiry.objects.select_for_update().get(id=inquiry_id)
    except Inquiry.DoesNotExist:
        raise NotFoundError("Inquiry not found")
    authorize(actor, inquiry, BUYER, SELLER, detail="Not authorized to update this inquiry")
    if inquiry.is_final:
        raise InquiryFinalizedError()
    if status not in (None, "", Inquiry.STATUS_ACCEPTED, Inquiry.STATUS_REJECTED, Inquiry.STATUS_NEGOTIATING):
        raise ValidationError(f"Unsupported inquiry status: {status}")

    previous = inquiry.status
    if proposed_quantity:
        inquiry.proposed_quantity = int(proposed_quantity)
    if proposed_price:
        inquiry.proposed_price = proposed_price
    if message:
        inquiry.message = message

    if status == Inquiry.STATUS_ACCEPTED:
        final_price = inquiry.proposed_price or inquiry.requested_price
        if final_price is None:
            raise ValidationError("A price must be agreed before accepting the inquiry.")
        inquiry.final_quantity = inquiry.proposed_quantity or inquiry.requested_quantity
        inquiry.final_price = final_price
        inquiry.status = Inquiry.STATUS_ACCEPTED
    elif status == Inquiry.STATUS_REJECTED:
        inquiry.status = Inquiry.STATUS_REJECTED
    else:
        inquiry.status = Inquiry.STATUS_NEGOTIATING
        inquiry.round = int(inquiry.round) + 1

    inquiry.save()
    logger.info(
        "inquiry_updated",
        extra={
            "inquiry_id": inquiry.id,
            "actor_id": actor.id,
            "status_from": previous,
            "status_to": inquiry.status,
            "round": inquiry.round,
        },
    )
    return inquiry


@transaction.atomic
def cancel_inquiry(*, inquiry_id, actor) -> None:
    try:
        inquiry = Inquiry.objects.select_for_update().get(id=inquiry_id)
    except Inquiry.DoesNotExist:
        raise NotFoundError("Inquiry not found")
    authorize(actor, inquiry, BUYER, detail="Not authorized to cancel this inquiry")
    if inquiry.status != Inquiry.STATUS_PENDING:
        raise StateConflictError("Inquiry cannot be cancelled at this stage")
    inquiry.delete()
    logger.info("inquiry_cancelled", extra={"inquiry_id": inquiry_id, "actor_id": actor.id})


def get_inquiry(*, inquiry_id, actor) -> Inquiry:
    try:
        inquiry = Inquiry.objects.select_related("gig", "buyer", "supplier").get(id=inquiry_id)
    except Inquiry.DoesNotExist:
        raise NotFoundError("Inquiry not found")
    authorize(actor, inquiry, PARTY, detail="Not authorized to view this inquiry")
    return inquiry
