"""Payment services: the only code that talks to the active gateway, plus the
ledger that binds each intent to the single order it pays for.

Money enters as ``Decimal`` in major units and is converted to integer minor
units right before each processor call.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from common.exceptions import PaymentNotCompletedError, StateConflictError, UpstreamProcessorError, ValidationError
from django.conf import settings
from django.db import IntegrityError, transaction

from .gateway import get_gateway
from .gateway.port import CustomerInfo, GatewayError, GatewayTimeout, IntentResult, RefundResult
from .models import PaymentIntentClaim

logger = logging.getLogger("marketplace.payments")

SUCCEEDED = "succeeded"
CANCELED = "canceled"


def to_minor_units(amount) -> int:
    """Convert a major-unit amount to minor units, rounding half up."""
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Invalid amount.")
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def currency() -> str:
    return str(getattr(settings, "PAYMENT_CURRENCY", "inr")).lower()


def create_intent(
    *,
    amount,
    description: str = "",
    customer_info: CustomerInfo | None = None,
    metadata: dict | None = None,
) -> IntentResult:
    amount_minor = to_minor_units(amount)
    if amount_minor <= 0:
        raise ValidationError("Invalid amount calculated")
    try:
        intent = get_gateway().create_intent(amount_minor, currency(), description, customer_info, metadata or {})
    except GatewayError as exc:
        logger.error("payment_intent_failed", extra={"amount_minor": amount_minor, "error": str(exc)})
        raise UpstreamProcessorError("Could not create payment intent.") from exc
    logger.info(
        "payment_intent_created",
        extra={"intent_id": intent.intent_id, "amount_minor": amount_minor, "currency": intent.currency},
    )
    return intent


def verify_succeeded(intent_id: str, expected_amount=None, expected_metadata: dict | None = None) -> IntentResult:
    """Return the intent when the processor reports it paid in full for this order.

    Raises PaymentNotCompletedError when it is not succeeded, when the
    captured amount differs from ``expected_amount``, when its metadata does
    not carry every ``expected_metadata`` value, or when the processor times
    out. Any other processor error becomes UpstreamProcessorError.
    """
    if not intent_id:
        raise ValidationError("Missing payment intent.")
    try:
        intent = get_gateway().retrieve_intent(intent_id)
    except GatewayTimeout as exc:
        logger.warning("payment_verify_timeout", extra={"intent_id": intent_id})
        raise PaymentNotCompletedError("Payment could not be verified.") from exc
    except GatewayError as exc:
        logger.error("payment_verify_failed", extra={"intent_id": intent_id, "error": str(exc)})
        raise UpstreamProcessorError("Could not verify payment.") from exc

    if intent.status != SUCCEEDED:
        logger.info("payment_not_completed", extra={"intent_id": intent_id, "status": intent.status})
        raise PaymentNotCompletedError()
    if expected_amount is not None and intent.amount_minor != to_minor_units(expected_amount):
        logger.warning(
            "payment_amount_mismatch",
            extra={
                "intent_id": intent_id,
                "expected_minor": to_minor_units(expected_amount),
                "captured_minor": intent.amount_minor,
            },
        )
        raise PaymentNotCompletedError("Payment amount does not match the order total.")
    if expected_metadata:
        stored = intent.metadata or {}
        mismatched = sorted(k for k, v in expected_metadata.items() if stored.get(k) != str(v))
        if mismatched:
            logger.warning("payment_metadata_mismatch", extra={"intent_id": intent_id, "fields": mismatched})
            raise PaymentNotCompletedError("Payment does not belong to this order.")
    return intent


def refund(intent_id: str) -> RefundResult:
    """Best-effort full refund; failures are reported, never raised."""
    try:
        result = get_gateway().refund(intent_id)
    except GatewayError as exc:
        result = RefundResult(success=False, failure_reason=str(exc))
    if result.success:
        logger.info("payment_refunded", extra={"intent_id": intent_id, "refund_id": result.refund_id})
    else:
        logger.error("payment_refund_failed", extra={"intent_id": intent_id, "reason": result.failure_reason})
    return result


def release_unconfirmed(intent_id: str) -> RefundResult:
    """Settle an intent whose payment was never confirmed on our side.

    Money the processor already captured is refunded; otherwise the intent is
    voided so it can no longer be paid, and the result carries status
    ``canceled``. Never raises.
    """
    try:
        intent = get_gateway().retrieve_intent(intent_id)
    except GatewayError as exc:
        logger.error("payment_release_failed", extra={"intent_id": intent_id, "error": str(exc)})
        return RefundResult(success=False, failure_reason=str(exc))
    if intent.status == SUCCEEDED:
        return refund(intent_id)
    if intent.status != CANCELED:
        try:
            get_gateway().cancel_intent(intent_id)
        except GatewayError as exc:
            logger.error("payment_release_failed", extra={"intent_id": intent_id, "error": str(exc)})
            return RefundResult(success=False, failure_reason=str(exc))
    logger.info("payment_intent_cancelled", extra={"intent_id": intent_id, "previous_status": intent.status})
    return RefundResult(success=True, status=CANCELED)


def ensure_unclaimed(intent_id: str) -> None:
    if PaymentIntentClaim.objects.filter(intent_id=intent_id).exists():
        raise StateConflictError("This payment has already been used for an order.")


def claim_intent(intent_id: str, *, order_type: str, order_id: int) -> PaymentIntentClaim:
    """Record that an intent pays for one order; call inside the order's transaction."""
    try:
        with transaction.atomic():
            return PaymentIntentClaim.objects.create(intent_id=intent_id, order_type=order_type, order_id=order_id)
    except IntegrityError:
        logger.warning("payment_intent_reused", extra={"intent_id": intent_id, "order_type": order_type})
        raise StateConflictError("This payment has already been used for an order.")
