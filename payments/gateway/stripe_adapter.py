"""Stripe payment gateway adapter built on stripe-python.

Every call carries the secret key explicitly and runs through a requests-based
HTTP client bounded by ``PAYMENT_TIMEOUT_SECONDS``. Connection failures and
timeouts surface as ``GatewayTimeout``; any other Stripe error as
``GatewayError``.
"""

import logging

import stripe
from django.conf import settings
from payments.gateway.port import CustomerInfo, GatewayError, GatewayTimeout, IntentResult, PaymentGateway, RefundResult

logger = logging.getLogger("marketplace.payments")


def _intent_result(intent) -> IntentResult:
    return IntentResult(
        intent_id=intent.id,
        status=intent.status,
        amount_minor=int(intent.amount),
        currency=intent.currency,
        client_secret=getattr(intent, "client_secret", None),
        metadata=dict(getattr(intent, "metadata", None) or {}),
    )


class StripeGateway(PaymentGateway):
    def __init__(self, api_key: str | None = None, timeout: float | None = None) -> None:
        self.api_key = api_key or getattr(settings, "STRIPE_SECRET_KEY", "")
        self.timeout = timeout or getattr(settings, "PAYMENT_TIMEOUT_SECONDS", 10)
        stripe.default_http_client = stripe.RequestsClient(timeout=self.timeout)

    def _call(self, fn, **params):
        try:
            return fn(api_key=self.api_key, **params)
        except stripe.APIConnectionError as exc:
            logger.warning("stripe_unreachable", extra={"call": getattr(fn, "__qualname__", str(fn))})
            raise GatewayTimeout(str(exc)) from exc
        except stripe.StripeError as exc:
            logger.warning(
                "stripe_error",
                extra={"call": getattr(fn, "__qualname__", str(fn)), "stripe_code": getattr(exc, "code", None)},
            )
            raise GatewayError(getattr(exc, "user_message", None) or str(exc)) from exc

    def create_intent(
        self,
        amount_minor: int,
        currency: str,
        description: str,
        customer: CustomerInfo | None,
        metadata: dict | None,
    ) -> IntentResult:
        params = {
            "amount": amount_minor,
            "currency": currency,
            "description": description,
            "payment_method_types": ["card"],
            "metadata": {k: str(v) for k, v in (metadata or {}).items()},
        }
        if customer is not None:
            created = self._call(
                stripe.Customer.create,
                name=customer.name or None,
                email=customer.email or None,
                address=customer.address or None,
            )
            params["customer"] = created.id
        return _intent_result(self._call(stripe.PaymentIntent.create, **params))

    def retrieve_intent(self, intent_id: str) -> IntentResult:
        return _intent_result(self._call(stripe.PaymentIntent.retrieve, id=intent_id))

    def refund(self, intent_id: str) -> RefundResult:
        try:
            refund = self._call(stripe.Refund.create, payment_intent=intent_id)
        except GatewayError as exc:
            return RefundResult(success=False, failure_reason=str(exc))
        return RefundResult(
            success=refund.status in {"succeeded", "pending"},
            refund_id=refund.id,
            status=refund.status,
            failure_reason=getattr(refund, "failure_reason", None),
        )

    def cancel_intent(self, intent_id: str) -> IntentResult:
        return _intent_result(self._call(stripe.PaymentIntent.cancel, intent=intent_id))
