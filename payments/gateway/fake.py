"""Configurable fake payment gateway for development and testing.

Intents live in memory. By default a created intent is reported as
``succeeded`` on retrieval, which mimics a client that confirmed the card
step; tests flip ``intent_status``, ``refund_succeeds`` or ``timeout`` to
exercise the failure paths. Every call is recorded in ``calls``.
"""

from dataclasses import replace
from uuid import uuid4

from payments.gateway.port import CustomerInfo, GatewayError, GatewayTimeout, IntentResult, PaymentGateway, RefundResult


def _stringify(metadata: dict | None) -> dict:
    # Stripe stores metadata values as strings
    return {k: str(v) for k, v in (metadata or {}).items()}


class FakeGateway(PaymentGateway):
    def __init__(self) -> None:
        self.intent_status: str = "succeeded"
        self.refund_succeeds: bool = True
        self.timeout: bool = False
        self.error: str | None = None
        self.intents: dict[str, IntentResult] = {}
        self.calls: list[dict] = []
        self.created: set[str] = set()
        self.cancelled: set[str] = set()

    def configure(
        self,
        *,
        intent_status: str = "succeeded",
        refund_succeeds: bool = True,
        timeout: bool = False,
        error: str | None = None,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.intent_status = intent_status
        self.refund_succeeds = refund_succeeds
        self.timeout = timeout
        self.error = error

    def add_intent(
        self, amount_minor: int, status: str = "succeeded", currency: str = "inr", metadata: dict | None = None
    ) -> str:
        """Register an intent as if a client had already paid it."""
        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        self.intents[intent_id] = IntentResult(
            intent_id=intent_id,
            status=status,
            amount_minor=int(amount_minor),
            currency=currency,
            metadata=_stringify(metadata),
        )
        return intent_id

    def _check_failures(self) -> None:
        if self.timeout:
            raise GatewayTimeout("Timed out talking to the payment processor")
        if self.error:
            raise GatewayError(self.error)

    def _known(self, intent_id: str) -> IntentResult:
        known = self.intents.get(intent_id)
        if known is None:
            raise GatewayError(f"No such payment_intent: '{intent_id}'")
        return known

    def create_intent(
        self,
        amount_minor: int,
        currency: str,
        description: str,
        customer: CustomerInfo | None,
        metadata: dict | None,
    ) -> IntentResult:
        self.calls.append(
            {
                "method": "create_intent",
                "amount_minor": amount_minor,
                "currency": currency,
                "description": description,
                "customer": customer,
                "metadata": metadata,
            }
        )
        self._check_failures()
        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        result = IntentResult(
            intent_id=intent_id,
            status="requires_payment_method",
            amount_minor=int(amount_minor),
            currency=currency,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:8]}",
            metadata=_stringify(metadata),
        )
        self.intents[intent_id] = result
        self.created.add(intent_id)
        return result

    def retrieve_intent(self, intent_id: str) -> IntentResult:
        self.calls.append({"method": "retrieve_intent", "intent_id": intent_id})
        self._check_failures()
        known = self._known(intent_id)
        if intent_id in self.cancelled:
            status = "canceled"
        elif intent_id in self.created:
            status = self.intent_status
        else:
            status = known.status
        return replace(known, status=status)

    def refund(self, intent_id: str) -> RefundResult:
        self.calls.append({"method": "refund", "intent_id": intent_id})
        if self.refund_succeeds:
            return RefundResult(success=True, refund_id=f"re_fake_{uuid4().hex[:12]}", status="succeeded")
        return RefundResult(success=False, status="failed", failure_reason="Refund declined")

    def cancel_intent(self, intent_id: str) -> IntentResult:
        self.calls.append({"method": "cancel_intent", "intent_id": intent_id})
        self._check_failures()
        known = self._known(intent_id)
        self.cancelled.add(intent_id)
        return replace(known, status="canceled")
