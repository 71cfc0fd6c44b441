"""Payment gateway port (abstract interface).

Adapters translate processor responses into these frozen results so services
never see SDK objects. Amounts are integers in the currency's minor unit.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class GatewayError(Exception):
    """The processor rejected the call or could not be reached."""


class GatewayTimeout(GatewayError):
    """The processor did not answer within the configured timeout."""


@dataclass(frozen=True)
class IntentResult:
    intent_id: str
    status: str
    amount_minor: int
    currency: str
    client_secret: str | None = None
    metadata: dict = field(default_factory=dict)


@dataclass(frozen=True)
class RefundResult:
    success: bool
    refund_id: str | None = None
    status: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class CustomerInfo:
    name: str = ""
    email: str = ""
    address: dict = field(default_factory=dict)


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_intent(
        self,
        amount_minor: int,
        currency: str,
        description: str,
        customer: CustomerInfo | None,
        metadata: dict | None,
    ) -> IntentResult:
        """Create a payment intent the client can confirm."""
        ...

    @abstractmethod
    def retrieve_intent(self, intent_id: str) -> IntentResult:
        """Fetch the current state of an intent."""
        ...

    @abstractmethod
    def refund(self, intent_id: str) -> RefundResult:
        """Refund the full amount captured by an intent."""
        ...

    @abstractmethod
    def cancel_intent(self, intent_id: str) -> IntentResult:
        """Void an intent that has not captured any money."""
        ...
