from types import SimpleNamespace
from unittest import mock

import pytest
import stripe
from payments.gateway.port import CustomerInfo, GatewayError, GatewayTimeout
from payments.gateway.stripe_adapter import StripeGateway


@pytest.fixture
def gateway(settings):
    settings.STRIPE_SECRET_KEY = "sk_test_123"
    settings.PAYMENT_TIMEOUT_SECONDS = 3
    return StripeGateway()


def test_create_intent_creates_customer_and_intent(gateway):
    customer = SimpleNamespace(id="cus_1")
    intent = SimpleNamespace(
        id="pi_1", status="requires_payment_method", amount=50000, currency="inr", client_secret="pi_1_secret"
    )
    with mock.patch("stripe.Customer.create", return_value=customer) as cust, mock.patch(
        "stripe.PaymentIntent.create", return_value=intent
    ) as create:
        result = gateway.create_intent(
            50000, "inr", "Payment for gig", CustomerInfo(name="A", email="a@x.io"), {"k": 1}
        )

    assert cust.call_args.kwargs["api_key"] == "sk_test_123"
    kwargs = create.call_args.kwargs
    assert kwargs["amount"] == 50000
    assert kwargs["customer"] == "cus_1"
    assert kwargs["metadata"] == {"k": "1"}
    assert result.client_secret == "pi_1_secret"


def test_retrieve_connection_error_is_timeout(gateway):
    with mock.patch("stripe.PaymentIntent.retrieve", side_effect=stripe.APIConnectionError("timed out")):
        with pytest.raises(GatewayTimeout):
            gateway.retrieve_intent("pi_1")


def test_retrieve_maps_other_errors(gateway):
    with mock.patch("stripe.PaymentIntent.retrieve", side_effect=stripe.InvalidRequestError("No such", "id")):
        with pytest.raises(GatewayError):
            gateway.retrieve_intent("pi_missing")


def test_refund_failure_returns_result(gateway):
    with mock.patch("stripe.Refund.create", side_effect=stripe.InvalidRequestError("already refunded", None)):
        result = gateway.refund("pi_1")
    assert result.success is False


def test_refund_success(gateway):
    with mock.patch("stripe.Refund.create", return_value=SimpleNamespace(id="re_1", status="succeeded")) as create:
        result = gateway.refund("pi_1")
    assert create.call_args.kwargs["payment_intent"] == "pi_1"
    assert result.success and result.refund_id == "re_1"


def test_retrieve_carries_metadata(gateway):
    intent = SimpleNamespace(
        id="pi_1", status="succeeded", amount=44000, currency="inr", metadata={"buyer_id": "7", "gig_id": "3"}
    )
    with mock.patch("stripe.PaymentIntent.retrieve", return_value=intent):
        result = gateway.retrieve_intent("pi_1")
    assert result.metadata == {"buyer_id": "7", "gig_id": "3"}


def test_cancel_intent(gateway):
    intent = SimpleNamespace(id="pi_1", status="canceled", amount=2000, currency="inr")
    with mock.patch("stripe.PaymentIntent.cancel", return_value=intent) as cancel:
        result = gateway.cancel_intent("pi_1")
    assert cancel.call_args.kwargs == {"api_key": "sk_test_123", "intent": "pi_1"}
    assert result.status == "canceled"
    assert result.metadata == {}
