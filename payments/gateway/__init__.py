"""Payment gateway factory.

``get_gateway()`` builds the adapter named by the ``PAYMENT_GATEWAY`` setting
(a dotted path) once per process; ``set_gateway()`` and ``reset_gateway()``
swap it in tests.
"""

from django.conf import settings
from django.utils.module_loading import import_string
from payments.gateway.port import PaymentGateway

DEFAULT_GATEWAY = "payments.gateway.fake.FakeGateway"

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the active payment gateway, building it on first use."""
    global _current_gateway
    if _current_gateway is None:
        gateway_class = import_string(getattr(settings, "PAYMENT_GATEWAY", DEFAULT_GATEWAY) or DEFAULT_GATEWAY)
        _current_gateway = gateway_class()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Drop the cached adapter so the next call rebuilds it from settings."""
    global _current_gateway
    _current_gateway = None
