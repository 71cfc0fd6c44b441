import pytest
from payments.gateway import reset_gateway, set_gateway
from payments.gateway.fake import FakeGateway


@pytest.fixture(autouse=True)
def fake_gateway():
    """Fresh in-memory payment gateway per test."""
    gateway = FakeGateway()
    set_gateway(gateway)
    yield gateway
    reset_gateway()


@pytest.fixture(autouse=True)
def _clear_cache():
    from django.core.cache import cache

    cache.clear()
    yield
    cache.clear()
