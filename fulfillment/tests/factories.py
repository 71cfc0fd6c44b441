from decimal import Decimal

import factory
from common.choices import TrackingStatus
from django.utils import timezone
from factory.django import DjangoModelFactory
from fulfillment.models import Shipment, ShippingMethod


class ShippingMethodFactory(DjangoModelFactory):
    class Meta:
        model = ShippingMethod

    name = factory.Sequence(lambda n: f"Standard {n}")
    carrier = "BlueDart"
    cost = Decimal("49.00")
    estimated_days = 3


class ShipmentFactory(DjangoModelFactory):
    class Meta:
        model = Shipment

    order = factory.SubFactory("orders.tests.factories.ProductOrderFactory", status="COMPLETED")
    warehouse = factory.SubFactory(
        "inventory.tests.factories.WarehouseFactory", store=factory.SelfAttribute("..order.store")
    )
    shipping_method = factory.SubFactory(ShippingMethodFactory)
    tracking_number = factory.Sequence(lambda n: f"{n:08X}")
    tracking_status = TrackingStatus.PENDING
    shipped_at = factory.LazyFunction(timezone.now)
