from decimal import Decimal

import factory
from common.choices import OrderStatus, PaymentStatus
from factory.django import DjangoModelFactory
from orders.models import GigOrder, ProductOrder, ProductOrderItem


class GigOrderFactory(DjangoModelFactory):
    class Meta:
        model = GigOrder

    inquiry = factory.SubFactory("inquiries.tests.factories.AcceptedInquiryFactory")
    gig = factory.SelfAttribute("inquiry.gig")
    buyer = factory.SelfAttribute("inquiry.buyer")
    seller = factory.SelfAttribute("inquiry.gig.seller")
    final_quantity = factory.SelfAttribute("inquiry.final_quantity")
    final_price = factory.SelfAttribute("inquiry.final_price")
    total_price = factory.LazyAttribute(lambda o: Decimal(o.final_quantity) * o.final_price)
    payment_intent_id = factory.Sequence(lambda n: f"pi_test_{n}")
    requirement = "Deliver to the loading dock"
    status = OrderStatus.PENDING


class ProductOrderFactory(DjangoModelFactory):
    class Meta:
        model = ProductOrder

    buyer = factory.SubFactory("users.tests.factories.UserFactory")
    store = factory.SubFactory("catalog.tests.factories.StoreFactory")
    total_price = Decimal("0.00")
    payment_intent_id = factory.Sequence(lambda n: f"pi_order_{n}")
    payment_status = PaymentStatus.SUCCEEDED
    shipping_address = "12 Market Road"
    status = OrderStatus.PENDING


class ProductOrderItemFactory(DjangoModelFactory):
    class Meta:
        model = ProductOrderItem

    order = factory.SubFactory(ProductOrderFactory)
    product = factory.SubFactory("catalog.tests.factories.ProductFactory", store=factory.SelfAttribute("..order.store"))
    quantity = 1
    unit_price = factory.SelfAttribute("product.price")
