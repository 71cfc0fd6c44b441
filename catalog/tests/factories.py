from decimal import Decimal

import factory
from catalog.models import Gig, Product, Store
from factory import Faker
from factory.django import DjangoModelFactory


class StoreFactory(DjangoModelFactory):
    class Meta:
        model = Store

    owner = factory.SubFactory("users.tests.factories.SellerFactory")
    name = Faker("company")
    description = Faker("sentence")


class ProductFactory(DjangoModelFactory):
    class Meta:
        model = Product

    store = factory.SubFactory(StoreFactory)
    title = Faker("sentence", nb_words=3)
    sku = factory.Faker("bothify", text="SKU-####-???")
    price = Decimal("10.00")


class GigFactory(DjangoModelFactory):
    class Meta:
        model = Gig

    seller = factory.SubFactory("users.tests.factories.SellerFactory")
    title = Faker("sentence", nb_words=4)
    description = Faker("paragraph")
    bulk_price = Decimal("500.00")
    min_order_quantity = 10
