from unittest import mock

import pytest
from common.choices import OrderStatus, TrackingStatus
from fulfillment.models import Shipment
from fulfillment.tests.factories import ShipmentFactory, ShippingMethodFactory
from inventory.tests.factories import WarehouseFactory
from orders.tests.factories import ProductOrderFactory
from rest_framework.test import APIClient
from users.tests.factories import UserFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


def _ship_payload(warehouse, method):
    return {"warehouse_id": warehouse.id, "shipping_method_id": method.id}


@pytest.mark.django_db
def test_ship_in_progress_order():
    order = ProductOrderFactory(status=OrderStatus.IN_PROGRESS)
    warehouse = WarehouseFactory(store=order.store)
    method = ShippingMethodFactory()

    r = _client(order.store.owner).post(
        f"/api/v1/warehouse/orders/{order.id}/ship/", _ship_payload(warehouse, method), format="json"
    )
    assert r.status_code == 201
    body = r.json()
    assert body["order_status"] == OrderStatus.COMPLETED
    assert body["tracking_status"] == TrackingStatus.PENDING
    assert len(body["tracking_number"]) == 8
    assert body["tracking_number"] == body["tracking_number"].upper()
    assert body["shipped_at"]
    order.refresh_from_db()
    assert order.status == OrderStatus.COMPLETED


@pytest.mark.django_db
def test_double_shipment_rejected():
    order = ProductOrderFactory(status=OrderStatus.IN_PROGRESS)
    warehouse = WarehouseFactory(store=order.store)
    method = ShippingMethodFactory()
    owner = _client(order.store.owner)
    url = f"/api/v1/warehouse/orders/{order.id}/ship/"

    assert owner.post(url, _ship_payload(warehouse, method), format="json").status_code == 201
    r = owner.post(url, _ship_payload(warehouse, method), format="json")
    assert r.status_code == 400
    assert r.json()["detail"] == "Shipment already exists for this order"
    assert Shipment.objects.count() == 1


@pytest.mark.django_db
def test_tracking_number_regenerated_on_collision():
    existing = ShipmentFactory(tracking_number="ABCDEF12")
    order = ProductOrderFactory(status=OrderStatus.IN_PROGRESS)
    warehouse = WarehouseFactory(store=order.store)

    with mock.patch(
        "fulfillment.services.generate_tracking_number", side_effect=[existing.tracking_number, "0000BEEF"]
    ):
        r = _client(order.store.owner).post(
            f"/api/v1/warehouse/orders/{order.id}/ship/",
            _ship_payload(warehouse, ShippingMethodFactory()),
            format="json",
        )
    assert r.status_code == 201
    assert r.json()["tracking_number"] == "0000BEEF"


@pytest.mark.django_db
@pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.ACCEPTED, OrderStatus.CANCELLED])
def test_only_in_progress_orders_ship(status):
    order = ProductOrderFactory(status=status)
    warehouse = WarehouseFactory(store=order.store)
    r = _client(order.store.owner).post(
        f"/api/v1/warehouse/orders/{order.id}/ship/", _ship_payload(warehouse, ShippingMethodFactory()), format="json"
    )
    assert r.status_code == 400
    assert not Shipment.objects.exists()


@pytest.mark.django_db
def test_ship_requires_owner_and_own_warehouse():
    order = ProductOrderFactory(status=OrderStatus.IN_PROGRESS)
    method = ShippingMethodFactory()
    url = f"/api/v1/warehouse/orders/{order.id}/ship/"

    own = WarehouseFactory(store=order.store)
    assert _client(order.buyer).post(url, _ship_payload(own, method), format="json").status_code == 403
    foreign = WarehouseFactory()
    assert _client(order.store.owner).post(url, _ship_payload(foreign, method), format="json").status_code == 400
    assert not Shipment.objects.exists()


@pytest.mark.django_db
def test_delivery_is_final_and_delivers_order():
    shipment = ShipmentFactory()
    owner = _client(shipment.order.store.owner)
    url = f"/api/v1/warehouse/orders/{shipment.order_id}/track/"

    assert owner.put(url, {"tracking_status": "LOST"}, format="json").status_code == 400
    assert owner.put(url, {"tracking_status": TrackingStatus.IN_TRANSIT}, format="json").status_code == 200
    r = owner.put(url, {"tracking_status": TrackingStatus.DELIVERED}, format="json")
    assert r.status_code == 200
    assert r.json()["delivered_at"]
    assert r.json()["order_status"] == OrderStatus.DELIVERED

    r = owner.put(url, {"tracking_status": TrackingStatus.IN_TRANSIT}, format="json")
    assert r.status_code == 400
    shipment.refresh_from_db()
    assert shipment.tracking_status == TrackingStatus.DELIVERED


@pytest.mark.django_db
def test_shipment_visible_to_buyer_and_owner_only():
    shipment = ShipmentFactory()
    url = f"/api/v1/warehouse/orders/{shipment.order_id}/shipment/"
    assert _client(shipment.order.buyer).get(url).json()["tracking_number"] == shipment.tracking_number
    assert _client(shipment.order.store.owner).get(url).status_code == 200
    assert _client(UserFactory()).get(url).status_code == 403

    unshipped = ProductOrderFactory()
    assert _client(unshipped.buyer).get(f"/api/v1/warehouse/orders/{unshipped.id}/shipment/").status_code == 404


@pytest.mark.django_db
def test_list_shipping_methods():
    ShippingMethodFactory(name="Express")
    ShippingMethodFactory(name="Retired", is_active=False)
    r = _client(UserFactory()).get("/api/v1/warehouse/shipping-methods/")
    assert [m["name"] for m in r.json()["results"]] == ["Express"]
