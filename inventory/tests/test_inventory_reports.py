from decimal import Decimal

import pytest
from inventory.tests.factories import InventoryFactory, WarehouseFactory
from rest_framework.test import APIClient
from users.tests.factories import SellerFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.mark.django_db
def test_stock_report_values_only_my_stock():
    row = InventoryFactory(quantity=4, product__price=Decimal("12.50"))
    InventoryFactory()

    r = _client(row.warehouse.store.owner).get("/api/v1/inventory/reports/stock/")
    assert r.status_code == 200
    rows = r.json()["results"]
    assert len(rows) == 1
    assert rows[0]["product"] == row.product_id
    assert rows[0]["warehouse_name"] == row.warehouse.name
    assert Decimal(rows[0]["stock_value"]) == Decimal("50.00")


@pytest.mark.django_db
def test_low_stock_alerts_use_threshold():
    wh = WarehouseFactory()
    two = InventoryFactory(warehouse=wh, quantity=2)
    five = InventoryFactory(warehouse=wh, quantity=5)
    InventoryFactory(warehouse=wh, quantity=6)
    InventoryFactory(quantity=1)
    client = _client(wh.store.owner)

    r = client.get("/api/v1/inventory/reports/low-stock/")
    assert [row["product"] for row in r.json()["results"]] == [two.product_id, five.product_id]

    r = client.get("/api/v1/inventory/reports/low-stock/?threshold=2")
    assert [row["quantity"] for row in r.json()["results"]] == [2]

    assert client.get("/api/v1/inventory/reports/low-stock/?threshold=-1").status_code == 400
    assert client.get("/api/v1/inventory/reports/low-stock/?threshold=lots").status_code == 400


@pytest.mark.django_db
def test_low_stock_default_comes_from_settings(settings):
    wh = WarehouseFactory()
    InventoryFactory(warehouse=wh, quantity=2)
    settings.LOW_STOCK_THRESHOLD = 1

    r = _client(wh.store.owner).get("/api/v1/inventory/reports/low-stock/")
    assert r.json()["results"] == []


@pytest.mark.django_db
def test_warehouse_utilization_follows_the_ledger():
    wh = WarehouseFactory(capacity=200)
    InventoryFactory(warehouse=wh, quantity=50)
    empty = WarehouseFactory(store=wh.store, capacity=0)
    WarehouseFactory()

    r = _client(wh.store.owner).get("/api/v1/inventory/reports/utilization/")
    assert r.status_code == 200
    by_id = {w["id"]: w for w in r.json()["results"]}
    assert set(by_id) == {wh.id, empty.id}
    assert by_id[wh.id]["used_capacity"] == 50
    assert by_id[wh.id]["available_capacity"] == 150
    assert by_id[wh.id]["utilization_percentage"] == "25.00"
    assert by_id[empty.id]["utilization_percentage"] == "0.00"


@pytest.mark.django_db
def test_reports_require_authentication():
    client = APIClient()
    for name in ("stock", "low-stock", "utilization"):
        assert client.get(f"/api/v1/inventory/reports/{name}/").status_code == 401


@pytest.mark.django_db
def test_reports_are_empty_for_users_without_warehouses():
    InventoryFactory(quantity=1)
    client = _client(SellerFactory())
    for name in ("stock", "low-stock", "utilization"):
        assert client.get(f"/api/v1/inventory/reports/{name}/").json()["results"] == []
