import pytest
from catalog.tests.factories import ProductFactory, StoreFactory
from inventory.models import Inventory, Warehouse
from inventory.services import stock_out
from inventory.tests.factories import InventoryFactory, WarehouseFactory
from rest_framework.test import APIClient
from users.tests.factories import SellerFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.mark.django_db
def test_owner_creates_and_lists_warehouses():
    store = StoreFactory()
    client = _client(store.owner)

    r = client.post(
        "/api/v1/inventory/warehouses/",
        {"store": store.id, "name": "North", "location": "Pune", "capacity": 500},
        format="json",
    )
    assert r.status_code == 201
    assert r.json()["used_capacity"] == 0

    WarehouseFactory()  # someone else's
    r = client.get("/api/v1/inventory/warehouses/")
    assert r.status_code == 200
    assert [w["name"] for w in r.json()["results"]] == ["North"]


@pytest.mark.django_db
def test_cannot_create_warehouse_for_foreign_store():
    store = StoreFactory()
    r = _client(SellerFactory()).post(
        "/api/v1/inventory/warehouses/", {"store": store.id, "name": "X", "capacity": 5}, format="json"
    )
    assert r.status_code == 403
    assert not Warehouse.objects.exists()


@pytest.mark.django_db
def test_stock_in_and_out_via_api():
    wh = WarehouseFactory(capacity=50)
    product = ProductFactory(store=wh.store)
    client = _client(wh.store.owner)

    r = client.post(
        "/api/v1/inventory/stock-in/",
        {"warehouse_id": wh.id, "product_id": product.id, "quantity": 20, "location": "B-2"},
        format="json",
    )
    assert r.status_code == 201
    assert r.json()["change_type"] == "INCOMING"

    r = client.post(
        "/api/v1/inventory/stock-out/",
        {"warehouse_id": wh.id, "product_id": product.id, "quantity": 25},
        format="json",
    )
    assert r.status_code == 400
    assert r.json()["code"] == "insufficient_stock"

    r = client.post(
        "/api/v1/inventory/stock-out/",
        {"warehouse_id": wh.id, "product_id": product.id, "quantity": 5},
        format="json",
    )
    assert r.status_code == 201
    assert Inventory.objects.get(warehouse=wh, product=product).quantity == 15


@pytest.mark.django_db
def test_stock_in_over_capacity_returns_400():
    wh = WarehouseFactory(capacity=5)
    product = ProductFactory(store=wh.store)
    r = _client(wh.store.owner).post(
        "/api/v1/inventory/stock-in/",
        {"warehouse_id": wh.id, "product_id": product.id, "quantity": 6},
        format="json",
    )
    assert r.status_code == 400
    assert r.json()["code"] == "capacity_exceeded"


@pytest.mark.django_db
def test_stock_mutation_requires_store_owner():
    row = InventoryFactory(quantity=5)
    r = _client(SellerFactory()).post(
        "/api/v1/inventory/stock-out/",
        {"warehouse_id": row.warehouse_id, "product_id": row.product_id, "quantity": 1},
        format="json",
    )
    assert r.status_code == 403
    row.refresh_from_db()
    assert row.quantity == 5


@pytest.mark.django_db
def test_stock_queries_for_owner():
    row = InventoryFactory(quantity=7)
    client = _client(row.warehouse.store.owner)
    client.post(
        "/api/v1/inventory/stock-out/",
        {"warehouse_id": row.warehouse_id, "product_id": row.product_id, "quantity": 2, "reference": "r1"},
        format="json",
    )

    movements = client.get(f"/api/v1/inventory/movements/{row.product_id}/").json()["results"]
    assert [m["reference"] for m in movements] == ["r1"]

    by_product = client.get(f"/api/v1/inventory/products/{row.product_id}/").json()["results"]
    assert by_product[0]["quantity"] == 5

    by_wh = client.get(f"/api/v1/inventory/warehouses/{row.warehouse_id}/").json()["results"]
    assert by_wh[0]["product"] == row.product_id


@pytest.mark.django_db
def test_stock_queries_hidden_from_others():
    row = InventoryFactory(quantity=7)
    client = _client(SellerFactory())
    assert client.get(f"/api/v1/inventory/products/{row.product_id}/").status_code == 403
    assert client.get(f"/api/v1/inventory/warehouses/{row.warehouse_id}/").status_code == 403
    assert client.get("/api/v1/inventory/warehouses/999999/").status_code == 404


@pytest.mark.django_db
def test_inventory_requires_authentication():
    assert APIClient().get("/api/v1/inventory/warehouses/").status_code == 401


@pytest.mark.django_db
def test_owner_reads_updates_and_deletes_warehouse():
    wh = WarehouseFactory(capacity=100)
    client = _client(wh.store.owner)
    url = f"/api/v1/inventory/warehouses/{wh.id}/detail/"

    r = client.get(url)
    assert r.status_code == 200
    assert r.json()["available_capacity"] == 100

    r = client.patch(url, {"name": "South", "capacity": 150}, format="json")
    assert r.status_code == 200
    assert (r.json()["name"], r.json()["capacity"]) == ("South", 150)

    assert client.delete(url).status_code == 204
    assert not Warehouse.objects.filter(id=wh.id).exists()


@pytest.mark.django_db
def test_capacity_cannot_drop_below_stored_units():
    row = InventoryFactory(quantity=40)
    url = f"/api/v1/inventory/warehouses/{row.warehouse_id}/detail/"

    r = _client(row.warehouse.store.owner).patch(url, {"capacity": 30}, format="json")
    assert r.status_code == 400
    assert r.json()["code"] == "validation_error"
    row.warehouse.refresh_from_db()
    assert row.warehouse.capacity == 1000


@pytest.mark.django_db
def test_warehouse_with_stock_or_history_is_not_deleted():
    row = InventoryFactory(quantity=5)
    client = _client(row.warehouse.store.owner)
    url = f"/api/v1/inventory/warehouses/{row.warehouse_id}/detail/"

    r = client.delete(url)
    assert r.status_code == 400
    assert r.json()["code"] == "state_conflict"

    stock_out(warehouse_id=row.warehouse_id, product_id=row.product_id, quantity=5)
    assert client.delete(url).status_code == 400
    assert Warehouse.objects.filter(id=row.warehouse_id).exists()


@pytest.mark.django_db
def test_warehouse_detail_is_owner_only():
    wh = WarehouseFactory()
    client = _client(SellerFactory())
    url = f"/api/v1/inventory/warehouses/{wh.id}/detail/"

    assert client.get(url).status_code == 403
    assert client.patch(url, {"name": "Mine"}, format="json").status_code == 403
    assert client.delete(url).status_code == 403
    assert client.get("/api/v1/inventory/warehouses/999999/detail/").status_code == 404
    wh.refresh_from_db()
    assert wh.name != "Mine"


@pytest.mark.django_db
def test_assign_product_location():
    row = InventoryFactory(quantity=3)
    client = _client(row.warehouse.store.owner)
    payload = {"warehouse_id": row.warehouse_id, "product_id": row.product_id, "location": "A-3-2"}

    r = client.patch("/api/v1/inventory/assign-location/", payload, format="json")
    assert r.status_code == 200
    assert r.json()["location"] == "A-3-2"
    row.refresh_from_db()
    assert row.location == "A-3-2"

    unstocked = ProductFactory(store=row.warehouse.store)
    r = client.patch("/api/v1/inventory/assign-location/", {**payload, "product_id": unstocked.id}, format="json")
    assert r.status_code == 404

    r = _client(SellerFactory()).patch("/api/v1/inventory/assign-location/", payload, format="json")
    assert r.status_code == 403


# EOF
