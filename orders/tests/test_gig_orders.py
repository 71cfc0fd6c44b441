from decimal import Decimal

import pytest
from catalog.tests.factories import GigFactory
from common.choices import OrderStatus, RefundStatus
from inquiries.models import Inquiry
from inquiries.tests.factories import AcceptedInquiryFactory, InquiryFactory
from orders.models import GigOrder, GigOrderUpdate
from orders.tests.factories import GigOrderFactory
from payments.models import PaymentIntentClaim
from rest_framework.test import APIClient
from users.tests.factories import UserFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


def _order_payload(inquiry, intent_id):
    return {
        "gig_id": inquiry.gig_id,
        "inquiry_id": inquiry.id,
        "payment_intent_id": intent_id,
        "requirement": "Pack in 25kg sacks",
        "shipping_address": "Dock 4, Mumbai",
    }


def _paid_intent(gateway, inquiry, amount_minor=50000, **metadata):
    """A succeeded intent issued for this inquiry's buyer and gig."""
    return gateway.add_intent(
        amount_minor, metadata={"buyer_id": inquiry.buyer_id, "gig_id": inquiry.gig_id, **metadata}
    )


@pytest.mark.django_db
def test_negotiated_order_end_to_end(fake_gateway):
    gig = GigFactory()
    buyer = UserFactory()
    buyer_client = _client(buyer)
    seller_client = _client(gig.seller)

    inquiry_id = buyer_client.post(
        "/api/v1/inquiries/",
        {"gig_id": gig.id, "supplier_id": gig.seller_id, "requested_quantity": 100, "requested_price": "5.00"},
        format="json",
    ).json()["id"]
    seller_client.put(
        f"/api/v1/inquiries/{inquiry_id}/", {"proposed_quantity": 80, "proposed_price": "5.50"}, format="json"
    )
    buyer_client.put(f"/api/v1/inquiries/{inquiry_id}/", {"status": "ACCEPTED"}, format="json")

    r = buyer_client.post(
        "/api/v1/gig-orders/create-payment-intent/", {"gig_id": gig.id, "inquiry_id": inquiry_id}, format="json"
    )
    assert r.status_code == 200
    assert r.json()["client_secret"]
    assert fake_gateway.calls[-1]["amount_minor"] == 44000

    inquiry = Inquiry.objects.get(id=inquiry_id)
    r = buyer_client.post("/api/v1/gig-orders/", _order_payload(inquiry, r.json()["payment_intent_id"]), format="json")
    assert r.status_code == 201
    body = r.json()
    assert Decimal(body["total_price"]) == Decimal("440.00")
    assert body["status"] == OrderStatus.PENDING
    assert body["seller"] == gig.seller_id


@pytest.mark.django_db
def test_intent_without_inquiry_uses_bulk_price(fake_gateway):
    gig = GigFactory(bulk_price=Decimal("1200.00"))
    r = _client(UserFactory()).post("/api/v1/gig-orders/create-payment-intent/", {"gig_id": gig.id}, format="json")
    assert r.status_code == 200
    assert fake_gateway.calls[-1]["amount_minor"] == 120000


@pytest.mark.django_db
def test_unpaid_intent_never_creates_order(fake_gateway):
    inquiry = AcceptedInquiryFactory()
    intent_id = fake_gateway.add_intent(50000, status="requires_payment_method")

    r = _client(inquiry.buyer).post("/api/v1/gig-orders/", _order_payload(inquiry, intent_id), format="json")
    assert r.status_code == 400
    assert r.json()["code"] == "payment_not_completed"
    assert not GigOrder.objects.exists()


@pytest.mark.django_db
def test_underpaid_intent_never_creates_order(fake_gateway):
    inquiry = AcceptedInquiryFactory()  # 100 x 5.00
    intent_id = fake_gateway.add_intent(100)

    r = _client(inquiry.buyer).post("/api/v1/gig-orders/", _order_payload(inquiry, intent_id), format="json")
    assert r.status_code == 400
    assert not GigOrder.objects.exists()


@pytest.mark.django_db
def test_processor_timeout_is_not_a_payment(fake_gateway):
    inquiry = AcceptedInquiryFactory()
    intent_id = fake_gateway.add_intent(50000)
    fake_gateway.configure(timeout=True)

    r = _client(inquiry.buyer).post("/api/v1/gig-orders/", _order_payload(inquiry, intent_id), format="json")
    assert r.status_code == 400
    assert not GigOrder.objects.exists()


@pytest.mark.django_db
def test_order_requires_accepted_inquiry_of_buyer(fake_gateway):
    pending = InquiryFactory()
    intent_id = fake_gateway.add_intent(50000)
    r = _client(pending.buyer).post("/api/v1/gig-orders/", _order_payload(pending, intent_id), format="json")
    assert r.status_code == 400

    accepted = AcceptedInquiryFactory()
    r = _client(UserFactory()).post("/api/v1/gig-orders/", _order_payload(accepted, intent_id), format="json")
    assert r.status_code == 403
    assert not GigOrder.objects.exists()


@pytest.mark.django_db
def test_one_order_per_inquiry(fake_gateway):
    inquiry = AcceptedInquiryFactory()
    client = _client(inquiry.buyer)
    first = _order_payload(inquiry, _paid_intent(fake_gateway, inquiry))
    assert client.post("/api/v1/gig-orders/", first, format="json").status_code == 201
    second = _order_payload(inquiry, _paid_intent(fake_gateway, inquiry))
    assert client.post("/api/v1/gig-orders/", second, format="json").status_code == 400
    assert GigOrder.objects.count() == 1


@pytest.mark.django_db
def test_intent_issued_to_another_buyer_is_rejected(fake_gateway):
    inquiry = AcceptedInquiryFactory()
    intent_id = _paid_intent(fake_gateway, inquiry, buyer_id=UserFactory().id)

    r = _client(inquiry.buyer).post("/api/v1/gig-orders/", _order_payload(inquiry, intent_id), format="json")
    assert r.status_code == 400
    assert r.json()["code"] == "payment_not_completed"
    assert not GigOrder.objects.exists()


@pytest.mark.django_db
def test_intent_issued_for_another_gig_is_rejected(fake_gateway):
    inquiry = AcceptedInquiryFactory()
    intent_id = _paid_intent(fake_gateway, inquiry, gig_id=GigFactory().id)

    r = _client(inquiry.buyer).post("/api/v1/gig-orders/", _order_payload(inquiry, intent_id), format="json")
    assert r.status_code == 400
    assert not GigOrder.objects.exists()


@pytest.mark.django_db
def test_order_claims_its_intent(fake_gateway):
    inquiry = AcceptedInquiryFactory()
    intent_id = _paid_intent(fake_gateway, inquiry)

    r = _client(inquiry.buyer).post("/api/v1/gig-orders/", _order_payload(inquiry, intent_id), format="json")
    assert r.status_code == 201
    claim = PaymentIntentClaim.objects.get(intent_id=intent_id)
    assert (claim.order_type, claim.order_id) == ("gig", r.json()["id"])


@pytest.mark.django_db
def test_status_moves_forward_one_step_for_seller_only():
    order = GigOrderFactory()
    seller = _client(order.seller)
    url = f"/api/v1/gig-orders/{order.id}/"

    assert _client(order.buyer).patch(url, {"status": "IN_PROGRESS"}, format="json").status_code == 403
    assert seller.patch(url, {"status": "DELIVERED"}, format="json").status_code == 400
    assert seller.patch(url, {"status": "IN_PROGRESS"}, format="json").status_code == 200
    assert seller.patch(url, {"status": "PENDING"}, format="json").status_code == 400
    assert seller.patch(url, {"status": "DELIVERED"}, format="json").status_code == 200
    assert seller.patch(url, {"status": "COMPLETED"}, format="json").status_code == 200
    assert seller.patch(url, {"status": "CANCELLED"}, format="json").status_code == 400

    order.refresh_from_db()
    assert order.status == OrderStatus.COMPLETED


@pytest.mark.django_db
def test_status_change_emails_buyer(mailoutbox):
    order = GigOrderFactory()
    _client(order.seller).patch(f"/api/v1/gig-orders/{order.id}/", {"status": "IN_PROGRESS"}, format="json")
    assert len(mailoutbox) == 1
    assert mailoutbox[0].to == [order.buyer.email]


@pytest.mark.django_db
def test_cancel_refunds_payment(fake_gateway):
    order = GigOrderFactory()
    r = _client(order.buyer).put(f"/api/v1/gig-orders/{order.id}/cancel/")
    assert r.status_code == 200
    assert r.json()["status"] == OrderStatus.CANCELLED
    assert r.json()["refund_status"] == RefundStatus.SUCCEEDED
    assert fake_gateway.calls[-1] == {"method": "refund", "intent_id": order.payment_intent_id}


@pytest.mark.django_db
def test_refund_failure_keeps_cancellation(fake_gateway):
    order = GigOrderFactory()
    fake_gateway.configure(refund_succeeds=False)

    r = _client(order.buyer).put(f"/api/v1/gig-orders/{order.id}/cancel/")
    assert r.status_code == 200
    order.refresh_from_db()
    assert order.status == OrderStatus.CANCELLED
    assert order.refund_status == RefundStatus.FAILED


@pytest.mark.django_db
def test_cancel_only_by_buyer_while_pending():
    order = GigOrderFactory()
    assert _client(order.seller).put(f"/api/v1/gig-orders/{order.id}/cancel/").status_code == 403

    started = GigOrderFactory(status=OrderStatus.IN_PROGRESS)
    r = _client(started.buyer).put(f"/api/v1/gig-orders/{started.id}/cancel/")
    assert r.status_code == 400
    assert r.json()["detail"] == "Order cannot be canceled after it has been started"


@pytest.mark.django_db
def test_order_detail_visible_to_parties_only():
    order = GigOrderFactory()
    assert _client(order.buyer).get(f"/api/v1/gig-orders/{order.id}/").status_code == 200
    assert _client(order.seller).get(f"/api/v1/gig-orders/{order.id}/").status_code == 200
    assert _client(UserFactory()).get(f"/api/v1/gig-orders/{order.id}/").status_code == 403
    assert _client(order.buyer).get("/api/v1/gig-orders/999999/").status_code == 404


@pytest.mark.django_db
def test_list_my_gig_orders_filters():
    order = GigOrderFactory()
    GigOrderFactory(buyer=order.buyer, status=OrderStatus.CANCELLED)
    GigOrderFactory()

    client = _client(order.buyer)
    assert len(client.get("/api/v1/gig-orders/").json()["results"]) == 2
    ids = [o["id"] for o in client.get("/api/v1/gig-orders/?status=PENDING").json()["results"]]
    assert ids == [order.id]
    assert _client(order.seller).get("/api/v1/gig-orders/?role=seller").json()["results"][0]["id"] == order.id


@pytest.mark.django_db
def test_progress_updates_by_seller():
    order = GigOrderFactory()
    seller = _client(order.seller)
    buyer = _client(order.buyer)

    r = seller.post(
        f"/api/v1/gig-orders/{order.id}/updates/",
        {"title": "Packed", "content": "All sacks packed", "expected_delivery_date": "2026-11-02T10:00:00Z"},
        format="json",
    )
    assert r.status_code == 201
    update_id = r.json()["id"]

    assert buyer.post(f"/api/v1/gig-orders/{order.id}/updates/", {"title": "x", "content": "y"}).status_code == 403
    listed = buyer.get(f"/api/v1/gig-orders/{order.id}/updates/").json()["results"]
    assert [u["title"] for u in listed] == ["Packed"]

    assert buyer.delete(f"/api/v1/gig-orders/updates/{update_id}/").status_code == 403
    assert seller.delete(f"/api/v1/gig-orders/updates/{update_id}/").status_code == 204
    assert not GigOrderUpdate.objects.exists()
