from decimal import Decimal

import pytest
from catalog.tests.factories import GigFactory
from common.exceptions import AuthorizationError, InquiryFinalizedError, ValidationError
from inquiries.models import Inquiry
from inquiries.services import create_inquiry, update_inquiry
from inquiries.tests.factories import InquiryFactory
from rest_framework.test import APIClient
from users.tests.factories import UserFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.mark.django_db
def test_negotiation_counter_offer_then_accept():
    gig = GigFactory()
    buyer = UserFactory()
    buyer_client = _client(buyer)
    seller_client = _client(gig.seller)

    r = buyer_client.post(
        "/api/v1/inquiries/",
        {"gig_id": gig.id, "supplier_id": gig.seller_id, "requested_quantity": 100, "requested_price": "5.00"},
        format="json",
    )
    assert r.status_code == 201
    body = r.json()
    assert (body["status"], body["round"]) == ("PENDING", 1)

    r = seller_client.put(
        f"/api/v1/inquiries/{body['id']}/", {"proposed_quantity": 80, "proposed_price": "5.50"}, format="json"
    )
    assert r.status_code == 200
    assert (r.json()["status"], r.json()["round"]) == ("NEGOTIATING", 2)

    r = buyer_client.put(f"/api/v1/inquiries/{body['id']}/", {"status": "ACCEPTED"}, format="json")
    assert r.status_code == 200
    accepted = Inquiry.objects.get(id=body["id"])
    assert accepted.status == Inquiry.STATUS_ACCEPTED
    assert accepted.round == 2
    assert accepted.final_quantity == 80
    assert accepted.final_price == Decimal("5.50")
    assert accepted.final_quantity * accepted.final_price == Decimal("440.00")


@pytest.mark.django_db
def test_accept_without_counter_offer_uses_requested_terms():
    inquiry = InquiryFactory(requested_quantity=50, requested_price=Decimal("3.00"))
    updated = update_inquiry(inquiry_id=inquiry.id, actor=inquiry.supplier, status=Inquiry.STATUS_ACCEPTED)
    assert (updated.final_quantity, updated.final_price, updated.round) == (50, Decimal("3.00"), 1)


@pytest.mark.django_db
def test_accept_requires_a_price():
    inquiry = InquiryFactory(requested_price=None)
    with pytest.raises(ValidationError):
        update_inquiry(inquiry_id=inquiry.id, actor=inquiry.buyer, status=Inquiry.STATUS_ACCEPTED)
    inquiry.refresh_from_db()
    assert inquiry.status == Inquiry.STATUS_PENDING


@pytest.mark.django_db
def test_finalized_inquiry_is_immutable():
    inquiry = InquiryFactory()
    update_inquiry(inquiry_id=inquiry.id, actor=inquiry.supplier, status=Inquiry.STATUS_REJECTED)
    inquiry.refresh_from_db()
    assert (inquiry.status, inquiry.round, inquiry.final_price) == (Inquiry.STATUS_REJECTED, 1, None)

    with pytest.raises(InquiryFinalizedError):
        update_inquiry(inquiry_id=inquiry.id, actor=inquiry.buyer, proposed_quantity=10)

    r = _client(inquiry.buyer).put(f"/api/v1/inquiries/{inquiry.id}/", {"proposed_quantity": 10}, format="json")
    assert r.status_code == 400
    assert r.json()["code"] == "inquiry_finalized"


@pytest.mark.django_db
def test_outsider_cannot_negotiate_or_view():
    inquiry = InquiryFactory()
    outsider = UserFactory()
    with pytest.raises(AuthorizationError):
        update_inquiry(inquiry_id=inquiry.id, actor=outsider, proposed_price=Decimal("1.00"))
    assert _client(outsider).get(f"/api/v1/inquiries/{inquiry.id}/").status_code == 403


@pytest.mark.django_db
def test_supplier_must_own_gig_and_buyer_cannot_inquire_own_gig():
    gig = GigFactory()
    with pytest.raises(ValidationError):
        create_inquiry(gig_id=gig.id, buyer=UserFactory(), supplier_id=UserFactory().id, requested_quantity=5)
    with pytest.raises(ValidationError):
        create_inquiry(gig_id=gig.id, buyer=gig.seller, supplier_id=gig.seller_id, requested_quantity=5)


@pytest.mark.django_db
def test_missing_fields_rejected():
    gig = GigFactory()
    with pytest.raises(ValidationError):
        create_inquiry(gig_id=gig.id, buyer=UserFactory(), supplier_id=None, requested_quantity=5)


@pytest.mark.django_db
def test_cancel_only_pending_and_only_buyer():
    inquiry = InquiryFactory()
    assert _client(inquiry.supplier).delete(f"/api/v1/inquiries/{inquiry.id}/").status_code == 403
    assert _client(inquiry.buyer).delete(f"/api/v1/inquiries/{inquiry.id}/").status_code == 204
    assert not Inquiry.objects.filter(id=inquiry.id).exists()

    negotiating = InquiryFactory(status=Inquiry.STATUS_NEGOTIATING, round=2)
    r = _client(negotiating.buyer).delete(f"/api/v1/inquiries/{negotiating.id}/")
    assert r.status_code == 400
    assert Inquiry.objects.filter(id=negotiating.id).exists()


@pytest.mark.django_db
def test_list_mine_with_role_filter():
    me = UserFactory()
    sent = InquiryFactory(buyer=me)
    gig = GigFactory(seller=me)
    received = InquiryFactory(gig=gig)
    InquiryFactory()

    client = _client(me)
    ids = [it["id"] for it in client.get("/api/v1/inquiries/").json()["results"]]
    assert set(ids) == {sent.id, received.id}

    ids = [it["id"] for it in client.get("/api/v1/inquiries/?role=supplier").json()["results"]]
    assert ids == [received.id]
