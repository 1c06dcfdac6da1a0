"""
Tests for the Stripe Webhook Sink
"""

import json
import time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from clubos.models.billing import Invoice, InvoiceStatus, Payment
from clubos.models.member import Member
from clubos.services import billing_service
from clubos.utils.webhook_security import (
    WebhookSignatureError,
    create_stripe_signature,
    verify_stripe_signature,
)
from conftest import TEST_WEBHOOK_SECRET


def post_event(client: TestClient, event: dict, secret: str = TEST_WEBHOOK_SECRET, timestamp=None):
    payload = json.dumps(event).encode("utf-8")
    return client.post(
        "/webhooks/stripe",
        content=payload,
        headers={
            "Stripe-Signature": create_stripe_signature(secret, payload, timestamp),
            "Content-Type": "application/json",
        },
    )


def stripe_event(event_type: str, data_object: dict) -> dict:
    return {"id": "evt_test", "type": event_type, "data": {"object": data_object}}


@pytest.fixture
def billed_member(db: Session, standard_member) -> Member:
    standard_member.stripe_customer_id = "cus_123"
    db.commit()
    return standard_member


def invoice_object(**overrides) -> dict:
    data = {
        "id": "in_123",
        "customer": "cus_123",
        "amount_due": 25000,
        "amount_paid": 25000,
        "number": "INV-0001",
        "due_date": 1775260800,
        "payment_intent": "pi_123",
    }
    data.update(overrides)
    return data


class TestSignatureVerification:
    """Test Stripe-Signature checks"""

    def test_valid_signature(self):
        payload = b'{"id": "evt_1"}'
        verify_stripe_signature(payload, create_stripe_signature("secret", payload), "secret")

    def test_tampered_payload(self):
        header = create_stripe_signature("secret", b'{"amount": 1}')

        with pytest.raises(WebhookSignatureError):
            verify_stripe_signature(b'{"amount": 1000}', header, "secret")

    def test_stale_timestamp(self):
        payload = b"{}"
        header = create_stripe_signature("secret", payload, int(time.time()) - 301)

        with pytest.raises(WebhookSignatureError):
            verify_stripe_signature(payload, header, "secret", tolerance=300)

    @pytest.mark.parametrize("header", [None, "", "v1=abc", "t=123", "t=abc,v1=def"])
    def test_malformed_header(self, header):
        with pytest.raises(WebhookSignatureError):
            verify_stripe_signature(b"{}", header, "secret")


class TestStripeWebhookRoute:
    """Test POST /webhooks/stripe"""

    def test_missing_signature(self, client: TestClient):
        response = client.post("/webhooks/stripe", json=stripe_event("invoice.paid", {}))

        assert response.status_code == 400

    def test_bad_signature(self, client: TestClient):
        response = post_event(client, stripe_event("invoice.paid", {}), secret="whsec_wrong")

        assert response.status_code == 400

    def test_unknown_event_acknowledged(self, client: TestClient):
        response = post_event(client, stripe_event("charge.refunded", {"id": "ch_1"}))

        assert response.status_code == 200
        assert response.json() == {"received": True}

    def test_subscription_updates_member(self, client: TestClient, db: Session, billed_member):
        response = post_event(
            client,
            stripe_event("customer.subscription.updated", {"id": "sub_1", "customer": "cus_123", "status": "past_due"}),
        )

        assert response.status_code == 200
        db.refresh(billed_member)
        assert billed_member.stripe_subscription_id == "sub_1"
        assert billed_member.subscription_status == "past_due"

    def test_subscription_deleted(self, client: TestClient, db: Session, billed_member):
        post_event(client, stripe_event("customer.subscription.deleted", {"id": "sub_1", "customer": "cus_123"}))

        db.refresh(billed_member)
        assert billed_member.subscription_status == "canceled"

    def test_checkout_completed_links_subscription(self, client: TestClient, db: Session, standard_member):
        session = {
            "mode": "subscription",
            "subscription": "sub_9",
            "customer": "cus_new",
            "metadata": {"member_id": str(standard_member.id)},
        }

        response = post_event(client, stripe_event("checkout.session.completed", session))

        assert response.status_code == 200
        db.refresh(standard_member)
        assert standard_member.stripe_subscription_id == "sub_9"
        assert standard_member.subscription_status == "active"
        assert standard_member.stripe_customer_id == "cus_new"

    def test_invoice_created_is_idempotent(self, client: TestClient, db: Session, billed_member):
        post_event(client, stripe_event("invoice.created", invoice_object()))
        post_event(client, stripe_event("invoice.created", invoice_object(amount_due=30000)))

        invoices = db.query(Invoice).all()
        assert len(invoices) == 1
        assert invoices[0].amount == 300.0
        assert invoices[0].status == InvoiceStatus.SENT
        assert invoices[0].club_id == billed_member.club_id

    def test_invoice_paid_records_payment_once(self, client: TestClient, db: Session, billed_member):
        post_event(client, stripe_event("invoice.created", invoice_object()))
        post_event(client, stripe_event("invoice.paid", invoice_object()))
        post_event(client, stripe_event("invoice.paid", invoice_object()))

        invoice = db.query(Invoice).one()
        assert invoice.status == InvoiceStatus.PAID
        assert invoice.paid_at is not None
        payment = db.query(Payment).one()
        assert payment.amount == 250.0
        assert payment.invoice_id == invoice.id

    def test_payment_failed_marks_overdue(self, client: TestClient, db: Session, billed_member):
        post_event(client, stripe_event("invoice.created", invoice_object()))
        post_event(client, stripe_event("invoice.payment_failed", invoice_object()))

        assert db.query(Invoice).one().status == InvoiceStatus.OVERDUE

    def test_unknown_customer_ignored(self, client: TestClient, db: Session, billed_member):
        response = post_event(client, stripe_event("invoice.created", invoice_object(customer="cus_unknown")))

        assert response.status_code == 200
        assert db.query(Invoice).count() == 0

    def test_handler_failure_returns_500(self, client: TestClient, billed_member, mocker):
        failing_handler = mocker.Mock(side_effect=RuntimeError("db exploded"))
        mocker.patch.dict(billing_service.EVENT_HANDLERS, {"invoice.paid": failing_handler})

        response = post_event(client, stripe_event("invoice.paid", invoice_object()))

        assert response.status_code == 500
