"""
Billing Service
Applies verified Stripe webhook events to the member, invoice and payment mirrors
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from clubos.models.billing import Invoice, InvoiceStatus, Payment, PaymentMethod
from clubos.models.member import Member

logger = logging.getLogger(__name__)


def _object_id(value: Any) -> Optional[str]:
    """Stripe fields may hold an id string or an expanded object"""
    if isinstance(value, dict):
        return value.get("id")
    return value or None


def _from_cents(value: Optional[int]) -> float:
    return (value or 0) / 100


def get_member_by_customer(db: Session, customer_id: Optional[str]) -> Optional[Member]:
    if not customer_id:
        return None
    return db.query(Member).filter(Member.stripe_customer_id == customer_id).first()


def get_member_by_metadata(db: Session, metadata: Optional[Dict[str, Any]]) -> Optional[Member]:
    member_id = (metadata or {}).get("member_id")
    if not member_id:
        return None

    try:
        member_uuid = UUID(str(member_id))
    except ValueError:
        logger.warning(f"Stripe metadata carries a malformed member_id: {member_id}")
        return None

    return db.query(Member).filter(Member.id == member_uuid).first()


def handle_checkout_completed(db: Session, session: Dict[str, Any]) -> None:
    if session.get("mode") != "subscription":
        return

    member = get_member_by_metadata(db, session.get("metadata"))
    if not member:
        logger.error(f"Checkout completed but no member found: {session.get('metadata')}")
        return

    subscription_id = _object_id(session.get("subscription"))
    if not subscription_id:
        return

    member.stripe_subscription_id = subscription_id
    member.subscription_status = "active"

    customer_id = _object_id(session.get("customer"))
    if customer_id and not member.stripe_customer_id:
        member.stripe_customer_id = customer_id

    db.commit()


def handle_subscription_change(db: Session, subscription: Dict[str, Any]) -> None:
    customer_id = _object_id(subscription.get("customer"))
    member = get_member_by_customer(db, customer_id)
    if not member:
        logger.error(f"Subscription change but no member found for customer: {customer_id}")
        return

    member.stripe_subscription_id = subscription.get("id")
    member.subscription_status = subscription.get("status")
    db.commit()


def handle_subscription_deleted(db: Session, subscription: Dict[str, Any]) -> None:
    member = get_member_by_customer(db, _object_id(subscription.get("customer")))
    if not member:
        return

    member.subscription_status = "canceled"
    db.commit()


def handle_invoice_created(db: Session, invoice_data: Dict[str, Any]) -> None:
    """Upsert the invoice mirror; replaying the event leaves a single row"""
    stripe_invoice_id = invoice_data.get("id")
    member = get_member_by_customer(db, _object_id(invoice_data.get("customer")))
    if not member or not stripe_invoice_id:
        return

    due_date = invoice_data.get("due_date")
    description = invoice_data.get("description") or f"Membership dues - {invoice_data.get('number') or ''}".strip()

    invoice = db.query(Invoice).filter(Invoice.stripe_invoice_id == stripe_invoice_id).first()
    if invoice is None:
        invoice = Invoice(stripe_invoice_id=stripe_invoice_id, status=InvoiceStatus.SENT)
        db.add(invoice)

    invoice.club_id = member.club_id
    invoice.member_id = member.id
    invoice.amount = _from_cents(invoice_data.get("amount_due"))
    invoice.description = description
    invoice.due_date = datetime.utcfromtimestamp(due_date) if due_date else datetime.utcnow()

    db.commit()


def handle_invoice_paid(db: Session, invoice_data: Dict[str, Any]) -> None:
    """Mark the invoice paid and record the payment at most once"""
    member = get_member_by_customer(db, _object_id(invoice_data.get("customer")))
    if not member:
        return

    invoice = None
    stripe_invoice_id = invoice_data.get("id")
    if stripe_invoice_id:
        invoice = db.query(Invoice).filter(Invoice.stripe_invoice_id == stripe_invoice_id).first()
        if invoice and invoice.status != InvoiceStatus.PAID:
            invoice.status = InvoiceStatus.PAID
            invoice.paid_at = datetime.utcnow()

    stripe_payment_id = _object_id(invoice_data.get("payment_intent"))
    if stripe_payment_id:
        existing = db.query(Payment.id).filter(Payment.stripe_payment_id == stripe_payment_id).first()
        if existing:
            logger.info(f"Payment {stripe_payment_id} already recorded")
            db.commit()
            return

    db.add(
        Payment(
            club_id=member.club_id,
            member_id=member.id,
            invoice_id=invoice.id if invoice else None,
            stripe_payment_id=stripe_payment_id,
            amount=_from_cents(invoice_data.get("amount_paid")),
            method=PaymentMethod.CARD,
            description=f"Payment for invoice {invoice_data.get('number') or stripe_invoice_id}",
        )
    )
    db.commit()


def handle_invoice_payment_failed(db: Session, invoice_data: Dict[str, Any]) -> None:
    stripe_invoice_id = invoice_data.get("id")
    if not stripe_invoice_id:
        return

    invoice = db.query(Invoice).filter(Invoice.stripe_invoice_id == stripe_invoice_id).first()
    if invoice:
        invoice.status = InvoiceStatus.OVERDUE
        db.commit()


EVENT_HANDLERS: Dict[str, Callable[[Session, Dict[str, Any]], None]] = {
    "checkout.session.completed": handle_checkout_completed,
    "customer.subscription.created": handle_subscription_change,
    "customer.subscription.updated": handle_subscription_change,
    "customer.subscription.deleted": handle_subscription_deleted,
    "invoice.created": handle_invoice_created,
    "invoice.paid": handle_invoice_paid,
    "invoice.payment_failed": handle_invoice_payment_failed,
}


def process_event(db: Session, event: Dict[str, Any]) -> bool:
    """
    Apply one Stripe event

    Args:
        db: Database session
        event: Parsed event body ({"type", "data": {"object": {...}}})

    Returns:
        True if the event type has a handler, False if it was only acknowledged
    """
    event_type = event.get("type")
    handler = EVENT_HANDLERS.get(event_type)

    if handler is None:
        logger.info(f"Ignoring Stripe event type: {event_type}")
        return False

    data_object = (event.get("data") or {}).get("object") or {}
    logger.info(f"Processing Stripe event {event.get('id')} ({event_type})")
    handler(db, data_object)
    return True
