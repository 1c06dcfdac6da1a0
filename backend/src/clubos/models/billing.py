"""
Billing Models
Read-only mirrors of Stripe invoices and payments, written by webhook handlers
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import Float, ForeignKey, String, Text, Uuid

from clubos.database import Base


class InvoiceStatus(str, enum.Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"
    VOID = "void"


class PaymentMethod(str, enum.Enum):
    CARD = "card"
    ACH = "ach"
    CHECK = "check"
    CASH = "cash"
    OTHER = "other"


class Invoice(Base):
    """Invoice mirrored from Stripe, keyed by stripe_invoice_id"""

    __tablename__ = "invoices"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    club_id = Column(Uuid, ForeignKey("clubs.id"), nullable=False, index=True)
    member_id = Column(Uuid, ForeignKey("members.id"), nullable=False, index=True)

    stripe_invoice_id = Column(String(255), unique=True, index=True)
    amount = Column(Float, nullable=False)
    status = Column(
        SQLEnum(InvoiceStatus, values_callable=lambda x: [e.value for e in x]),
        default=InvoiceStatus.SENT,
        nullable=False,
    )
    description = Column(Text, nullable=False)
    due_date = Column(DateTime, nullable=False)
    paid_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Invoice(stripe_invoice_id='{self.stripe_invoice_id}', status='{self.status}')>"


class Payment(Base):
    """Payment mirrored from Stripe, keyed by stripe_payment_id"""

    __tablename__ = "payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    club_id = Column(Uuid, ForeignKey("clubs.id"), nullable=False, index=True)
    member_id = Column(Uuid, ForeignKey("members.id"), nullable=False, index=True)
    invoice_id = Column(Uuid, ForeignKey("invoices.id"), nullable=True)

    stripe_payment_id = Column(String(255), unique=True, index=True)
    amount = Column(Float, nullable=False)
    method = Column(
        SQLEnum(PaymentMethod, values_callable=lambda x: [e.value for e in x]),
        default=PaymentMethod.CARD,
        nullable=False,
    )
    description = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Payment(stripe_payment_id='{self.stripe_payment_id}', amount={self.amount})>"
