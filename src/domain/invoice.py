"""Invoice Domain Entity

Invoice header as produced by recurring generation. The wider invoice
lifecycle (payments, sending, PDF) belongs to the invoicing module.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String, Text, Date, Boolean
from src.domain.base import BaseModel, IdType
from src.domain.pricing import DiscountType


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    PAID = "paid"
    PARTIAL = "partial"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


# Closed invoices cannot seed a recurring series
CLOSED_INVOICE_STATUSES = frozenset({InvoiceStatus.CANCELLED, InvoiceStatus.REFUNDED})


class Invoice(BaseModel, table=True):
    """
    Invoice - header row of a billed document

    Domain Rules:
    - invoice_number is unique per tenant
    - Monetary fields of generated invoices are copied from the template snapshot
    - due_date = issue date + payment terms
    - recurring_template_id links a generated invoice to its template
    - is_recurring_source marks invoices that seeded a recurring template
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_tenant_id', 'tenant_id'),
        Index('ix_invoices_status', 'status'),
        Index('ix_invoices_tenant_invoice_number', 'tenant_id', 'invoice_number', unique=True),
        Index('ix_invoices_recurring_template_id', 'recurring_template_id'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique invoice identifier (auto-increment)"
    )

    tenant_id: str = Field(
        description="Tenant ID"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Invoice number, unique per tenant (e.g., INV-00001)"
    )

    contact_id: Optional[int] = Field(default=None)

    customer_name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    customer_email: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT,
        description="Invoice status"
    )

    issue_date: date = Field(
        sa_column=Column(Date, nullable=False),
    )

    due_date: date = Field(
        sa_column=Column(Date, nullable=False),
    )

    subtotal: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
    )

    tax_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
    )

    discount_type: DiscountType = Field(default=DiscountType.NONE)

    discount_value: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
    )

    discount_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
    )

    total: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
    )

    amount_due: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
    )

    currency: str = Field(
        default="USD",
        sa_column=Column(String(3), nullable=False),
        description="Currency code (ISO 4217)"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    payment_terms: Optional[int] = Field(default=None)

    recurring_template_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            IdType,
            ForeignKey("recurring_invoice_templates.id", ondelete="SET NULL"),
            nullable=True,
        ),
        description="Template that generated this invoice"
    )

    is_recurring_source: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "tenant_id": "tenant_xyz789",
                "invoice_number": "INV-00007",
                "status": "draft",
                "issue_date": "2024-01-31",
                "due_date": "2024-03-01",
                "subtotal": "1000.00",
                "tax_amount": "200.00",
                "discount_amount": "0.00",
                "total": "1200.00",
                "amount_due": "1200.00",
                "currency": "USD",
                "recurring_template_id": 3,
            }
        }
