"""Recurring Template Domain Entity

A recurring invoice definition: schedule + frozen content snapshot.
Generation copies the snapshot into concrete invoices.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String, Text, Date, CheckConstraint
from src.domain.base import BaseModel, IdType
from src.domain.pricing import DiscountType
from src.domain.schedule import Frequency


class TemplateStatus(str, Enum):
    """Recurring template lifecycle states"""
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"  # Terminal


# Legal lifecycle transitions. COMPLETED is terminal and is reached only by
# generating the last occurrence, from either active or paused.
TEMPLATE_TRANSITIONS: dict[TemplateStatus, frozenset[TemplateStatus]] = {
    TemplateStatus.ACTIVE: frozenset({TemplateStatus.PAUSED, TemplateStatus.COMPLETED}),
    TemplateStatus.PAUSED: frozenset({TemplateStatus.ACTIVE, TemplateStatus.COMPLETED}),
    TemplateStatus.COMPLETED: frozenset(),
}


class RecurringTemplate(BaseModel, table=True):
    """
    Recurring Template - schedule and content snapshot for recurring invoices

    Domain Rules:
    - Every template belongs to exactly one tenant
    - next_run_date starts at start_date and only moves through generation or resume
    - Totals are recomputed when items or discount change, never at generation time
    - COMPLETED is terminal
    - source_invoice_id is informational provenance only
    """

    __tablename__ = "recurring_invoice_templates"
    __table_args__ = (
        Index('ix_recurring_templates_tenant_status', 'tenant_id', 'status'),
        Index('ix_recurring_templates_next_run_date', 'next_run_date'),
        CheckConstraint('end_date IS NULL OR end_date >= start_date', name='end_date_after_start'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique template identifier (auto-increment)"
    )

    tenant_id: str = Field(
        index=True,
        description="Tenant ID"
    )

    template_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Display name of the template"
    )

    contact_id: Optional[int] = Field(
        default=None,
        description="Contact directory reference (copied by value, not re-resolved)"
    )

    customer_name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    customer_email: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    frequency: Frequency = Field(
        description="Recurrence frequency (weekly, monthly, quarterly, yearly)"
    )

    start_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="First occurrence date"
    )

    end_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Last date an occurrence may fall on (None = open ended)"
    )

    next_run_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Date of the next occurrence to generate"
    )

    last_generated_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp of the last successful generation"
    )

    status: TemplateStatus = Field(
        default=TemplateStatus.ACTIVE,
        description="Lifecycle status (active, paused, completed)"
    )

    subtotal: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
    )

    tax_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
    )

    discount_type: DiscountType = Field(
        default=DiscountType.NONE,
        description="Discount policy (none, fixed, percent)"
    )

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

    currency: str = Field(
        default="USD",
        sa_column=Column(String(3), nullable=False),
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    payment_terms: Optional[int] = Field(
        default=None,
        description="Days until due for generated invoices (None = default terms)"
    )

    source_invoice_id: Optional[int] = Field(
        default=None,
        index=True,
        description="Invoice this template was derived from (informational)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
    )

    def can_transition_to(self, target: TemplateStatus) -> bool:
        return TemplateStatus(target) in TEMPLATE_TRANSITIONS[TemplateStatus(self.status)]

    @property
    def is_completed(self) -> bool:
        return self.status == TemplateStatus.COMPLETED

    def is_due(self, as_of: date) -> bool:
        """Active, next occurrence reached, and that occurrence still within end_date"""
        if TemplateStatus(self.status) != TemplateStatus.ACTIVE:
            return False
        if self.next_run_date > as_of:
            return False
        return self.end_date is None or self.next_run_date <= self.end_date

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "tenant_id": "tenant_xyz789",
                "template_name": "Monthly retainer",
                "frequency": "monthly",
                "start_date": "2024-01-31",
                "end_date": None,
                "next_run_date": "2024-02-29",
                "status": "active",
                "subtotal": "1000.00",
                "tax_amount": "200.00",
                "discount_type": "none",
                "discount_value": "0.00",
                "discount_amount": "0.00",
                "total": "1200.00",
                "payment_terms": 30,
            }
        }
