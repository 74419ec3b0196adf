"""Recurring Template Item Domain Entity

One line of a template's content snapshot.
"""

from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String, Text, Integer
from src.domain.base import BaseModel, IdType


class RecurringTemplateItem(BaseModel, table=True):
    """
    Recurring Template Item - snapshot line copied into every generated invoice

    Domain Rules:
    - Belongs to exactly one template
    - sort_order preserves the snapshot's ordering
    - Replaced as a whole when the template's items are edited
    """

    __tablename__ = "recurring_template_items"
    __table_args__ = (
        Index('ix_recurring_template_items_template_id', 'template_id'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    template_id: int = Field(
        sa_column=Column(
            IdType,
            ForeignKey("recurring_invoice_templates.id", ondelete="CASCADE"),
            nullable=False,
        ),
        description="Foreign key to RecurringTemplate"
    )

    product_id: Optional[int] = Field(
        default=None,
        description="Optional catalog reference"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    quantity: Decimal = Field(
        default=Decimal("1"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=1),
    )

    unit_price: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
    )

    tax_rate: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(5, 2), nullable=False, default=0),
        description="Tax rate as a percentage (e.g. 20.00)"
    )

    sort_order: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
    )
