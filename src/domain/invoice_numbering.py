"""Invoice Numbering Domain Entity

Per-tenant invoice number counter.
"""

from datetime import datetime
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Integer, String
from src.domain.base import BaseModel, IdType


class InvoiceNumbering(BaseModel, table=True):
    """
    Invoice Numbering - next invoice sequence for a tenant

    Domain Rules:
    - One row per tenant (tenant_id is unique)
    - next_sequence only increases, and only inside the transaction
      that writes the invoice consuming the number
    - Issued numbers are prefix + zero-padded sequence
    """

    __tablename__ = "invoice_numbering"
    __table_args__ = (
        CheckConstraint('next_sequence >= 1', name='next_sequence_positive'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    tenant_id: str = Field(
        index=True,
        unique=True,
        description="Tenant ID (unique - one counter per tenant)"
    )

    prefix: str = Field(
        default="INV-",
        sa_column=Column(String(10), nullable=False),
    )

    next_sequence: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
        description="Sequence the next reservation receives"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "tenant_id": "tenant_xyz789",
                "prefix": "INV-",
                "next_sequence": 8,
            }
        }
