"""Request schemas for Recurring Invoice API

Pydantic models for validating incoming HTTP requests. Schedule fields are
left optional here so that the use cases report missing values as
VALIDATION_ERROR responses.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator
from src.app.use_cases.recurring.dtos import TemplateItemDTO


class TemplateItemRequestSchema(TemplateItemDTO):
    """One line item of a template request"""


class CreateTemplateRequestSchema(BaseModel):
    """
    Request schema for creating a recurring template

    Used for POST /billing/recurring-invoices endpoint.
    """

    template_name: Optional[str] = Field(default=None, description="Template name (required)")
    contact_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    frequency: Optional[str] = Field(default=None, description="weekly, monthly, quarterly or yearly")
    start_date: Optional[date] = Field(default=None, description="First occurrence (required)")
    end_date: Optional[date] = None
    items: List[TemplateItemRequestSchema] = Field(default_factory=list)
    discount_type: Optional[str] = Field(default=None, description="none, fixed or percent")
    discount_value: Decimal = Field(default=Decimal("0"), ge=0)
    notes: Optional[str] = None
    payment_terms: Optional[int] = Field(default=None, ge=0, description="Days until due")
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v):
        return v.upper() if v else v

    class Config:
        json_schema_extra = {
            "example": {
                "template_name": "Monthly retainer",
                "customer_name": "Acme Ltd",
                "customer_email": "billing@acme.test",
                "frequency": "monthly",
                "start_date": "2024-01-31",
                "items": [
                    {"name": "Retainer", "quantity": "1", "unit_price": "1000.00", "tax_rate": "20"}
                ],
                "payment_terms": 14,
            }
        }


class UpdateTemplateRequestSchema(BaseModel):
    """
    Request schema for partially updating a recurring template

    Only fields present in the request body are applied.
    """

    template_name: Optional[str] = None
    contact_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    frequency: Optional[str] = None
    end_date: Optional[date] = None
    items: Optional[List[TemplateItemRequestSchema]] = None
    discount_type: Optional[str] = None
    discount_value: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None
    payment_terms: Optional[int] = Field(default=None, ge=0)


class CreateFromInvoiceRequestSchema(BaseModel):
    """
    Request schema for converting an invoice into a recurring template

    Used for POST /billing/recurring-invoices/from-invoice/{invoice_id}.
    """

    template_name: Optional[str] = Field(default=None, description="Defaults to 'Recurring: <invoice number>'")
    frequency: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
