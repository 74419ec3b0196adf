"""Data Transfer Objects for Recurring Invoice Use Cases

Pydantic models for command inputs and response outputs.

Command DTOs are deliberately permissive about schedule fields (frequency,
start_date, template_name, items): the use cases validate them and report
VALIDATION_ERROR results instead of raising.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List, Any
from pydantic import BaseModel, Field
from src.domain.invoice import Invoice
from src.domain.recurring_template import RecurringTemplate
from src.domain.recurring_template_item import RecurringTemplateItem


def _enum_value(value: Any) -> Any:
    return value.value if hasattr(value, "value") else value


class TemplateItemDTO(BaseModel):
    """One line of a template's content snapshot"""

    name: str = Field(
        ...,
        description="Line item name"
    )

    description: Optional[str] = Field(
        default=None,
        description="Optional line description"
    )

    quantity: Decimal = Field(
        default=Decimal("1"),
        ge=0,
        description="Quantity (default 1)"
    )

    unit_price: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Price per unit"
    )

    tax_rate: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=100,
        description="Tax rate percentage (e.g. 20 for 20%)"
    )

    product_id: Optional[int] = Field(
        default=None,
        description="Optional catalog reference"
    )


class CreateTemplateCommandDTO(BaseModel):
    """
    Command DTO for creating a recurring template

    Used as input to CreateRecurringTemplate use case.
    """

    tenant_id: str = Field(..., description="Tenant identifier")
    template_name: Optional[str] = Field(default=None, description="Template name (required)")
    contact_id: Optional[int] = Field(default=None)
    customer_name: Optional[str] = Field(default=None)
    customer_email: Optional[str] = Field(default=None)
    frequency: Optional[str] = Field(default=None, description="weekly, monthly, quarterly or yearly (required)")
    start_date: Optional[date] = Field(default=None, description="First occurrence (required)")
    end_date: Optional[date] = Field(default=None, description="Last allowed occurrence")
    items: List[TemplateItemDTO] = Field(default_factory=list, description="At least one line item")
    discount_type: Optional[str] = Field(default=None, description="none, fixed or percent")
    discount_value: Decimal = Field(default=Decimal("0"), ge=0)
    notes: Optional[str] = Field(default=None)
    payment_terms: Optional[int] = Field(default=None, ge=0, description="Days until due")
    currency: Optional[str] = Field(default=None, description="ISO 4217 currency code")

    class Config:
        json_schema_extra = {
            "example": {
                "tenant_id": "tenant_xyz789",
                "template_name": "Monthly retainer",
                "frequency": "monthly",
                "start_date": "2024-01-31",
                "items": [
                    {"name": "Retainer", "quantity": "1", "unit_price": "1000.00", "tax_rate": "20"}
                ],
                "discount_type": "percent",
                "discount_value": "10",
                "payment_terms": 14,
            }
        }


class UpdateTemplateCommandDTO(BaseModel):
    """
    Command DTO for partially updating a recurring template

    Only fields explicitly set on the command are applied
    (see model_fields_set); an explicit None clears a nullable field.
    """

    tenant_id: str = Field(..., description="Tenant identifier")
    template_id: int = Field(..., description="Template ID")
    template_name: Optional[str] = None
    contact_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    frequency: Optional[str] = None
    end_date: Optional[date] = None
    items: Optional[List[TemplateItemDTO]] = None
    discount_type: Optional[str] = None
    discount_value: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None
    payment_terms: Optional[int] = Field(default=None, ge=0)

    def provided(self) -> set[str]:
        return set(self.model_fields_set) - {"tenant_id", "template_id"}


class CreateFromInvoiceCommandDTO(BaseModel):
    """
    Command DTO for converting an existing invoice into a recurring template
    """

    tenant_id: str = Field(..., description="Tenant identifier")
    source_invoice_id: int = Field(..., description="Invoice to copy content from")
    template_name: Optional[str] = Field(default=None)
    frequency: Optional[str] = Field(default=None)
    start_date: Optional[date] = Field(default=None)
    end_date: Optional[date] = Field(default=None)


class TemplateItemResponseDTO(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal
    product_id: Optional[int] = None
    sort_order: int

    @classmethod
    def from_entity(cls, item: RecurringTemplateItem) -> "TemplateItemResponseDTO":
        return cls(
            id=item.id,
            name=item.name,
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
            tax_rate=item.tax_rate,
            product_id=item.product_id,
            sort_order=item.sort_order,
        )


class TemplateResponseDTO(BaseModel):
    """
    Response DTO for recurring template operations

    Returned by create, update, pause, resume, get and list use cases.
    """

    template_id: int
    tenant_id: str
    template_name: str
    contact_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    frequency: str
    start_date: date
    end_date: Optional[date] = None
    next_run_date: date
    last_generated_at: Optional[datetime] = None
    status: str
    subtotal: Decimal
    tax_amount: Decimal
    discount_type: str
    discount_value: Decimal
    discount_amount: Decimal
    total: Decimal
    currency: str
    notes: Optional[str] = None
    payment_terms: Optional[int] = None
    source_invoice_id: Optional[int] = None
    source_invoice_number: Optional[str] = None
    invoices_generated: int = 0
    items: List[TemplateItemResponseDTO] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(
        cls,
        template: RecurringTemplate,
        items: Optional[List[RecurringTemplateItem]] = None,
        invoices_generated: int = 0,
        source_invoice_number: Optional[str] = None,
    ) -> "TemplateResponseDTO":
        return cls(
            template_id=template.id,
            tenant_id=template.tenant_id,
            template_name=template.template_name,
            contact_id=template.contact_id,
            customer_name=template.customer_name,
            customer_email=template.customer_email,
            frequency=_enum_value(template.frequency),
            start_date=template.start_date,
            end_date=template.end_date,
            next_run_date=template.next_run_date,
            last_generated_at=template.last_generated_at,
            status=_enum_value(template.status),
            subtotal=template.subtotal,
            tax_amount=template.tax_amount,
            discount_type=_enum_value(template.discount_type),
            discount_value=template.discount_value,
            discount_amount=template.discount_amount,
            total=template.total,
            currency=template.currency,
            notes=template.notes,
            payment_terms=template.payment_terms,
            source_invoice_id=template.source_invoice_id,
            source_invoice_number=source_invoice_number,
            invoices_generated=invoices_generated,
            items=[TemplateItemResponseDTO.from_entity(item) for item in items or []],
            created_at=template.created_at,
            updated_at=template.updated_at,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "template_id": 3,
                "tenant_id": "tenant_xyz789",
                "template_name": "Monthly retainer",
                "frequency": "monthly",
                "start_date": "2024-01-31",
                "next_run_date": "2024-02-29",
                "status": "active",
                "total": "1080.00",
                "invoices_generated": 1,
            }
        }


class TemplateListResponseDTO(BaseModel):
    templates: List[TemplateResponseDTO]
    total: int


class GenerateInvoiceResponseDTO(BaseModel):
    """
    Response DTO for one generation event

    next_run_date is None once the template has completed.
    """

    invoice_id: int = Field(..., description="Generated invoice ID")
    invoice_number: str = Field(..., description="Generated invoice number")
    template_id: int = Field(..., description="Template the invoice was generated from")
    next_run_date: Optional[date] = Field(default=None, description="Template's next occurrence")
    status: str = Field(..., description="Template status after generation")

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_id": 42,
                "invoice_number": "INV-00007",
                "template_id": 3,
                "next_run_date": "2024-02-29",
                "status": "active",
            }
        }


class GeneratedInvoiceSummaryDTO(BaseModel):
    """Lightweight history entry for an invoice generated from a template"""

    id: int
    invoice_number: str
    total: Decimal
    status: str
    created_at: datetime

    @classmethod
    def from_entity(cls, invoice: Invoice) -> "GeneratedInvoiceSummaryDTO":
        return cls(
            id=invoice.id,
            invoice_number=invoice.invoice_number,
            total=invoice.total,
            status=_enum_value(invoice.status),
            created_at=invoice.created_at,
        )


class GeneratedInvoiceListResponseDTO(BaseModel):
    template_id: int
    invoices: List[GeneratedInvoiceSummaryDTO]


class InvoiceNumberPreviewDTO(BaseModel):
    tenant_id: str
    invoice_number: str


class RecurringGenerationResultDTO(BaseModel):
    """
    Summary of one due-template trigger run
    """

    as_of: date
    due_templates: int
    generated: int
    failed: int
    skipped: int = 0
    invoices: List[GenerateInvoiceResponseDTO] = Field(default_factory=list)
    execution_time_ms: int
