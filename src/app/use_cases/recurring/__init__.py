"""Recurring invoice use cases"""
from .create_template import CreateRecurringTemplate
from .update_template import UpdateRecurringTemplate
from .pause_template import PauseRecurringTemplate
from .resume_template import ResumeRecurringTemplate
from .generate_invoice import GenerateInvoiceFromTemplate
from .create_from_invoice import CreateTemplateFromInvoice
from .list_generated_invoices import ListGeneratedInvoices
from .get_template import GetRecurringTemplate
from .list_templates import ListRecurringTemplates
from .delete_template import DeleteRecurringTemplate
from .preview_invoice_number import PreviewInvoiceNumber
from .dtos import (
    TemplateItemDTO,
    CreateTemplateCommandDTO,
    UpdateTemplateCommandDTO,
    CreateFromInvoiceCommandDTO,
    TemplateItemResponseDTO,
    TemplateResponseDTO,
    TemplateListResponseDTO,
    GenerateInvoiceResponseDTO,
    GeneratedInvoiceSummaryDTO,
    GeneratedInvoiceListResponseDTO,
    InvoiceNumberPreviewDTO,
    RecurringGenerationResultDTO,
)

__all__ = [
    "CreateRecurringTemplate",
    "UpdateRecurringTemplate",
    "PauseRecurringTemplate",
    "ResumeRecurringTemplate",
    "GenerateInvoiceFromTemplate",
    "CreateTemplateFromInvoice",
    "ListGeneratedInvoices",
    "GetRecurringTemplate",
    "ListRecurringTemplates",
    "DeleteRecurringTemplate",
    "PreviewInvoiceNumber",
    "TemplateItemDTO",
    "CreateTemplateCommandDTO",
    "UpdateTemplateCommandDTO",
    "CreateFromInvoiceCommandDTO",
    "TemplateItemResponseDTO",
    "TemplateResponseDTO",
    "TemplateListResponseDTO",
    "GenerateInvoiceResponseDTO",
    "GeneratedInvoiceSummaryDTO",
    "GeneratedInvoiceListResponseDTO",
    "InvoiceNumberPreviewDTO",
    "RecurringGenerationResultDTO",
]
