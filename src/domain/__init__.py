from .base import BaseModel, IdType
from .schedule import Frequency, advance, advance_until, parse_frequency
from .pricing import DiscountType, document_totals, line_amounts
from .recurring_template import RecurringTemplate, TemplateStatus, TEMPLATE_TRANSITIONS
from .recurring_template_item import RecurringTemplateItem
from .invoice import Invoice, InvoiceStatus, CLOSED_INVOICE_STATUSES
from .invoice_line import InvoiceLine
from .invoice_numbering import InvoiceNumbering

__all__ = [
    "BaseModel",
    "IdType",
    "Frequency",
    "advance",
    "advance_until",
    "parse_frequency",
    "DiscountType",
    "document_totals",
    "line_amounts",
    "RecurringTemplate",
    "TemplateStatus",
    "TEMPLATE_TRANSITIONS",
    "RecurringTemplateItem",
    "Invoice",
    "InvoiceStatus",
    "CLOSED_INVOICE_STATUSES",
    "InvoiceLine",
    "InvoiceNumbering",
]
