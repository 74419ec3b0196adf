from .recurring_template_repository import RecurringTemplateRepository
from .recurring_template_item_repository import RecurringTemplateItemRepository
from .invoice_repository import InvoiceRepository
from .invoice_line_repository import InvoiceLineRepository
from .invoice_numbering_repository import InvoiceNumberingRepository

__all__ = [
    "RecurringTemplateRepository",
    "RecurringTemplateItemRepository",
    "InvoiceRepository",
    "InvoiceLineRepository",
    "InvoiceNumberingRepository",
]
