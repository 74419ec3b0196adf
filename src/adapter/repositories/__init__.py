from .recurring_template_repository import SqlAlchemyRecurringTemplateRepository
from .recurring_template_item_repository import SqlAlchemyRecurringTemplateItemRepository
from .invoice_repository import SqlAlchemyInvoiceRepository
from .invoice_line_repository import SqlAlchemyInvoiceLineRepository
from .invoice_numbering_repository import SqlAlchemyInvoiceNumberingRepository

__all__ = [
    "SqlAlchemyRecurringTemplateRepository",
    "SqlAlchemyRecurringTemplateItemRepository",
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyInvoiceLineRepository",
    "SqlAlchemyInvoiceNumberingRepository",
]
