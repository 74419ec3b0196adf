"""GetRecurringTemplate Use Case"""

from libs.result import Result, Return
from src.app.repositories.recurring_template_repository import RecurringTemplateRepository
from src.app.repositories.recurring_template_item_repository import RecurringTemplateItemRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from .dtos import TemplateResponseDTO
from .errors import template_not_found


class GetRecurringTemplate:
    """
    Get Recurring Template Use Case

    Read-only. Returns the template with its items, the number of invoices
    generated from it and the number of the invoice it was derived from.
    """

    def __init__(
        self,
        template_repo: RecurringTemplateRepository,
        template_item_repo: RecurringTemplateItemRepository,
        invoice_repo: InvoiceRepository,
    ):
        self.template_repo = template_repo
        self.template_item_repo = template_item_repo
        self.invoice_repo = invoice_repo

    async def execute(self, tenant_id: str, template_id: int) -> Result[TemplateResponseDTO]:
        template = await self.template_repo.get_by_id(tenant_id, template_id)

        if not template:
            return Return.err(template_not_found(tenant_id, template_id))

        items = await self.template_item_repo.get_by_template_id(template.id)
        counts = await self.invoice_repo.count_by_templates(tenant_id, [template.id])

        source_invoice_number = None
        if template.source_invoice_id is not None:
            source = await self.invoice_repo.get_by_id(tenant_id, template.source_invoice_id)
            source_invoice_number = source.invoice_number if source else None

        return Return.ok(
            TemplateResponseDTO.from_entity(
                template,
                items,
                invoices_generated=counts.get(template.id, 0),
                source_invoice_number=source_invoice_number,
            )
        )
