"""ListGeneratedInvoices Use Case

Generation history of a recurring template.
"""

from libs.result import Result, Return
from src.app.repositories.recurring_template_repository import RecurringTemplateRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from .dtos import GeneratedInvoiceSummaryDTO, GeneratedInvoiceListResponseDTO
from .errors import template_not_found


class ListGeneratedInvoices:
    """
    List Generated Invoices Use Case

    Read-only. Returns lightweight summaries (id, number, total, status,
    created_at) of every invoice generated from a template, newest first.
    """

    def __init__(
        self,
        template_repo: RecurringTemplateRepository,
        invoice_repo: InvoiceRepository,
    ):
        self.template_repo = template_repo
        self.invoice_repo = invoice_repo

    async def execute(self, tenant_id: str, template_id: int) -> Result[GeneratedInvoiceListResponseDTO]:
        """
        Args:
            tenant_id: Tenant identifier
            template_id: Template whose history is listed

        Errors:
            TEMPLATE_NOT_FOUND: Template absent for the tenant
        """
        template = await self.template_repo.get_by_id(tenant_id, template_id)

        if not template:
            return Return.err(template_not_found(tenant_id, template_id))

        invoices = await self.invoice_repo.list_by_template(tenant_id, template_id)

        return Return.ok(
            GeneratedInvoiceListResponseDTO(
                template_id=template.id,
                invoices=[GeneratedInvoiceSummaryDTO.from_entity(invoice) for invoice in invoices],
            )
        )
