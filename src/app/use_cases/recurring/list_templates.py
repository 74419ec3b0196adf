"""ListRecurringTemplates Use Case"""

from typing import Optional
from libs.result import Result, Return
from src.app.repositories.recurring_template_repository import RecurringTemplateRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.recurring_template import TemplateStatus
from .dtos import TemplateResponseDTO, TemplateListResponseDTO
from .errors import validation_error


class ListRecurringTemplates:
    """
    List Recurring Templates Use Case

    Read-only. Newest first, optionally filtered by status ("all" or None
    means no filter). Each entry carries its generated-invoice count; items
    are omitted from the listing.
    """

    def __init__(
        self,
        template_repo: RecurringTemplateRepository,
        invoice_repo: InvoiceRepository,
    ):
        self.template_repo = template_repo
        self.invoice_repo = invoice_repo

    async def execute(self, tenant_id: str, status: Optional[str] = None) -> Result[TemplateListResponseDTO]:
        status_filter = None
        if status and status.lower() != "all":
            try:
                status_filter = TemplateStatus(status.lower())
            except ValueError:
                allowed = ", ".join(s.value for s in TemplateStatus)
                return Return.err(
                    validation_error(
                        f"Invalid status filter. Must be 'all' or one of: {allowed}",
                        reason=f"status={status!r}",
                    )
                )

        templates = await self.template_repo.list_by_tenant(tenant_id, status=status_filter)
        counts = await self.invoice_repo.count_by_templates(tenant_id, [t.id for t in templates])

        return Return.ok(
            TemplateListResponseDTO(
                templates=[
                    TemplateResponseDTO.from_entity(t, invoices_generated=counts.get(t.id, 0))
                    for t in templates
                ],
                total=len(templates),
            )
        )
