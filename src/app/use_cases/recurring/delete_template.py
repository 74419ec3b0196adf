"""DeleteRecurringTemplate Use Case"""

import logging
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.recurring_template_repository import RecurringTemplateRepository
from src.app.repositories.recurring_template_item_repository import RecurringTemplateItemRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from .errors import template_not_found, invalid_state, persistence_failure

logger = logging.getLogger(__name__)


class DeleteRecurringTemplate:
    """
    Use Case: Hard delete a recurring template

    Business Rules:
    1. A template referenced by generated invoices is never deleted;
       pause it instead to stop the series
    2. Items are removed together with the template
    """

    def __init__(
        self,
        uow: UnitOfWork,
        template_repo: RecurringTemplateRepository,
        template_item_repo: RecurringTemplateItemRepository,
        invoice_repo: InvoiceRepository,
    ):
        self.uow = uow
        self.template_repo = template_repo
        self.template_item_repo = template_item_repo
        self.invoice_repo = invoice_repo

    async def execute(self, tenant_id: str, template_id: int) -> Result[int]:
        """
        Returns:
            Result[int]: ID of the deleted template or error
        """
        try:
            template = await self.template_repo.get_by_id(tenant_id, template_id, for_update=True)

            if not template:
                return Return.err(template_not_found(tenant_id, template_id))

            counts = await self.invoice_repo.count_by_templates(tenant_id, [template.id])
            generated = counts.get(template.id, 0)
            if generated:
                return Return.err(
                    invalid_state(
                        "Cannot delete a template that has generated invoices; pause it instead",
                        reason=f"Template {template_id} is referenced by {generated} invoice(s)",
                    )
                )

            await self.template_item_repo.replace_for_template(template.id, [])
            await self.template_repo.delete(template)

            await self.uow.commit()

            logger.info(f"Deleted recurring template {template_id} for tenant {tenant_id}")
            return Return.ok(template_id)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to delete recurring template {template_id}: {e}")
            return Return.err(persistence_failure("Failed to delete recurring template", e))
