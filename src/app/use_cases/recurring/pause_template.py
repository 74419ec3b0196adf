"""PauseRecurringTemplate Use Case"""

import logging
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.recurring_template_repository import RecurringTemplateRepository
from src.app.repositories.recurring_template_item_repository import RecurringTemplateItemRepository
from src.domain.recurring_template import TemplateStatus
from .dtos import TemplateResponseDTO
from .errors import template_not_found, invalid_state, persistence_failure

logger = logging.getLogger(__name__)


class PauseRecurringTemplate:
    """
    Use Case: Pause an active template (active -> paused)

    Only the status changes; next_run_date is kept and caught up on resume.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        template_repo: RecurringTemplateRepository,
        template_item_repo: RecurringTemplateItemRepository,
    ):
        self.uow = uow
        self.template_repo = template_repo
        self.template_item_repo = template_item_repo

    async def execute(self, tenant_id: str, template_id: int) -> Result[TemplateResponseDTO]:
        try:
            template = await self.template_repo.get_by_id(tenant_id, template_id, for_update=True)

            if not template:
                return Return.err(template_not_found(tenant_id, template_id))

            if not template.can_transition_to(TemplateStatus.PAUSED):
                return Return.err(
                    invalid_state(
                        "Only active templates can be paused",
                        reason=f"Template {template_id} status is {TemplateStatus(template.status).value}",
                    )
                )

            template.status = TemplateStatus.PAUSED
            updated = await self.template_repo.update(template)
            items = await self.template_item_repo.get_by_template_id(updated.id)

            await self.uow.commit()

            logger.info(f"Paused recurring template {template_id} for tenant {tenant_id}")
            return Return.ok(TemplateResponseDTO.from_entity(updated, items))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to pause recurring template {template_id}: {e}")
            return Return.err(persistence_failure("Failed to pause recurring template", e))
