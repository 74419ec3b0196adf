"""ResumeRecurringTemplate Use Case"""

import logging
from datetime import datetime
from typing import Callable, Optional
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.recurring_template_repository import RecurringTemplateRepository
from src.app.repositories.recurring_template_item_repository import RecurringTemplateItemRepository
from src.domain.recurring_template import TemplateStatus
from src.domain.schedule import advance_until
from .dtos import TemplateResponseDTO
from .errors import template_not_found, invalid_state, persistence_failure

logger = logging.getLogger(__name__)


class ResumeRecurringTemplate:
    """
    Use Case: Resume a paused template (paused -> active)

    Business Rules:
    1. Only paused templates can be resumed
    2. A next_run_date left in the past while paused is caught up to today
       in whole-period steps, so missed periods are skipped rather than
       generated one by one
    3. A next_run_date on or after today is kept as is
    """

    def __init__(
        self,
        uow: UnitOfWork,
        template_repo: RecurringTemplateRepository,
        template_item_repo: RecurringTemplateItemRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.uow = uow
        self.template_repo = template_repo
        self.template_item_repo = template_item_repo
        self.clock = clock or datetime.utcnow

    async def execute(self, tenant_id: str, template_id: int) -> Result[TemplateResponseDTO]:
        try:
            template = await self.template_repo.get_by_id(tenant_id, template_id, for_update=True)

            if not template:
                return Return.err(template_not_found(tenant_id, template_id))

            if TemplateStatus(template.status) != TemplateStatus.PAUSED:
                return Return.err(
                    invalid_state(
                        "Only paused templates can be resumed",
                        reason=f"Template {template_id} status is {TemplateStatus(template.status).value}",
                    )
                )

            today = self.clock().date()
            previous_run_date = template.next_run_date
            if previous_run_date < today:
                template.next_run_date = advance_until(previous_run_date, template.frequency, today)

            template.status = TemplateStatus.ACTIVE
            updated = await self.template_repo.update(template)
            items = await self.template_item_repo.get_by_template_id(updated.id)

            await self.uow.commit()

            if updated.next_run_date != previous_run_date:
                logger.info(
                    f"Resumed recurring template {template_id} for tenant {tenant_id}, "
                    f"next_run_date caught up from {previous_run_date} to {updated.next_run_date}"
                )
            else:
                logger.info(f"Resumed recurring template {template_id} for tenant {tenant_id}")

            return Return.ok(TemplateResponseDTO.from_entity(updated, items))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to resume recurring template {template_id}: {e}")
            return Return.err(persistence_failure("Failed to resume recurring template", e))
