"""CreateRecurringTemplate Use Case

Creates an active recurring template from a schedule and a content snapshot.
"""

import logging
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.recurring_template_repository import RecurringTemplateRepository
from src.app.repositories.recurring_template_item_repository import RecurringTemplateItemRepository
from src.domain.pricing import document_totals
from src.domain.recurring_template import RecurringTemplate, TemplateStatus
from src.domain.schedule import parse_frequency
from .dtos import CreateTemplateCommandDTO, TemplateResponseDTO
from .errors import persistence_failure
from .validation import (
    check_schedule,
    check_items,
    check_discount_type,
    to_discount_type,
    to_template_items,
)

logger = logging.getLogger(__name__)


class CreateRecurringTemplate:
    """
    Use Case: Create recurring invoice template

    Business Rules:
    1. Template name, frequency and start date are required
    2. Frequency must be weekly, monthly, quarterly or yearly
    3. At least one line item is required
    4. end_date, when given, is not before start_date
    5. Totals are computed once from the items and discount and stored
    6. New templates are active with next_run_date = start_date

    Flow:
    1. Validate schedule, items and discount
    2. Compute totals
    3. Insert template and items
    4. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        template_repo: RecurringTemplateRepository,
        template_item_repo: RecurringTemplateItemRepository,
        default_currency: str = "USD",
    ):
        self.uow = uow
        self.template_repo = template_repo
        self.template_item_repo = template_item_repo
        self.default_currency = default_currency

    async def execute(self, command: CreateTemplateCommandDTO) -> Result[TemplateResponseDTO]:
        """
        Execute template creation

        Args:
            command: CreateTemplateCommandDTO with schedule and content

        Returns:
            Result[TemplateResponseDTO]: Created template or error
        """
        # Step 1: Validate before touching the database
        error = (
            check_schedule(command.template_name, command.frequency, command.start_date, command.end_date)
            or check_items(command.items)
            or check_discount_type(command.discount_type)
        )
        if error:
            return Return.err(error)

        try:
            # Step 2: Compute totals from the snapshot
            discount_type = to_discount_type(command.discount_type)
            items = to_template_items(command.items)
            totals = document_totals(items, discount_type, command.discount_value)

            # Step 3: Persist
            template = RecurringTemplate(
                tenant_id=command.tenant_id,
                template_name=command.template_name.strip(),
                contact_id=command.contact_id,
                customer_name=command.customer_name,
                customer_email=command.customer_email,
                frequency=parse_frequency(command.frequency),
                start_date=command.start_date,
                end_date=command.end_date,
                next_run_date=command.start_date,
                status=TemplateStatus.ACTIVE,
                subtotal=totals.subtotal,
                tax_amount=totals.tax_amount,
                discount_type=discount_type,
                discount_value=command.discount_value,
                discount_amount=totals.discount_amount,
                total=totals.total,
                currency=command.currency or self.default_currency,
                notes=command.notes,
                payment_terms=command.payment_terms,
            )
            created = await self.template_repo.create(template)
            saved_items = await self.template_item_repo.replace_for_template(created.id, items)

            # Step 4: Commit
            await self.uow.commit()

            logger.info(
                f"Created recurring template {created.id} ({template.frequency.value}) "
                f"for tenant {command.tenant_id}"
            )
            return Return.ok(TemplateResponseDTO.from_entity(created, saved_items))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create recurring template for tenant {command.tenant_id}: {e}")
            return Return.err(persistence_failure("Failed to create recurring template", e))
