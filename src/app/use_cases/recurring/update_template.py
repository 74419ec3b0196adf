"""UpdateRecurringTemplate Use Case

Partial edit of a template's schedule or content snapshot.
"""

import logging
from decimal import Decimal
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.recurring_template_repository import RecurringTemplateRepository
from src.app.repositories.recurring_template_item_repository import RecurringTemplateItemRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.pricing import document_totals
from src.domain.schedule import parse_frequency
from .dtos import UpdateTemplateCommandDTO, TemplateResponseDTO
from .errors import template_not_found, invalid_state, validation_error, persistence_failure
from .validation import check_frequency, check_items, check_discount_type, to_discount_type, to_template_items

logger = logging.getLogger(__name__)

HEADER_FIELDS = ("contact_id", "customer_name", "customer_email", "notes", "payment_terms")
PRICING_FIELDS = {"items", "discount_type", "discount_value"}


class UpdateRecurringTemplate:
    """
    Use Case: Update recurring template

    Business Rules:
    1. Only fields present on the command are changed
    2. Completed templates cannot be edited
    3. Totals are recomputed only when items or discount change
    4. Items, when given, replace the whole snapshot and cannot be empty
    5. end_date cannot move before start_date
    6. Status, next_run_date and start_date are not editable here
       (they move through the lifecycle operations and generation)

    Flow:
    1. Validate provided fields
    2. Load and lock template
    3. Apply header and schedule fields
    4. Replace items and recompute totals when pricing changed
    5. Commit transaction
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

    async def execute(self, command: UpdateTemplateCommandDTO) -> Result[TemplateResponseDTO]:
        provided = command.provided()

        # Step 1: Validate provided fields
        error = None
        if "template_name" in provided and (not command.template_name or not command.template_name.strip()):
            error = validation_error("Template name cannot be empty", reason="Blank template_name")
        elif "frequency" in provided:
            error = check_frequency(command.frequency)
        if not error and "items" in provided:
            error = check_items(command.items)
        if not error and "discount_type" in provided:
            error = check_discount_type(command.discount_type)
        if error:
            return Return.err(error)

        try:
            # Step 2: Load template
            template = await self.template_repo.get_by_id(
                command.tenant_id, command.template_id, for_update=True
            )

            if not template:
                return Return.err(template_not_found(command.tenant_id, command.template_id))

            if template.is_completed:
                return Return.err(
                    invalid_state(
                        "Cannot update a completed template",
                        reason=f"Template {command.template_id} status is completed",
                    )
                )

            if "end_date" in provided and command.end_date is not None and command.end_date < template.start_date:
                return Return.err(
                    validation_error(
                        "End date cannot be before start date",
                        reason=f"start_date={template.start_date}, end_date={command.end_date}",
                    )
                )

            # Step 3: Header and schedule fields
            if "template_name" in provided:
                template.template_name = command.template_name.strip()
            if "frequency" in provided:
                template.frequency = parse_frequency(command.frequency)
            if "end_date" in provided:
                template.end_date = command.end_date
            for field in HEADER_FIELDS:
                if field in provided:
                    setattr(template, field, getattr(command, field))

            # Step 4: Pricing
            if "items" in provided:
                items = await self.template_item_repo.replace_for_template(
                    template.id, to_template_items(command.items)
                )
            else:
                items = await self.template_item_repo.get_by_template_id(template.id)

            if provided & PRICING_FIELDS:
                if "discount_type" in provided:
                    template.discount_type = to_discount_type(command.discount_type)
                if "discount_value" in provided:
                    template.discount_value = command.discount_value or Decimal("0")
                totals = document_totals(items, template.discount_type, template.discount_value)
                template.subtotal = totals.subtotal
                template.tax_amount = totals.tax_amount
                template.discount_amount = totals.discount_amount
                template.total = totals.total

            updated = await self.template_repo.update(template)

            # Step 5: Commit
            await self.uow.commit()

            counts = await self.invoice_repo.count_by_templates(command.tenant_id, [updated.id])

            logger.info(
                f"Updated recurring template {updated.id} for tenant {command.tenant_id} "
                f"(fields: {', '.join(sorted(provided)) or 'none'})"
            )
            return Return.ok(
                TemplateResponseDTO.from_entity(updated, items, invoices_generated=counts.get(updated.id, 0))
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to update recurring template {command.template_id}: {e}")
            return Return.err(persistence_failure("Failed to update recurring template", e))
