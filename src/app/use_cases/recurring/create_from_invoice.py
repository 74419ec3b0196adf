"""CreateTemplateFromInvoice Use Case

Converts an existing invoice into the content snapshot of a new recurring
template.
"""

import logging
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.recurring_template_repository import RecurringTemplateRepository
from src.app.repositories.recurring_template_item_repository import RecurringTemplateItemRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.invoice import InvoiceStatus, CLOSED_INVOICE_STATUSES
from src.domain.pricing import document_totals
from src.domain.recurring_template import RecurringTemplate, TemplateStatus
from src.domain.recurring_template_item import RecurringTemplateItem
from src.domain.schedule import parse_frequency
from .dtos import CreateFromInvoiceCommandDTO, TemplateResponseDTO
from .errors import invoice_not_found, validation_error, persistence_failure
from .validation import check_schedule

logger = logging.getLogger(__name__)


class CreateTemplateFromInvoice:
    """
    Use Case: Create recurring template from an existing invoice

    Business Rules:
    1. Source invoice must exist for the tenant
    2. Cancelled or refunded invoices cannot seed a recurring series
    3. Source invoice must have at least one line item
    4. Template name defaults to "Recurring: <invoice number>"
    5. Line items, discount, notes, payment terms and customer fields are
       copied; totals are recomputed from the copied items
    6. Source invoice is flagged is_recurring_source and otherwise untouched

    Flow:
    1. Load source invoice
    2. Validate schedule fields, source status and lines
    3. Build template snapshot
    4. Insert template and items, flag the source invoice
    5. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        template_repo: RecurringTemplateRepository,
        template_item_repo: RecurringTemplateItemRepository,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
    ):
        self.uow = uow
        self.template_repo = template_repo
        self.template_item_repo = template_item_repo
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo

    async def execute(self, command: CreateFromInvoiceCommandDTO) -> Result[TemplateResponseDTO]:
        """
        Execute conversion

        Args:
            command: CreateFromInvoiceCommandDTO with source invoice and schedule

        Returns:
            Result[TemplateResponseDTO]: Created template or error
        """
        try:
            # Step 1: Load source invoice
            invoice = await self.invoice_repo.get_by_id(command.tenant_id, command.source_invoice_id)

            if not invoice:
                return Return.err(invoice_not_found(command.tenant_id, command.source_invoice_id))

            template_name = command.template_name or f"Recurring: {invoice.invoice_number}"

            # Step 2: Schedule and source checks (name falls back to the invoice number)
            error = check_schedule(template_name, command.frequency, command.start_date, command.end_date)
            if error:
                return Return.err(error)

            if InvoiceStatus(invoice.status) in CLOSED_INVOICE_STATUSES:
                return Return.err(
                    validation_error(
                        "Cannot create a recurring template from a cancelled or refunded invoice",
                        reason=f"Invoice {invoice.id} status is {InvoiceStatus(invoice.status).value}",
                    )
                )

            lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
            if not lines:
                return Return.err(
                    validation_error(
                        "Source invoice has no line items",
                        reason=f"Invoice {invoice.id} has no lines",
                    )
                )

            # Step 3: Snapshot
            items = [
                RecurringTemplateItem(
                    product_id=line.product_id,
                    name=line.name,
                    description=line.description,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    tax_rate=line.tax_rate,
                    sort_order=position,
                )
                for position, line in enumerate(lines)
            ]
            totals = document_totals(items, invoice.discount_type, invoice.discount_value)

            template = RecurringTemplate(
                tenant_id=command.tenant_id,
                template_name=template_name.strip(),
                contact_id=invoice.contact_id,
                customer_name=invoice.customer_name,
                customer_email=invoice.customer_email,
                frequency=parse_frequency(command.frequency),
                start_date=command.start_date,
                end_date=command.end_date,
                next_run_date=command.start_date,
                status=TemplateStatus.ACTIVE,
                subtotal=totals.subtotal,
                tax_amount=totals.tax_amount,
                discount_type=invoice.discount_type,
                discount_value=invoice.discount_value,
                discount_amount=totals.discount_amount,
                total=totals.total,
                currency=invoice.currency,
                notes=invoice.notes,
                payment_terms=invoice.payment_terms,
                source_invoice_id=invoice.id,
            )

            # Step 4: Persist
            created = await self.template_repo.create(template)
            saved_items = await self.template_item_repo.replace_for_template(created.id, items)

            invoice.is_recurring_source = True
            await self.invoice_repo.update(invoice)

            # Step 5: Commit
            await self.uow.commit()

            logger.info(
                f"Created recurring template {created.id} from invoice {invoice.invoice_number} "
                f"for tenant {command.tenant_id}"
            )
            return Return.ok(
                TemplateResponseDTO.from_entity(
                    created, saved_items, source_invoice_number=invoice.invoice_number
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(
                f"Failed to create recurring template from invoice {command.source_invoice_id}: {e}"
            )
            return Return.err(persistence_failure("Failed to create recurring template from invoice", e))
