"""GenerateInvoiceFromTemplate Use Case

Turns one recurring template into one concrete invoice and advances the
template's schedule, as a single all-or-nothing unit of work.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.numbering_authority import NumberingAuthority
from src.app.repositories.recurring_template_repository import RecurringTemplateRepository
from src.app.repositories.recurring_template_item_repository import RecurringTemplateItemRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_line import InvoiceLine
from src.domain.pricing import line_amounts
from src.domain.recurring_template import TemplateStatus
from src.domain.schedule import advance
from .dtos import GenerateInvoiceResponseDTO
from .errors import template_not_found, invalid_state, persistence_failure

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_TERMS_DAYS = 30


class GenerateInvoiceFromTemplate:
    """
    Use Case: Generate one invoice from a recurring template ("generate now")

    Business Rules:
    1. Template must exist for the tenant and must not be completed
    2. Invoice number is reserved inside the same transaction, so a failed
       attempt never consumes a number
    3. Header totals are copied verbatim from the template snapshot
    4. Line tax/total are recomputed from quantity x unit price x tax rate
    5. Schedule advances exactly once per successful generation; passing
       end_date completes the template and freezes next_run_date at end_date
    6. Not idempotent and not date gated: every call produces an invoice.
       Scheduled callers pass as_of, which additionally requires the locked
       template to be active and due on that date

    Flow:
    1. Load and lock template
    2. Validate status
    3. Reserve invoice number
    4. Insert invoice header (due = today + payment terms)
    5. Insert invoice lines
    6. Advance or complete the template, stamp last_generated_at
    7. Commit (any failure rolls back every step)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        template_repo: RecurringTemplateRepository,
        template_item_repo: RecurringTemplateItemRepository,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        numbering_authority: NumberingAuthority,
        default_payment_terms_days: int = DEFAULT_PAYMENT_TERMS_DAYS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.uow = uow
        self.template_repo = template_repo
        self.template_item_repo = template_item_repo
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.numbering_authority = numbering_authority
        self.default_payment_terms_days = default_payment_terms_days
        self.clock = clock or datetime.utcnow

    async def execute(
        self,
        tenant_id: str,
        template_id: int,
        as_of: Optional[date] = None,
    ) -> Result[GenerateInvoiceResponseDTO]:
        """
        Execute one generation

        Args:
            tenant_id: Tenant identifier
            template_id: Template to generate from
            as_of: Due date check for scheduled runs; None for manual generation

        Returns:
            Result[GenerateInvoiceResponseDTO]: New invoice and resulting template schedule, or error
        """
        try:
            # Step 1: Load template with row lock
            template = await self.template_repo.get_by_id(tenant_id, template_id, for_update=True)

            if not template:
                return Return.err(template_not_found(tenant_id, template_id))

            # Step 2: Completed is terminal
            if template.is_completed:
                return Return.err(
                    invalid_state(
                        "Cannot generate invoice from a completed template",
                        reason=f"Template {template_id} status is completed",
                    )
                )

            # Scheduled runs re-check the locked row; it may have changed since selection
            if as_of is not None and not template.is_due(as_of):
                return Return.err(
                    invalid_state(
                        "Template is not due for generation",
                        reason=(
                            f"Template {template_id} status is {TemplateStatus(template.status).value}, "
                            f"next_run_date {template.next_run_date}, as of {as_of}"
                        ),
                    )
                )

            items = await self.template_item_repo.get_by_template_id(template.id)
            now = self.clock()

            # Step 3: Reserve number (rolled back with everything else on failure)
            reserved = await self.numbering_authority.reserve_next(tenant_id)

            # Step 4: Invoice header from the frozen snapshot
            payment_terms = (
                template.payment_terms
                if template.payment_terms is not None
                else self.default_payment_terms_days
            )
            issue_date = now.date()

            invoice = Invoice(
                tenant_id=tenant_id,
                invoice_number=reserved.invoice_number,
                contact_id=template.contact_id,
                customer_name=template.customer_name,
                customer_email=template.customer_email,
                status=InvoiceStatus.DRAFT,
                issue_date=issue_date,
                due_date=issue_date + timedelta(days=payment_terms),
                subtotal=template.subtotal,
                tax_amount=template.tax_amount,
                discount_type=template.discount_type,
                discount_value=template.discount_value,
                discount_amount=template.discount_amount,
                total=template.total,
                amount_due=template.total,
                currency=template.currency,
                notes=template.notes,
                payment_terms=payment_terms,
                recurring_template_id=template.id,
            )
            created_invoice = await self.invoice_repo.create(invoice)

            # Step 5: Lines, recomputed per line
            for position, item in enumerate(items):
                amounts = line_amounts(item.quantity, item.unit_price, item.tax_rate)
                await self.invoice_line_repo.create(
                    InvoiceLine(
                        invoice_id=created_invoice.id,
                        tenant_id=tenant_id,
                        product_id=item.product_id,
                        name=item.name,
                        description=item.description,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                        tax_rate=item.tax_rate,
                        tax_amount=amounts.tax,
                        total=amounts.total,
                        sort_order=position,
                    )
                )

            # Step 6: Advance or complete the schedule
            next_occurrence = advance(template.next_run_date, template.frequency)
            schedule_ended = template.end_date is not None and next_occurrence > template.end_date

            if schedule_ended:
                template.next_run_date = template.end_date
                template.status = TemplateStatus.COMPLETED
            else:
                template.next_run_date = next_occurrence

            template.last_generated_at = now
            updated_template = await self.template_repo.update(template)

            # Step 7: Commit
            await self.uow.commit()

            response = GenerateInvoiceResponseDTO(
                invoice_id=created_invoice.id,
                invoice_number=created_invoice.invoice_number,
                template_id=updated_template.id,
                next_run_date=None if updated_template.is_completed else updated_template.next_run_date,
                status=TemplateStatus(updated_template.status).value,
            )

            logger.info(
                f"Generated invoice {response.invoice_number} from template {template_id} "
                f"for tenant {tenant_id} (template status={response.status}, "
                f"next_run_date={response.next_run_date})"
            )
            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            logger.error(
                f"Failed to generate invoice from template {template_id} "
                f"for tenant {tenant_id}: {e}"
            )
            return Return.err(
                persistence_failure("Failed to generate invoice from recurring template", e)
            )
