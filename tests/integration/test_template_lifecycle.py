"""Integration tests for the template lifecycle

Tests cover:
- Pause / resume, including illegal transitions and catch-up on resume
- Converting an existing invoice into a template
- Generation history ordering
- Deleting templates
- The due-template worker against a real database, including late runs and
  templates paused after selection
- Reaching end_date while paused
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

from sqlmodel import select
from src.adapter.repositories.recurring_template_repository import SqlAlchemyRecurringTemplateRepository
from src.adapter.repositories.recurring_template_item_repository import SqlAlchemyRecurringTemplateItemRepository
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.invoice_line_repository import SqlAlchemyInvoiceLineRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.recurring import (
    PauseRecurringTemplate,
    ResumeRecurringTemplate,
    CreateTemplateFromInvoice,
    ListGeneratedInvoices,
    DeleteRecurringTemplate,
    CreateFromInvoiceCommandDTO,
)
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_line import InvoiceLine
from src.domain.pricing import DiscountType
from src.domain.recurring_template import RecurringTemplate, TemplateStatus
from src.worker.recurring_generation import RecurringGenerationWorker


def _pause(session):
    return PauseRecurringTemplate(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRecurringTemplateRepository(session),
        SqlAlchemyRecurringTemplateItemRepository(session),
    )


def _resume(session, today: date):
    return ResumeRecurringTemplate(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRecurringTemplateRepository(session),
        SqlAlchemyRecurringTemplateItemRepository(session),
        clock=lambda: datetime.combine(today, datetime.min.time()),
    )


def _convert(session):
    return CreateTemplateFromInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRecurringTemplateRepository(session),
        SqlAlchemyRecurringTemplateItemRepository(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
    )


async def _get_template(session_factory, template_id):
    async with session_factory() as session:
        result = await session.execute(select(RecurringTemplate).where(RecurringTemplate.id == template_id))
        return result.scalar_one()


async def _count_templates(session_factory, tenant_id):
    async with session_factory() as session:
        result = await session.execute(select(RecurringTemplate).where(RecurringTemplate.tenant_id == tenant_id))
        return len(result.scalars().all())


async def _count_invoices(session_factory, template_id):
    async with session_factory() as session:
        result = await session.execute(select(Invoice).where(Invoice.recurring_template_id == template_id))
        return len(result.scalars().all())


async def _create_invoice(session, status=InvoiceStatus.PAID, tenant_id="tenant_int"):
    invoice = Invoice(
        tenant_id=tenant_id,
        invoice_number="INV-00042",
        customer_name="Globex",
        status=status,
        issue_date=date(2024, 1, 5),
        due_date=date(2024, 1, 19),
        subtotal=Decimal("500.00"),
        tax_amount=Decimal("50.00"),
        discount_type=DiscountType.PERCENT,
        discount_value=Decimal("10"),
        discount_amount=Decimal("50.00"),
        total=Decimal("500.00"),
        amount_due=Decimal("0"),
        currency="GBP",
        payment_terms=14,
    )
    session.add(invoice)
    await session.flush()
    session.add(
        InvoiceLine(
            invoice_id=invoice.id,
            tenant_id=tenant_id,
            name="Hosting",
            quantity=Decimal("5"),
            unit_price=Decimal("100.00"),
            tax_rate=Decimal("10"),
            tax_amount=Decimal("50.00"),
            total=Decimal("550.00"),
            sort_order=0,
        )
    )
    await session.commit()
    return invoice


@pytest.mark.asyncio
class TestPauseResumeIntegration:
    """Lifecycle transitions against the database"""

    async def test_pause_then_resume_round_trip(self, db_session, session_factory, create_template):
        template = await create_template()

        paused = await _pause(db_session).execute("tenant_int", template.template_id)
        assert paused.value.status == "paused"
        assert (await _get_template(session_factory, template.template_id)).status == TemplateStatus.PAUSED

        resumed = await _resume(db_session, date(2024, 1, 15)).execute("tenant_int", template.template_id)
        assert resumed.value.status == "active"
        assert resumed.value.next_run_date == date(2024, 1, 31)

    async def test_pausing_paused_template_changes_nothing(self, db_session, session_factory, create_template):
        """
        Given: A paused template
        When: pause is called again
        Then: INVALID_TEMPLATE_STATE; stored template unchanged
        """
        template = await create_template()
        await _pause(db_session).execute("tenant_int", template.template_id)
        before = await _get_template(session_factory, template.template_id)

        result = await _pause(db_session).execute("tenant_int", template.template_id)

        assert result.is_err()
        assert result.error.code == "INVALID_TEMPLATE_STATE"
        after = await _get_template(session_factory, template.template_id)
        assert after.status == TemplateStatus.PAUSED
        assert after.next_run_date == before.next_run_date
        assert after.updated_at == before.updated_at

    async def test_resume_catches_up_past_next_run_date(self, db_session, session_factory, create_template):
        template = await create_template(frequency="weekly", start_date=date(2024, 1, 1))
        await _pause(db_session).execute("tenant_int", template.template_id)

        result = await _resume(db_session, date(2024, 1, 24)).execute("tenant_int", template.template_id)

        assert result.value.next_run_date == date(2024, 1, 29)
        stored = await _get_template(session_factory, template.template_id)
        assert stored.next_run_date == date(2024, 1, 29)
        assert stored.status == TemplateStatus.ACTIVE

    async def test_resume_active_template_rejected(self, db_session, create_template):
        template = await create_template()

        result = await _resume(db_session, date(2024, 1, 15)).execute("tenant_int", template.template_id)

        assert result.error.code == "INVALID_TEMPLATE_STATE"


@pytest.mark.asyncio
class TestCreateFromInvoiceIntegration:
    """Invoice to template conversion against the database"""

    async def test_converts_paid_invoice(self, db_session, session_factory):
        invoice = await _create_invoice(db_session)

        result = await _convert(db_session).execute(
            CreateFromInvoiceCommandDTO(
                tenant_id="tenant_int",
                source_invoice_id=invoice.id,
                frequency="quarterly",
                start_date=date(2024, 2, 5),
            )
        )

        assert result.is_ok(), result.error
        response = result.value
        assert response.template_name == "Recurring: INV-00042"
        assert response.source_invoice_number == "INV-00042"
        assert response.currency == "GBP"
        assert response.discount_type == "percent"
        assert response.subtotal == Decimal("500.00")
        assert response.discount_amount == Decimal("50.00")
        assert response.total == Decimal("500.00")
        assert [item.name for item in response.items] == ["Hosting"]

        async with session_factory() as session:
            stored = (await session.execute(select(Invoice).where(Invoice.id == invoice.id))).scalar_one()
        assert stored.is_recurring_source is True
        assert stored.status == InvoiceStatus.PAID

    async def test_refunded_invoice_rejected(self, db_session, session_factory):
        """
        Given: A refunded invoice
        When: it is converted into a template
        Then: VALIDATION_ERROR and no template is created
        """
        invoice = await _create_invoice(db_session, status=InvoiceStatus.REFUNDED)

        result = await _convert(db_session).execute(
            CreateFromInvoiceCommandDTO(
                tenant_id="tenant_int",
                source_invoice_id=invoice.id,
                frequency="monthly",
                start_date=date(2024, 2, 5),
            )
        )

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert await _count_templates(session_factory, "tenant_int") == 0

    async def test_invoice_of_other_tenant_not_found(self, db_session):
        invoice = await _create_invoice(db_session, tenant_id="tenant_other")

        result = await _convert(db_session).execute(
            CreateFromInvoiceCommandDTO(
                tenant_id="tenant_int",
                source_invoice_id=invoice.id,
                frequency="monthly",
                start_date=date(2024, 2, 5),
            )
        )

        assert result.error.code == "INVOICE_NOT_FOUND"


@pytest.mark.asyncio
class TestHistoryAndDeleteIntegration:
    """Generation history and template deletion"""

    async def test_history_lists_newest_first(self, db_session, create_template, build_generate):
        template = await create_template(frequency="weekly", start_date=date(2024, 1, 1))
        use_case = build_generate(db_session, datetime(2024, 1, 1, 8, 0, 0))
        await use_case.execute("tenant_int", template.template_id)
        await use_case.execute("tenant_int", template.template_id)

        result = await ListGeneratedInvoices(
            SqlAlchemyRecurringTemplateRepository(db_session),
            SqlAlchemyInvoiceRepository(db_session),
        ).execute("tenant_int", template.template_id)

        assert [i.invoice_number for i in result.value.invoices] == ["INV-00002", "INV-00001"]
        assert all(i.total == Decimal("1200.00") for i in result.value.invoices)

    async def test_delete_unused_template(self, db_session, session_factory, create_template):
        template = await create_template()

        result = await DeleteRecurringTemplate(
            SqlAlchemyUnitOfWork(db_session),
            SqlAlchemyRecurringTemplateRepository(db_session),
            SqlAlchemyRecurringTemplateItemRepository(db_session),
            SqlAlchemyInvoiceRepository(db_session),
        ).execute("tenant_int", template.template_id)

        assert result.is_ok()
        assert await _count_templates(session_factory, "tenant_int") == 0

    async def test_delete_refused_after_generation(self, db_session, session_factory, create_template, build_generate):
        template = await create_template()
        await build_generate(db_session, datetime(2024, 1, 31, 8, 0, 0)).execute("tenant_int", template.template_id)

        result = await DeleteRecurringTemplate(
            SqlAlchemyUnitOfWork(db_session),
            SqlAlchemyRecurringTemplateRepository(db_session),
            SqlAlchemyRecurringTemplateItemRepository(db_session),
            SqlAlchemyInvoiceRepository(db_session),
        ).execute("tenant_int", template.template_id)

        assert result.error.code == "INVALID_TEMPLATE_STATE"
        assert await _count_templates(session_factory, "tenant_int") == 1


@pytest.mark.asyncio
class TestRecurringGenerationWorkerIntegration:
    """Due-template trigger against the database"""

    async def test_generates_only_due_active_templates(self, db_session, session_factory, create_template):
        due = await create_template(template_name="Due", start_date=date(2024, 3, 1))
        await create_template(template_name="Future", start_date=date(2024, 4, 1))
        paused = await create_template(template_name="Paused", start_date=date(2024, 2, 1))
        await _pause(db_session).execute("tenant_int", paused.template_id)

        worker = RecurringGenerationWorker(
            session_factory=session_factory,
            clock=lambda: datetime(2024, 3, 1, 6, 0, 0),
        )
        result = await worker.run_once()

        assert result.due_templates == 1
        assert result.generated == 1
        assert result.failed == 0
        assert result.invoices[0].template_id == due.template_id
        assert result.invoices[0].next_run_date == date(2024, 4, 1)

        # A second run on the same day finds nothing due
        again = await worker.run_once()
        assert again.due_templates == 0
        await worker.shutdown()

    async def test_template_paused_after_selection_is_skipped(
        self, db_session, session_factory, create_template
    ):
        """
        Given: A due template that is paused right after the due query picked it
        When: run_once is called
        Then: Nothing is generated; the template stays paused and unadvanced
        """
        template = await create_template(start_date=date(2024, 3, 1))
        select_due = SqlAlchemyRecurringTemplateRepository.get_due_templates

        async def select_then_pause(repo, as_of, limit=500):
            due = await select_due(repo, as_of, limit=limit)
            async with session_factory() as session:
                paused = await _pause(session).execute("tenant_int", template.template_id)
                assert paused.is_ok()
            return due

        worker = RecurringGenerationWorker(
            session_factory=session_factory,
            clock=lambda: datetime(2024, 3, 1, 6, 0, 0),
        )
        with patch.object(SqlAlchemyRecurringTemplateRepository, "get_due_templates", select_then_pause):
            result = await worker.run_once()

        assert result.due_templates == 1
        assert result.generated == 0
        assert result.skipped == 1
        stored = await _get_template(session_factory, template.template_id)
        assert stored.status == TemplateStatus.PAUSED
        assert stored.next_run_date == date(2024, 3, 1)
        assert await _count_invoices(session_factory, template.template_id) == 0

    async def test_late_run_generates_final_occurrence_and_completes(
        self, session_factory, create_template
    ):
        """
        Given: next_run_date 2024-02-15, end_date 2024-03-01, no run until 2024-03-05
        When: run_once is called as of 2024-03-05
        Then: The final occurrence is billed and the template completes
        """
        template = await create_template(start_date=date(2024, 2, 15), end_date=date(2024, 3, 1))

        worker = RecurringGenerationWorker(
            session_factory=session_factory,
            clock=lambda: datetime(2024, 3, 5, 6, 0, 0),
        )
        result = await worker.run_once()

        assert result.due_templates == 1
        assert result.generated == 1
        assert result.invoices[0].status == "completed"
        stored = await _get_template(session_factory, template.template_id)
        assert stored.status == TemplateStatus.COMPLETED
        assert stored.next_run_date == date(2024, 3, 1)

        again = await worker.run_once()
        assert again.due_templates == 0
        assert await _count_invoices(session_factory, template.template_id) == 1


@pytest.mark.asyncio
class TestScheduleEndWhilePausedIntegration:
    """A paused template reaching end_date can never bill again"""

    async def test_pause_generate_past_end_then_resume(
        self, db_session, session_factory, create_template, build_generate
    ):
        """
        Given: Paused template, next_run_date 2024-02-15, end_date 2024-03-01
        When: generate now, then resume on 2024-06-01, then generate again
        Then: First generation completes it; resume and second generation are refused
        """
        template = await create_template(start_date=date(2024, 2, 15), end_date=date(2024, 3, 1))
        await _pause(db_session).execute("tenant_int", template.template_id)

        first = await build_generate(db_session, datetime(2024, 2, 15, 9, 0, 0)).execute(
            "tenant_int", template.template_id
        )
        assert first.is_ok()
        assert first.value.status == "completed"

        resumed = await _resume(db_session, date(2024, 6, 1)).execute("tenant_int", template.template_id)
        assert resumed.error.code == "INVALID_TEMPLATE_STATE"

        second = await build_generate(db_session, datetime(2024, 6, 1, 9, 0, 0)).execute(
            "tenant_int", template.template_id
        )
        assert second.error.code == "INVALID_TEMPLATE_STATE"

        stored = await _get_template(session_factory, template.template_id)
        assert stored.status == TemplateStatus.COMPLETED
        assert stored.next_run_date == date(2024, 3, 1)
        assert await _count_invoices(session_factory, template.template_id) == 1
