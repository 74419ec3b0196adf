"""Recurring Invoice Generation Background Worker

Finds active templates whose next_run_date has arrived and runs the
generation use case once per due template. This is the outside trigger for
scheduled generation; each template gets its own session and transaction.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
import time
from datetime import date, datetime
from typing import Callable, Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.recurring_template_repository import SqlAlchemyRecurringTemplateRepository
from src.adapter.repositories.recurring_template_item_repository import SqlAlchemyRecurringTemplateItemRepository
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.invoice_line_repository import SqlAlchemyInvoiceLineRepository
from src.adapter.repositories.invoice_numbering_repository import SqlAlchemyInvoiceNumberingRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.numbering_authority import NumberingAuthority
from src.app.use_cases.recurring.errors import INVALID_TEMPLATE_STATE
from src.app.use_cases.recurring import (
    GenerateInvoiceFromTemplate,
    RecurringGenerationResultDTO,
)

logger = logging.getLogger(__name__)


class RecurringGenerationWorker:
    """
    Background worker for scheduled recurring invoice generation

    Features:
    - Selects active templates with next_run_date <= as_of whose pending
      occurrence is still within end_date
    - Re-checks each template on its locked row before generating; one
      paused or advanced since selection is skipped
    - One generation per due template per run; a template several periods
      behind catches up one period per run
    - Failures are logged and counted, never retried within the run
    - Can run once or continuously

    Usage:
        # Run once for today (typical cron usage)
        worker = RecurringGenerationWorker()
        result = await worker.run_once()

        # Run once as of a given date
        result = await worker.run_once(as_of=date(2024, 3, 1))

        # Run continuously
        await worker.run_forever()
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        session_factory: Optional[sessionmaker] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            session_factory: Existing session factory to reuse instead of
                creating an engine
            clock: Source of "now" for generation timestamps and due dates
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.clock = clock or datetime.utcnow

        if session_factory is not None:
            self.engine = None
            self.async_session_factory = session_factory
        else:
            self.engine = create_async_engine(self.db_uri, echo=False, future=True)
            self.async_session_factory = sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
            )

        logger.info("RecurringGenerationWorker initialized")

    def _build_use_case(self, session: AsyncSession) -> GenerateInvoiceFromTemplate:
        return GenerateInvoiceFromTemplate(
            uow=SqlAlchemyUnitOfWork(session),
            template_repo=SqlAlchemyRecurringTemplateRepository(session),
            template_item_repo=SqlAlchemyRecurringTemplateItemRepository(session),
            invoice_repo=SqlAlchemyInvoiceRepository(session),
            invoice_line_repo=SqlAlchemyInvoiceLineRepository(session),
            numbering_authority=NumberingAuthority(
                SqlAlchemyInvoiceNumberingRepository(session),
                default_prefix=ApplicationConfig.DEFAULT_INVOICE_PREFIX,
                width=ApplicationConfig.INVOICE_NUMBER_WIDTH,
            ),
            default_payment_terms_days=ApplicationConfig.DEFAULT_PAYMENT_TERMS_DAYS,
            clock=self.clock,
        )

    async def run_once(self, as_of: Optional[date] = None, limit: int = 500) -> RecurringGenerationResultDTO:
        """
        Generate one invoice for every template due on as_of

        Args:
            as_of: Reference date (defaults to today)
            limit: Maximum number of templates processed in this run

        Returns:
            RecurringGenerationResultDTO with summary
        """
        start_time = time.time()
        as_of = as_of or self.clock().date()

        logger.info(f"Starting recurring invoice generation as of {as_of}")

        async with self.async_session_factory() as session:
            template_repo = SqlAlchemyRecurringTemplateRepository(session)
            due = [
                (template.tenant_id, template.id)
                for template in await template_repo.get_due_templates(as_of, limit=limit)
            ]

        logger.info(f"Found {len(due)} due recurring templates")

        generated = []
        failed = 0
        skipped = 0

        for tenant_id, template_id in due:
            try:
                # Separate session per template to isolate transactions
                async with self.async_session_factory() as template_session:
                    use_case = self._build_use_case(template_session)
                    result = await use_case.execute(tenant_id, template_id, as_of=as_of)

                if result.is_err() and result.error.code == INVALID_TEMPLATE_STATE:
                    logger.info(
                        f"Skipped template {template_id} for tenant {tenant_id}: {result.error.reason}"
                    )
                    skipped += 1
                    continue

                if result.is_err():
                    logger.error(
                        f"Failed to generate invoice from template {template_id} "
                        f"for tenant {tenant_id}: [{result.error.code}] {result.error.message}"
                    )
                    failed += 1
                    continue

                generated.append(result.value)

            except Exception as e:
                logger.error(
                    f"Unexpected error processing template {template_id} for tenant {tenant_id}: {e}"
                )
                failed += 1

        execution_time_ms = int((time.time() - start_time) * 1000)

        result = RecurringGenerationResultDTO(
            as_of=as_of,
            due_templates=len(due),
            generated=len(generated),
            failed=failed,
            skipped=skipped,
            invoices=generated,
            execution_time_ms=execution_time_ms,
        )

        logger.info(
            f"Recurring generation complete: "
            f"{result.generated}/{result.due_templates} generated, "
            f"{result.failed} failed, "
            f"{result.skipped} skipped, "
            f"{execution_time_ms}ms"
        )

        return result

    async def run_forever(self, check_interval_seconds: Optional[int] = None):
        """
        Run generation continuously

        Args:
            check_interval_seconds: Seconds between runs
                (default: ApplicationConfig.RECURRING_GENERATION_INTERVAL_SECONDS)
        """
        interval = check_interval_seconds or ApplicationConfig.RECURRING_GENERATION_INTERVAL_SECONDS

        logger.info(f"Starting continuous recurring generation with {interval}s interval")

        while True:
            try:
                if ApplicationConfig.RECURRING_GENERATION_ENABLED:
                    await self.run_once()
                else:
                    logger.debug("Recurring generation disabled, skipping run")

            except Exception as e:
                logger.error(f"Recurring generation cycle failed: {e}")

            await asyncio.sleep(interval)

    async def shutdown(self):
        """Cleanup resources"""
        if self.engine is not None:
            await self.engine.dispose()
        logger.info("RecurringGenerationWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Generate everything due today
        python -m src.worker.recurring_generation

        # Generate everything due on a given date
        python -m src.worker.recurring_generation --as-of 2024-03-01

        # Run continuously
        python -m src.worker.recurring_generation --continuous
    """
    import argparse

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Recurring Invoice Generation Worker")
    parser.add_argument("--as-of", type=date.fromisoformat, help="Reference date (YYYY-MM-DD)")
    parser.add_argument(
        "--continuous", action="store_true", help="Run continuously"
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=ApplicationConfig.RECURRING_GENERATION_INTERVAL_SECONDS,
        help="Seconds between runs in continuous mode",
    )
    args = parser.parse_args()

    worker = RecurringGenerationWorker()

    try:
        if args.continuous:
            await worker.run_forever(check_interval_seconds=args.interval)
        else:
            result = await worker.run_once(as_of=args.as_of)
            print(f"Recurring generation complete:")
            print(f"  As of: {result.as_of}")
            print(f"  Due templates: {result.due_templates}")
            print(f"  Generated: {result.generated}")
            print(f"  Failed: {result.failed}")
            print(f"  Execution time: {result.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
