"""SQLAlchemy implementation of InvoiceNumberingRepository

The counter is advanced with a single UPDATE ... RETURNING statement, so
the read and the increment cannot interleave with another transaction.
The updated row stays locked until the surrounding transaction ends.
"""

import logging
from datetime import datetime
from typing import Optional, Tuple
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_numbering_repository import InvoiceNumberingRepository
from src.domain.invoice_numbering import InvoiceNumbering

logger = logging.getLogger(__name__)


class SqlAlchemyInvoiceNumberingRepository(InvoiceNumberingRepository):
    """
    SQLAlchemy implementation of InvoiceNumberingRepository

    Features:
    - Atomic increment via UPDATE ... RETURNING (PostgreSQL, SQLite >= 3.35)
    - First-use initialization inside a savepoint
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_tenant_id(self, tenant_id: str) -> Optional[InvoiceNumbering]:
        # increment() bypasses the identity map, so refresh any cached row
        stmt = (
            select(InvoiceNumbering)
            .where(InvoiceNumbering.tenant_id == tenant_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def increment(self, tenant_id: str) -> Optional[Tuple[str, int]]:
        stmt = (
            update(InvoiceNumbering)
            .where(InvoiceNumbering.tenant_id == tenant_id)
            .values(
                next_sequence=InvoiceNumbering.next_sequence + 1,
                updated_at=datetime.utcnow(),
            )
            .returning(InvoiceNumbering.prefix, InvoiceNumbering.next_sequence)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None

        prefix, next_sequence = row
        return prefix, next_sequence - 1

    async def ensure_exists(self, tenant_id: str, prefix: str) -> None:
        try:
            async with self.session.begin_nested():
                self.session.add(InvoiceNumbering(tenant_id=tenant_id, prefix=prefix, next_sequence=1))
        except IntegrityError:
            # Another transaction initialized the counter first
            logger.debug(f"Invoice numbering for tenant {tenant_id} already initialized")
