"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Optional, List, Dict
from datetime import datetime
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import Invoice


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice with generated ID
        """
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, tenant_id: str, invoice_id: int) -> Optional[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.id == invoice_id)
            .where(Invoice.tenant_id == tenant_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        invoice.updated_at = datetime.utcnow()
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def list_by_template(self, tenant_id: str, template_id: int) -> List[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.tenant_id == tenant_id)
            .where(Invoice.recurring_template_id == template_id)
            .order_by(Invoice.created_at.desc(), Invoice.id.desc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def count_by_templates(self, tenant_id: str, template_ids: List[int]) -> Dict[int, int]:
        if not template_ids:
            return {}

        statement = (
            select(Invoice.recurring_template_id, func.count())
            .where(Invoice.tenant_id == tenant_id)
            .where(Invoice.recurring_template_id.in_(template_ids))
            .group_by(Invoice.recurring_template_id)
        )
        result = await self.session.execute(statement)
        return {template_id: count for template_id, count in result.all()}
