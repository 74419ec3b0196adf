"""SQLAlchemy Recurring Template Repository Implementation

Implements recurring template persistence using SQLAlchemy async session.
"""

from datetime import date, datetime
from typing import Optional, List
from sqlalchemy import or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.recurring_template_repository import RecurringTemplateRepository
from src.domain.recurring_template import RecurringTemplate, TemplateStatus


class SqlAlchemyRecurringTemplateRepository(RecurringTemplateRepository):
    """
    SQLAlchemy implementation of RecurringTemplateRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE for lifecycle and generation
    - Tenant scoped lookups
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, template: RecurringTemplate) -> RecurringTemplate:
        self.session.add(template)
        await self.session.flush()
        await self.session.refresh(template)
        return template

    async def get_by_id(
        self, tenant_id: str, template_id: int, for_update: bool = False
    ) -> Optional[RecurringTemplate]:
        """
        Retrieve template by ID with optional row-level locking

        Args:
            tenant_id: Tenant identifier
            template_id: Template ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            RecurringTemplate if found, None otherwise
        """
        stmt = (
            select(RecurringTemplate)
            .where(RecurringTemplate.id == template_id)
            .where(RecurringTemplate.tenant_id == tenant_id)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_tenant(
        self, tenant_id: str, status: Optional[TemplateStatus] = None
    ) -> List[RecurringTemplate]:
        stmt = select(RecurringTemplate).where(RecurringTemplate.tenant_id == tenant_id)

        if status:
            stmt = stmt.where(RecurringTemplate.status == status)

        stmt = stmt.order_by(RecurringTemplate.created_at.desc(), RecurringTemplate.id.desc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, template: RecurringTemplate) -> RecurringTemplate:
        template.updated_at = datetime.utcnow()
        self.session.add(template)
        await self.session.flush()
        await self.session.refresh(template)
        return template

    async def delete(self, template: RecurringTemplate) -> None:
        await self.session.delete(template)
        await self.session.flush()

    async def get_due_templates(self, as_of: date, limit: int = 500) -> List[RecurringTemplate]:
        stmt = (
            select(RecurringTemplate)
            .where(RecurringTemplate.status == TemplateStatus.ACTIVE)
            .where(RecurringTemplate.next_run_date <= as_of)
            .where(
                or_(
                    RecurringTemplate.end_date.is_(None),
                    RecurringTemplate.next_run_date <= RecurringTemplate.end_date,
                )
            )
            .order_by(RecurringTemplate.next_run_date, RecurringTemplate.id)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
