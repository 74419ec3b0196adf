"""SQLAlchemy Recurring Template Item Repository Implementation"""

from typing import List
from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.recurring_template_item_repository import RecurringTemplateItemRepository
from src.domain.recurring_template_item import RecurringTemplateItem


class SqlAlchemyRecurringTemplateItemRepository(RecurringTemplateItemRepository):
    """
    SQLAlchemy implementation of RecurringTemplateItemRepository
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_template_id(self, template_id: int) -> List[RecurringTemplateItem]:
        statement = (
            select(RecurringTemplateItem)
            .where(RecurringTemplateItem.template_id == template_id)
            .order_by(RecurringTemplateItem.sort_order, RecurringTemplateItem.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def replace_for_template(
        self, template_id: int, items: List[RecurringTemplateItem]
    ) -> List[RecurringTemplateItem]:
        await self.session.execute(
            delete(RecurringTemplateItem).where(RecurringTemplateItem.template_id == template_id)
        )

        for position, item in enumerate(items):
            item.template_id = template_id
            item.sort_order = position
            self.session.add(item)

        await self.session.flush()
        return items
