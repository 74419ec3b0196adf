"""Recurring Template Item Repository Interface"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.recurring_template_item import RecurringTemplateItem


class RecurringTemplateItemRepository(ABC):
    """Repository interface for a template's content snapshot lines"""

    @abstractmethod
    async def get_by_template_id(self, template_id: int) -> List[RecurringTemplateItem]:
        """
        Retrieve a template's items in snapshot order

        Args:
            template_id: Template ID

        Returns:
            List of items ordered by sort_order
        """
        pass

    @abstractmethod
    async def replace_for_template(
        self, template_id: int, items: List[RecurringTemplateItem]
    ) -> List[RecurringTemplateItem]:
        """
        Replace all items of a template

        Existing items are deleted; the given items are inserted with
        template_id and sort_order assigned from their list position.

        Args:
            template_id: Template ID
            items: New snapshot lines (may be empty to clear)

        Returns:
            Persisted items
        """
        pass
