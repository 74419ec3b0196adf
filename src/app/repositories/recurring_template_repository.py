"""Recurring Template Repository Interface

Defines the contract for recurring template persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, List
from src.domain.recurring_template import RecurringTemplate, TemplateStatus


class RecurringTemplateRepository(ABC):
    """
    Repository interface for RecurringTemplate persistence

    All lookups are tenant scoped: a template of another tenant is
    indistinguishable from a missing one.
    """

    @abstractmethod
    async def create(self, template: RecurringTemplate) -> RecurringTemplate:
        """
        Create a new recurring template

        Args:
            template: RecurringTemplate entity to persist

        Returns:
            Created RecurringTemplate with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(
        self, tenant_id: str, template_id: int, for_update: bool = False
    ) -> Optional[RecurringTemplate]:
        """
        Retrieve template by ID within a tenant

        Args:
            tenant_id: Tenant identifier
            template_id: Template ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            RecurringTemplate if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_tenant(
        self, tenant_id: str, status: Optional[TemplateStatus] = None
    ) -> List[RecurringTemplate]:
        """
        Retrieve a tenant's templates, newest first

        Args:
            tenant_id: Tenant identifier
            status: Optional filter by status

        Returns:
            List of templates
        """
        pass

    @abstractmethod
    async def update(self, template: RecurringTemplate) -> RecurringTemplate:
        """
        Persist changes to an existing template

        Args:
            template: RecurringTemplate entity with updated values

        Returns:
            Updated RecurringTemplate
        """
        pass

    @abstractmethod
    async def delete(self, template: RecurringTemplate) -> None:
        pass

    @abstractmethod
    async def get_due_templates(self, as_of: date, limit: int = 500) -> List[RecurringTemplate]:
        """
        Retrieve active templates whose next occurrence is due

        Due means next_run_date <= as_of and that occurrence is still within the
        schedule (end_date is None or next_run_date <= end_date), so a late run
        still picks up the final occurrence. Spans all tenants.

        Args:
            as_of: Reference date
            limit: Maximum number of templates to return

        Returns:
            List of due templates ordered by next_run_date
        """
        pass
