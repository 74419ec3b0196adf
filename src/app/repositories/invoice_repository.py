"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict
from src.domain.invoice import Invoice


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Lookups are tenant scoped.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice with generated ID

        Raises:
            IntegrityError: If the invoice number is already used by the tenant
        """
        pass

    @abstractmethod
    async def get_by_id(self, tenant_id: str, invoice_id: int) -> Optional[Invoice]:
        """
        Retrieve invoice by ID within a tenant

        Args:
            tenant_id: Tenant identifier
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        pass

    @abstractmethod
    async def list_by_template(self, tenant_id: str, template_id: int) -> List[Invoice]:
        """
        Retrieve invoices generated from a template, newest first

        Args:
            tenant_id: Tenant identifier
            template_id: Recurring template ID

        Returns:
            List of invoices
        """
        pass

    @abstractmethod
    async def count_by_templates(self, tenant_id: str, template_ids: List[int]) -> Dict[int, int]:
        """
        Count generated invoices per template

        Args:
            tenant_id: Tenant identifier
            template_ids: Template IDs to count for

        Returns:
            Mapping of template ID to invoice count (templates without
            invoices are omitted)
        """
        pass
