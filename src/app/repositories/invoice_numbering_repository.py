"""Invoice Numbering Repository Interface

Defines the contract for the per-tenant invoice number counter.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple
from src.domain.invoice_numbering import InvoiceNumbering


class InvoiceNumberingRepository(ABC):
    """
    Repository interface for InvoiceNumbering persistence

    increment() must be a single atomic read-increment-write so that two
    concurrent transactions never observe the same sequence value.
    """

    @abstractmethod
    async def get_by_tenant_id(self, tenant_id: str) -> Optional[InvoiceNumbering]:
        """
        Retrieve the tenant's counter without locking

        Args:
            tenant_id: Tenant identifier

        Returns:
            InvoiceNumbering if initialized, None otherwise
        """
        pass

    @abstractmethod
    async def increment(self, tenant_id: str) -> Optional[Tuple[str, int]]:
        """
        Atomically advance the tenant's counter by one

        Args:
            tenant_id: Tenant identifier

        Returns:
            (prefix, sequence reserved by this call), or None if the tenant
            has no counter row yet
        """
        pass

    @abstractmethod
    async def ensure_exists(self, tenant_id: str, prefix: str) -> None:
        """
        Create the tenant's counter at sequence 1 unless it already exists

        Safe to call concurrently: losing an insert race is not an error.

        Args:
            tenant_id: Tenant identifier
            prefix: Prefix for a newly created counter
        """
        pass
