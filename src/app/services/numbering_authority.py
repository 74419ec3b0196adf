"""Numbering Authority

Issues per-tenant invoice numbers. A reservation is only durable once the
caller's transaction commits; rolling back returns the number to the pool,
so failed attempts never burn a number.
"""

from dataclasses import dataclass
from src.app.repositories.invoice_numbering_repository import InvoiceNumberingRepository


@dataclass(frozen=True)
class ReservedNumber:
    invoice_number: str
    sequence: int


def format_invoice_number(prefix: str, sequence: int, width: int = 5) -> str:
    return f"{prefix}{str(sequence).zfill(width)}"


class NumberingAuthority:
    """
    Per-tenant monotonic invoice numbering

    Business Rules:
    1. A tenant without a counter starts at sequence 1 with the default prefix
    2. Numbers are prefix + zero-padded sequence (width 5 by default)
    3. Each reservation increments the stored counter atomically in the
       caller's transaction; concurrent reservations never share a value
    4. No in-process caching: the database row is the only source of truth
    """

    def __init__(
        self,
        numbering_repo: InvoiceNumberingRepository,
        default_prefix: str = "INV-",
        width: int = 5,
    ):
        self.numbering_repo = numbering_repo
        self.default_prefix = default_prefix
        self.width = width

    async def reserve_next(self, tenant_id: str) -> ReservedNumber:
        """
        Reserve the tenant's next invoice number

        Must run inside the unit of work that consumes the number.

        Args:
            tenant_id: Tenant identifier

        Returns:
            ReservedNumber with formatted number and raw sequence
        """
        reserved = await self.numbering_repo.increment(tenant_id)

        if reserved is None:
            await self.numbering_repo.ensure_exists(tenant_id, self.default_prefix)
            reserved = await self.numbering_repo.increment(tenant_id)

        if reserved is None:
            raise RuntimeError(f"Invoice numbering could not be initialized for tenant {tenant_id}")

        prefix, sequence = reserved
        return ReservedNumber(
            invoice_number=format_invoice_number(prefix or self.default_prefix, sequence, self.width),
            sequence=sequence,
        )

    async def preview_next(self, tenant_id: str) -> ReservedNumber:
        """Number the next reservation would receive; reserves nothing"""
        numbering = await self.numbering_repo.get_by_tenant_id(tenant_id)

        if numbering is None:
            prefix, sequence = self.default_prefix, 1
        else:
            prefix, sequence = numbering.prefix or self.default_prefix, numbering.next_sequence

        return ReservedNumber(
            invoice_number=format_invoice_number(prefix, sequence, self.width),
            sequence=sequence,
        )
