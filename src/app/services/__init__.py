from .unit_of_work import UnitOfWork
from .numbering_authority import NumberingAuthority, ReservedNumber, format_invoice_number

__all__ = [
    "UnitOfWork",
    "NumberingAuthority",
    "ReservedNumber",
    "format_invoice_number",
]
