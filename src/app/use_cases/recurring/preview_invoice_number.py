"""PreviewInvoiceNumber Use Case"""

from libs.result import Result, Return
from src.app.services.numbering_authority import NumberingAuthority
from .dtos import InvoiceNumberPreviewDTO


class PreviewInvoiceNumber:
    """
    Shows the number the tenant's next generated invoice would receive.

    Nothing is reserved, so a concurrent generation may still take it.
    """

    def __init__(self, numbering_authority: NumberingAuthority):
        self.numbering_authority = numbering_authority

    async def execute(self, tenant_id: str) -> Result[InvoiceNumberPreviewDTO]:
        preview = await self.numbering_authority.preview_next(tenant_id)
        return Return.ok(InvoiceNumberPreviewDTO(tenant_id=tenant_id, invoice_number=preview.invoice_number))
