"""Recurring Invoice API Routes

FastAPI routes for recurring invoice templates: CRUD, lifecycle
operations (pause, resume), on-demand generation and generation history.

The caller's tenant arrives in the X-Tenant-ID header; tenant resolution
and authorization happen upstream.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Header, Query, status
from fastapi.responses import Response
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.api.schemas.recurring_request import (
    CreateTemplateRequestSchema,
    UpdateTemplateRequestSchema,
    CreateFromInvoiceRequestSchema,
)
from src.app.services.numbering_authority import NumberingAuthority
from src.app.use_cases.recurring import (
    CreateRecurringTemplate,
    UpdateRecurringTemplate,
    PauseRecurringTemplate,
    ResumeRecurringTemplate,
    GenerateInvoiceFromTemplate,
    CreateTemplateFromInvoice,
    ListGeneratedInvoices,
    GetRecurringTemplate,
    ListRecurringTemplates,
    DeleteRecurringTemplate,
    PreviewInvoiceNumber,
    CreateTemplateCommandDTO,
    UpdateTemplateCommandDTO,
    CreateFromInvoiceCommandDTO,
    TemplateResponseDTO,
    TemplateListResponseDTO,
    GenerateInvoiceResponseDTO,
    GeneratedInvoiceListResponseDTO,
    InvoiceNumberPreviewDTO,
)
from src.app.use_cases.recurring.errors import (
    VALIDATION_ERROR,
    INVALID_TEMPLATE_STATE,
    PERSISTENCE_FAILURE,
    NOT_FOUND_CODES,
)
from src.adapter.repositories.recurring_template_repository import SqlAlchemyRecurringTemplateRepository
from src.adapter.repositories.recurring_template_item_repository import SqlAlchemyRecurringTemplateItemRepository
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.invoice_line_repository import SqlAlchemyInvoiceLineRepository
from src.adapter.repositories.invoice_numbering_repository import SqlAlchemyInvoiceNumberingRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.api.error import ClientError

router = APIRouter(prefix="/billing/recurring-invoices", tags=["Recurring Invoices"])

ERROR_STATUS = {
    VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    INVALID_TEMPLATE_STATE: status.HTTP_409_CONFLICT,
    PERSISTENCE_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

NOT_FOUND_RESPONSE = {
    404: {
        "description": "Template not found",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "TEMPLATE_NOT_FOUND",
                        "message": "Recurring template 3 not found"
                    }
                }
            }
        }
    }
}

INVALID_STATE_RESPONSE = {
    409: {
        "description": "Illegal lifecycle transition",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INVALID_TEMPLATE_STATE",
                        "message": "Only active templates can be paused"
                    }
                }
            }
        }
    }
}


def raise_client_error(error: Error):
    if error.code in NOT_FOUND_CODES:
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    raise ClientError(error, status_code=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST))


def get_tenant_id(x_tenant_id: str = Header(..., alias="X-Tenant-ID", min_length=1)) -> str:
    return x_tenant_id


def numbering_authority(session: AsyncSession) -> NumberingAuthority:
    return NumberingAuthority(
        SqlAlchemyInvoiceNumberingRepository(session),
        default_prefix=ApplicationConfig.DEFAULT_INVOICE_PREFIX,
        width=ApplicationConfig.INVOICE_NUMBER_WIDTH,
    )


@router.post(
    "",
    response_model=TemplateResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Validation error",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "Template name, frequency, and start date are required"
                        }
                    }
                }
            }
        }
    }
)
async def create_template(
    request: CreateTemplateRequestSchema,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Create a recurring invoice template.

    **Request body:**
    - `template_name`, `frequency`, `start_date` (required)
    - `items` (required, at least one): name, quantity, unit_price, tax_rate
    - `end_date`, `discount_type`, `discount_value`, `notes`, `payment_terms` (optional)

    **Returns:**
    - 201: Template created, active, next_run_date = start_date
    - 400: Missing schedule fields, unsupported frequency or no line items
    """
    use_case = CreateRecurringTemplate(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRecurringTemplateRepository(session),
        SqlAlchemyRecurringTemplateItemRepository(session),
        default_currency=ApplicationConfig.DEFAULT_CURRENCY,
    )
    command = CreateTemplateCommandDTO(tenant_id=tenant_id, **request.model_dump())
    result = await use_case.execute(command)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.get(
    "",
    response_model=TemplateListResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_templates(
    status_filter: Optional[str] = Query(default=None, alias="status", description="active, paused, completed or all"),
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    List the tenant's recurring templates, newest first.
    """
    use_case = ListRecurringTemplates(
        SqlAlchemyRecurringTemplateRepository(session),
        SqlAlchemyInvoiceRepository(session),
    )
    result = await use_case.execute(tenant_id, status=status_filter)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.get(
    "/next-number",
    response_model=InvoiceNumberPreviewDTO,
    status_code=status.HTTP_200_OK,
)
async def preview_next_invoice_number(
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Show the invoice number the next generation would receive (nothing is reserved).
    """
    result = await PreviewInvoiceNumber(numbering_authority(session)).execute(tenant_id)
    return result.value


@router.post(
    "/from-invoice/{invoice_id}",
    response_model=TemplateResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {
            "description": "Source invoice not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVOICE_NOT_FOUND",
                            "message": "Invoice 12 not found"
                        }
                    }
                }
            }
        }
    }
)
async def create_template_from_invoice(
    invoice_id: int,
    request: CreateFromInvoiceRequestSchema,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Convert an existing invoice into a recurring template.

    The invoice's lines, discount, notes and payment terms become the
    template's snapshot. Cancelled or refunded invoices are rejected.
    """
    use_case = CreateTemplateFromInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRecurringTemplateRepository(session),
        SqlAlchemyRecurringTemplateItemRepository(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
    )
    command = CreateFromInvoiceCommandDTO(
        tenant_id=tenant_id,
        source_invoice_id=invoice_id,
        **request.model_dump(),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.get(
    "/{template_id}",
    response_model=TemplateResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=NOT_FOUND_RESPONSE,
)
async def get_template(
    template_id: int,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Get a recurring template with its line items and generation count.
    """
    use_case = GetRecurringTemplate(
        SqlAlchemyRecurringTemplateRepository(session),
        SqlAlchemyRecurringTemplateItemRepository(session),
        SqlAlchemyInvoiceRepository(session),
    )
    result = await use_case.execute(tenant_id, template_id)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.patch(
    "/{template_id}",
    response_model=TemplateResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={**NOT_FOUND_RESPONSE, **INVALID_STATE_RESPONSE},
)
async def update_template(
    template_id: int,
    request: UpdateTemplateRequestSchema,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Partially update a recurring template.

    Totals are recomputed when `items`, `discount_type` or `discount_value`
    are sent. Completed templates cannot be edited.
    """
    use_case = UpdateRecurringTemplate(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRecurringTemplateRepository(session),
        SqlAlchemyRecurringTemplateItemRepository(session),
        SqlAlchemyInvoiceRepository(session),
    )
    command = UpdateTemplateCommandDTO(
        tenant_id=tenant_id,
        template_id=template_id,
        **request.model_dump(exclude_unset=True),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.delete(
    "/{template_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**NOT_FOUND_RESPONSE, **INVALID_STATE_RESPONSE},
)
async def delete_template(
    template_id: int,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Delete a template that has not generated any invoice yet.
    """
    use_case = DeleteRecurringTemplate(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRecurringTemplateRepository(session),
        SqlAlchemyRecurringTemplateItemRepository(session),
        SqlAlchemyInvoiceRepository(session),
    )
    result = await use_case.execute(tenant_id, template_id)

    if result.is_err():
        raise_client_error(result.error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{template_id}/pause",
    response_model=TemplateResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={**NOT_FOUND_RESPONSE, **INVALID_STATE_RESPONSE},
)
async def pause_template(
    template_id: int,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Pause an active template.
    """
    use_case = PauseRecurringTemplate(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRecurringTemplateRepository(session),
        SqlAlchemyRecurringTemplateItemRepository(session),
    )
    result = await use_case.execute(tenant_id, template_id)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.post(
    "/{template_id}/resume",
    response_model=TemplateResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={**NOT_FOUND_RESPONSE, **INVALID_STATE_RESPONSE},
)
async def resume_template(
    template_id: int,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Resume a paused template.

    A next_run_date left in the past is caught up to today in one jump.
    """
    use_case = ResumeRecurringTemplate(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRecurringTemplateRepository(session),
        SqlAlchemyRecurringTemplateItemRepository(session),
    )
    result = await use_case.execute(tenant_id, template_id)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.post(
    "/{template_id}/generate",
    response_model=GenerateInvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        **NOT_FOUND_RESPONSE,
        409: {
            "description": "Template is completed",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_TEMPLATE_STATE",
                            "message": "Cannot generate invoice from a completed template"
                        }
                    }
                }
            }
        },
        503: {
            "description": "Transaction rolled back; safe to retry",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PERSISTENCE_FAILURE",
                            "message": "Failed to generate invoice from recurring template"
                        }
                    }
                }
            }
        }
    }
)
async def generate_invoice_now(
    template_id: int,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Generate one invoice from the template now.

    Not date gated and not idempotent: every successful call creates an
    invoice, consumes one invoice number and advances the schedule once.

    **Example response:**
    ```json
    {
      "invoice_id": 42,
      "invoice_number": "INV-00007",
      "template_id": 3,
      "next_run_date": "2024-02-29",
      "status": "active"
    }
    ```
    """
    use_case = GenerateInvoiceFromTemplate(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRecurringTemplateRepository(session),
        SqlAlchemyRecurringTemplateItemRepository(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        numbering_authority(session),
        default_payment_terms_days=ApplicationConfig.DEFAULT_PAYMENT_TERMS_DAYS,
    )
    result = await use_case.execute(tenant_id, template_id)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.get(
    "/{template_id}/invoices",
    response_model=GeneratedInvoiceListResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=NOT_FOUND_RESPONSE,
)
async def list_generated_invoices(
    template_id: int,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Invoices generated from the template, newest first.
    """
    use_case = ListGeneratedInvoices(
        SqlAlchemyRecurringTemplateRepository(session),
        SqlAlchemyInvoiceRepository(session),
    )
    result = await use_case.execute(tenant_id, template_id)

    if result.is_err():
        raise_client_error(result.error)

    return result.value
