"""Error codes for recurring invoice use cases

VALIDATION_ERROR and INVALID_TEMPLATE_STATE mean nothing happened and the
input must change. *_NOT_FOUND means the referenced record does not exist
for the tenant. PERSISTENCE_FAILURE means nothing happened and the whole
operation may be retried.
"""

from libs.result import Error

VALIDATION_ERROR = "VALIDATION_ERROR"
TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
INVOICE_NOT_FOUND = "INVOICE_NOT_FOUND"
INVALID_TEMPLATE_STATE = "INVALID_TEMPLATE_STATE"
PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"

NOT_FOUND_CODES = frozenset({TEMPLATE_NOT_FOUND, INVOICE_NOT_FOUND})


def validation_error(message: str, reason: str = "Invalid input") -> Error:
    return Error(code=VALIDATION_ERROR, message=message, reason=reason)


def template_not_found(tenant_id: str, template_id: int) -> Error:
    return Error(
        code=TEMPLATE_NOT_FOUND,
        message=f"Recurring template {template_id} not found",
        reason=f"No template {template_id} for tenant {tenant_id}",
    )


def invoice_not_found(tenant_id: str, invoice_id: int) -> Error:
    return Error(
        code=INVOICE_NOT_FOUND,
        message=f"Invoice {invoice_id} not found",
        reason=f"No invoice {invoice_id} for tenant {tenant_id}",
    )


def invalid_state(message: str, reason: str) -> Error:
    return Error(code=INVALID_TEMPLATE_STATE, message=message, reason=reason)


def persistence_failure(message: str, exc: Exception) -> Error:
    return Error(
        code=PERSISTENCE_FAILURE,
        message=message,
        reason=str(exc) or exc.__class__.__name__,
        retryable=True,
    )
