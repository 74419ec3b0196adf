"""Input checks shared by recurring template use cases

Each check returns an Error describing the first problem found, or None.
"""

from datetime import date
from typing import Optional, List
from libs.result import Error
from src.domain.pricing import DiscountType
from src.domain.recurring_template_item import RecurringTemplateItem
from src.domain.schedule import Frequency
from .dtos import TemplateItemDTO
from .errors import validation_error


def check_frequency(frequency: Optional[str]) -> Optional[Error]:
    allowed = [f.value for f in Frequency]
    if not frequency or str(frequency).lower() not in allowed:
        return validation_error(
            f"Invalid frequency. Must be one of: {', '.join(allowed)}",
            reason=f"frequency={frequency!r}",
        )
    return None


def check_schedule(
    template_name: Optional[str],
    frequency: Optional[str],
    start_date: Optional[date],
    end_date: Optional[date] = None,
) -> Optional[Error]:
    if not template_name or not template_name.strip() or not frequency or not start_date:
        return validation_error(
            "Template name, frequency, and start date are required",
            reason="Missing required schedule fields",
        )

    error = check_frequency(frequency)
    if error:
        return error

    if end_date is not None and end_date < start_date:
        return validation_error(
            "End date cannot be before start date",
            reason=f"start_date={start_date}, end_date={end_date}",
        )
    return None


def check_items(items: Optional[List[TemplateItemDTO]]) -> Optional[Error]:
    if not items:
        return validation_error("At least one line item is required", reason="Empty line item list")

    for position, item in enumerate(items):
        if not item.name or not item.name.strip():
            return validation_error(
                f"Line item {position + 1} must have a name",
                reason="Blank line item name",
            )
    return None


def check_discount_type(discount_type: Optional[str]) -> Optional[Error]:
    if discount_type is None:
        return None
    allowed = [d.value for d in DiscountType]
    if str(discount_type).lower() not in allowed:
        return validation_error(
            f"Invalid discount type. Must be one of: {', '.join(allowed)}",
            reason=f"discount_type={discount_type!r}",
        )
    return None


def to_discount_type(discount_type: Optional[str]) -> DiscountType:
    if not discount_type:
        return DiscountType.NONE
    return DiscountType(str(discount_type).lower())


def to_template_items(items: List[TemplateItemDTO]) -> List[RecurringTemplateItem]:
    return [
        RecurringTemplateItem(
            name=item.name.strip(),
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
            tax_rate=item.tax_rate,
            product_id=item.product_id,
            sort_order=position,
        )
        for position, item in enumerate(items)
    ]
