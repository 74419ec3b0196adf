"""Line item and discount arithmetic

Pure calculation shared by template totals and generated invoice lines.
Amounts are quantized to cents with ROUND_HALF_UP.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Iterable, Optional, Protocol

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")


class DiscountType(str, Enum):
    """Discount policy applied to a template subtotal"""
    NONE = "none"
    FIXED = "fixed"
    PERCENT = "percent"


class PricedItem(Protocol):
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal


@dataclass(frozen=True)
class LineAmounts:
    net: Decimal
    tax: Decimal
    total: Decimal


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total: Decimal


def quantize(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def line_amounts(quantity: Decimal, unit_price: Decimal, tax_rate: Optional[Decimal]) -> LineAmounts:
    """tax_rate is a percentage (e.g. 20 for 20%)"""
    net = Decimal(quantity) * Decimal(unit_price)
    tax = net * Decimal(tax_rate or 0) / HUNDRED
    return LineAmounts(net=quantize(net), tax=quantize(tax), total=quantize(net + tax))


def discount_amount(
    subtotal: Decimal,
    discount_type: Optional[DiscountType],
    discount_value: Optional[Decimal],
) -> Decimal:
    if not discount_value or discount_value <= 0:
        return ZERO
    if discount_type == DiscountType.PERCENT:
        return quantize(subtotal * Decimal(discount_value) / HUNDRED)
    if discount_type == DiscountType.FIXED:
        return quantize(Decimal(discount_value))
    return ZERO


def document_totals(
    items: Iterable[PricedItem],
    discount_type: Optional[DiscountType] = None,
    discount_value: Optional[Decimal] = None,
) -> DocumentTotals:
    """
    Compute subtotal, tax, discount and total for a set of line items

    total = subtotal + tax_amount - discount_amount
    """
    subtotal = ZERO
    tax_amount = ZERO
    for item in items:
        amounts = line_amounts(item.quantity, item.unit_price, item.tax_rate)
        subtotal += amounts.net
        tax_amount += amounts.tax

    discount = discount_amount(subtotal, discount_type, discount_value)
    return DocumentTotals(
        subtotal=quantize(subtotal),
        tax_amount=quantize(tax_amount),
        discount_amount=discount,
        total=quantize(subtotal + tax_amount - discount),
    )
