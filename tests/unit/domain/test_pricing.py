"""Unit tests for line and document pricing"""

from decimal import Decimal
from src.domain.pricing import DiscountType, line_amounts, discount_amount, document_totals
from src.domain.recurring_template_item import RecurringTemplateItem


def _item(quantity, unit_price, tax_rate):
    return RecurringTemplateItem(
        name="Line",
        quantity=Decimal(quantity),
        unit_price=Decimal(unit_price),
        tax_rate=Decimal(tax_rate),
    )


class TestLineAmounts:
    """Test per-line tax computation"""

    def test_tax_is_percentage_of_net(self):
        amounts = line_amounts(Decimal("2"), Decimal("50.00"), Decimal("20"))

        assert amounts.net == Decimal("100.00")
        assert amounts.tax == Decimal("20.00")
        assert amounts.total == Decimal("120.00")

    def test_rounds_half_up_to_cents(self):
        amounts = line_amounts(Decimal("1"), Decimal("0.25"), Decimal("10"))

        assert amounts.tax == Decimal("0.03")

    def test_missing_tax_rate_means_zero(self):
        amounts = line_amounts(Decimal("3"), Decimal("10"), None)

        assert amounts.tax == Decimal("0.00")
        assert amounts.total == Decimal("30.00")


class TestDiscountAmount:
    """Test discount policies"""

    def test_percent_discount(self):
        assert discount_amount(Decimal("200.00"), DiscountType.PERCENT, Decimal("10")) == Decimal("20.00")

    def test_fixed_discount(self):
        assert discount_amount(Decimal("200.00"), DiscountType.FIXED, Decimal("15.5")) == Decimal("15.50")

    def test_no_discount(self):
        assert discount_amount(Decimal("200.00"), DiscountType.NONE, Decimal("10")) == Decimal("0")

    def test_zero_value_ignored(self):
        assert discount_amount(Decimal("200.00"), DiscountType.PERCENT, Decimal("0")) == Decimal("0")


class TestDocumentTotals:
    """Test document totals over several lines"""

    def test_total_is_subtotal_plus_tax_minus_discount(self):
        items = [_item("1", "1000.00", "20"), _item("2", "50.00", "0")]

        totals = document_totals(items, DiscountType.PERCENT, Decimal("10"))

        assert totals.subtotal == Decimal("1100.00")
        assert totals.tax_amount == Decimal("200.00")
        assert totals.discount_amount == Decimal("110.00")
        assert totals.total == Decimal("1190.00")

    def test_empty_items_total_zero(self):
        totals = document_totals([])

        assert totals.total == Decimal("0.00")
