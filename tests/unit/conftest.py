import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.domain.pricing import DiscountType
from src.domain.recurring_template import RecurringTemplate, TemplateStatus
from src.domain.recurring_template_item import RecurringTemplateItem
from src.domain.schedule import Frequency


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def fixed_now():
    return datetime(2024, 3, 10, 9, 30, 0)


@pytest.fixture
def clock(fixed_now):
    return lambda: fixed_now


@pytest.fixture
def sample_template():
    """Active monthly template: 1000.00 + 20% tax, no discount"""
    return RecurringTemplate(
        id=3,
        tenant_id="tenant_123",
        template_name="Monthly retainer",
        contact_id=7,
        customer_name="Acme Ltd",
        customer_email="billing@acme.test",
        frequency=Frequency.MONTHLY,
        start_date=date(2024, 1, 31),
        end_date=None,
        next_run_date=date(2024, 1, 31),
        status=TemplateStatus.ACTIVE,
        subtotal=Decimal("1000.00"),
        tax_amount=Decimal("200.00"),
        discount_type=DiscountType.NONE,
        discount_value=Decimal("0"),
        discount_amount=Decimal("0"),
        total=Decimal("1200.00"),
        currency="USD",
        payment_terms=14,
        created_at=datetime(2024, 1, 1),
        updated_at=datetime(2024, 1, 1),
    )


@pytest.fixture
def sample_items():
    return [
        RecurringTemplateItem(
            id=11,
            template_id=3,
            name="Retainer",
            quantity=Decimal("1"),
            unit_price=Decimal("1000.00"),
            tax_rate=Decimal("20"),
            sort_order=0,
        ),
    ]
