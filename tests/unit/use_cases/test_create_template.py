"""Unit tests for CreateRecurringTemplate use case"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.recurring.create_template import CreateRecurringTemplate
from src.app.use_cases.recurring.dtos import CreateTemplateCommandDTO, TemplateItemDTO
from src.domain.pricing import DiscountType
from src.domain.recurring_template import TemplateStatus
from src.domain.schedule import Frequency


@pytest.fixture
def mock_template_repo():
    repo = MagicMock()

    async def create(template):
        template.id = 5
        return template

    repo.create = AsyncMock(side_effect=create)
    return repo


@pytest.fixture
def mock_template_item_repo():
    repo = MagicMock()

    async def replace(template_id, items):
        for position, item in enumerate(items):
            item.id = 100 + position
            item.template_id = template_id
        return items

    repo.replace_for_template = AsyncMock(side_effect=replace)
    return repo


@pytest.fixture
def create_use_case(mock_uow, mock_template_repo, mock_template_item_repo):
    return CreateRecurringTemplate(
        uow=mock_uow,
        template_repo=mock_template_repo,
        template_item_repo=mock_template_item_repo,
    )


@pytest.fixture
def sample_command():
    return CreateTemplateCommandDTO(
        tenant_id="tenant_123",
        template_name="Monthly retainer",
        frequency="monthly",
        start_date=date(2024, 1, 31),
        items=[
            TemplateItemDTO(name="Retainer", quantity=Decimal("1"), unit_price=Decimal("1000"), tax_rate=Decimal("20")),
            TemplateItemDTO(name="Support", quantity=Decimal("2"), unit_price=Decimal("50")),
        ],
        discount_type="percent",
        discount_value=Decimal("10"),
        payment_terms=14,
    )


@pytest.mark.asyncio
class TestCreateTemplateSuccess:
    """Test successful template creation"""

    async def test_creates_active_template_with_totals(
        self, create_use_case, sample_command, mock_template_repo, mock_template_item_repo, mock_uow
    ):
        """
        Given: Valid schedule and two line items with a 10% discount
        When: create template is called
        Then: Active template with next_run_date = start_date and computed totals
        """
        result = await create_use_case.execute(sample_command)

        assert result.is_ok()
        response = result.value
        assert response.template_id == 5
        assert response.status == "active"
        assert response.frequency == "monthly"
        assert response.next_run_date == date(2024, 1, 31)
        assert response.subtotal == Decimal("1100.00")
        assert response.tax_amount == Decimal("200.00")
        assert response.discount_amount == Decimal("110.00")
        assert response.total == Decimal("1190.00")
        assert response.currency == "USD"
        assert [item.name for item in response.items] == ["Retainer", "Support"]

        template = mock_template_repo.create.call_args.args[0]
        assert template.status == TemplateStatus.ACTIVE
        assert template.frequency == Frequency.MONTHLY
        assert template.discount_type == DiscountType.PERCENT
        mock_template_item_repo.replace_for_template.assert_called_once()
        mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
class TestCreateTemplateValidation:
    """Test validation failures (nothing persisted)"""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"template_name": None},
            {"template_name": "   "},
            {"frequency": None},
            {"start_date": None},
        ],
    )
    async def test_missing_required_schedule_fields(
        self, create_use_case, sample_command, mock_template_repo, overrides
    ):
        command = sample_command.model_copy(update=overrides)

        result = await create_use_case.execute(command)

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert result.error.message == "Template name, frequency, and start date are required"
        mock_template_repo.create.assert_not_called()

    async def test_unsupported_frequency(self, create_use_case, sample_command):
        result = await create_use_case.execute(sample_command.model_copy(update={"frequency": "daily"}))

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert "weekly, monthly, quarterly, yearly" in result.error.message

    async def test_empty_items(self, create_use_case, sample_command, mock_uow):
        result = await create_use_case.execute(sample_command.model_copy(update={"items": []}))

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert result.error.message == "At least one line item is required"
        mock_uow.commit.assert_not_called()

    async def test_end_date_before_start_date(self, create_use_case, sample_command):
        result = await create_use_case.execute(
            sample_command.model_copy(update={"end_date": date(2023, 12, 31)})
        )

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"

    async def test_unknown_discount_type(self, create_use_case, sample_command):
        result = await create_use_case.execute(sample_command.model_copy(update={"discount_type": "bogus"}))

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"


@pytest.mark.asyncio
class TestCreateTemplateFailure:
    """Test persistence failure"""

    async def test_rolls_back_on_repository_error(
        self, create_use_case, sample_command, mock_template_repo, mock_uow
    ):
        mock_template_repo.create = AsyncMock(side_effect=Exception("connection lost"))

        result = await create_use_case.execute(sample_command)

        assert result.is_err()
        assert result.error.code == "PERSISTENCE_FAILURE"
        mock_uow.rollback.assert_called_once()
