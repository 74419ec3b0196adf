import pytest_asyncio
import sqlalchemy
from datetime import date, datetime
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.depends import get_session
from src.adapter.repositories.recurring_template_repository import SqlAlchemyRecurringTemplateRepository
from src.adapter.repositories.recurring_template_item_repository import SqlAlchemyRecurringTemplateItemRepository
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.invoice_line_repository import SqlAlchemyInvoiceLineRepository
from src.adapter.repositories.invoice_numbering_repository import SqlAlchemyInvoiceNumberingRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.numbering_authority import NumberingAuthority
from src.app.use_cases.recurring import (
    CreateRecurringTemplate,
    GenerateInvoiceFromTemplate,
    CreateTemplateCommandDTO,
    TemplateItemDTO,
)
from src.domain.invoice_numbering import InvoiceNumbering

# Register every table on SQLModel.metadata
import src.domain  # noqa: F401


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """
    Create test database engine

    Uses TEST_DB_URI (e.g. a PostgreSQL test database) when configured,
    otherwise a throwaway SQLite file.
    """
    test_db_url = ApplicationConfig.TEST_DB_URI or f"sqlite+aiosqlite:///{tmp_path / 'recurring_test.db'}"
    is_postgres = test_db_url.startswith("postgresql")

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        if is_postgres:
            # Drop and recreate the public schema to ensure clean state
            await conn.execute(sqlalchemy.text("DROP SCHEMA IF EXISTS public CASCADE"))
            await conn.execute(sqlalchemy.text("CREATE SCHEMA public"))
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        if is_postgres:
            await conn.execute(sqlalchemy.text("DROP SCHEMA IF EXISTS public CASCADE"))
            await conn.execute(sqlalchemy.text("CREATE SCHEMA public"))
        else:
            await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from src.api.app import create_app

    app = create_app(ApplicationConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def _build_generate_use_case(session: AsyncSession, now: datetime = None) -> GenerateInvoiceFromTemplate:
    """GenerateInvoiceFromTemplate wired to real repositories on one session"""
    return GenerateInvoiceFromTemplate(
        uow=SqlAlchemyUnitOfWork(session),
        template_repo=SqlAlchemyRecurringTemplateRepository(session),
        template_item_repo=SqlAlchemyRecurringTemplateItemRepository(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        invoice_line_repo=SqlAlchemyInvoiceLineRepository(session),
        numbering_authority=NumberingAuthority(SqlAlchemyInvoiceNumberingRepository(session)),
        clock=(lambda: now) if now else None,
    )


@pytest_asyncio.fixture
async def create_template(db_session):
    """Factory creating a template through the create use case"""

    async def _create(tenant_id: str = "tenant_int", **overrides):
        fields = dict(
            tenant_id=tenant_id,
            template_name="Monthly retainer",
            customer_name="Acme Ltd",
            frequency="monthly",
            start_date=date(2024, 1, 31),
            items=[
                TemplateItemDTO(name="Retainer", quantity=Decimal("1"), unit_price=Decimal("1000.00"), tax_rate=Decimal("20")),
            ],
            payment_terms=30,
        )
        fields.update(overrides)

        use_case = CreateRecurringTemplate(
            SqlAlchemyUnitOfWork(db_session),
            SqlAlchemyRecurringTemplateRepository(db_session),
            SqlAlchemyRecurringTemplateItemRepository(db_session),
        )
        result = await use_case.execute(CreateTemplateCommandDTO(**fields))
        assert result.is_ok(), result.error
        return result.value

    return _create


@pytest_asyncio.fixture
async def seed_numbering(db_session):
    """Factory setting a tenant's numbering counter"""

    async def _seed(tenant_id: str, next_sequence: int, prefix: str = "INV-"):
        db_session.add(InvoiceNumbering(tenant_id=tenant_id, prefix=prefix, next_sequence=next_sequence))
        await db_session.commit()

    return _seed


@pytest_asyncio.fixture
async def build_generate():
    """Factory for GenerateInvoiceFromTemplate bound to a given session"""
    return _build_generate_use_case
