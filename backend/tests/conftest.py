from __future__ import annotations

import sys
from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path

import httpx
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import orderdesk.models  # noqa: E402,F401
from orderdesk.core.config import get_settings  # noqa: E402
from orderdesk.models.base import Base  # noqa: E402
from orderdesk.models.party import Carrier, Customer, Supplier  # noqa: E402
from orderdesk.models.payment import PaymentMethod, PaymentTerm  # noqa: E402
from orderdesk.models.product import Product  # noqa: E402


@pytest_asyncio.fixture
async def db_engine(tmp_path, monkeypatch) -> AsyncIterator[AsyncEngine]:
    db_path = tmp_path / "test.db"

    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.setenv("BASIC_AUTH_USERNAME", "test-user")
    monkeypatch.setenv("BASIC_AUTH_PASSWORD", "test-pass")
    monkeypatch.delenv("ALLOW_DEFAULT_APPROVER", raising=False)
    get_settings.cache_clear()

    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", future=True)

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, _connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=db_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@dataclass(frozen=True)
class ReferenceData:
    customer_id: int
    other_customer_id: int
    supplier_id: int
    carrier_id: int
    payment_term_id: int
    cash_method_id: int
    slip_method_id: int
    product_ids: tuple[int, ...]


@pytest_asyncio.fixture
async def reference_data(session_factory: async_sessionmaker[AsyncSession]) -> ReferenceData:
    """Counterparties, products and payment data shared by the order tests (no employees)."""
    async with session_factory() as session:
        async with session.begin():
            customer = Customer(name="Mercado Central", tax_id="12345678000190")
            other_customer = Customer(name="Padaria Sol")
            supplier = Supplier(name="Distribuidora Norte", tax_id="98765432000110")
            carrier = Carrier(name="Transportes Rápidos")
            term = PaymentTerm(name="30/60")
            cash = PaymentMethod(code="DIN", name="Dinheiro")
            slip = PaymentMethod(code="BOL", name="Boleto")
            products = [
                Product(code="P-001", name="Arroz 5kg", unit="UN"),
                Product(code="P-002", name="Feijão 1kg", unit="UN"),
                Product(code="P-003", name="Óleo 900ml", unit="CX"),
            ]
            session.add_all([customer, other_customer, supplier, carrier, term, cash, slip, *products])
            await session.flush()

            return ReferenceData(
                customer_id=customer.id,
                other_customer_id=other_customer.id,
                supplier_id=supplier.id,
                carrier_id=carrier.id,
                payment_term_id=term.id,
                cash_method_id=cash.id,
                slip_method_id=slip.id,
                product_ids=tuple(p.id for p in products),
            )


@pytest_asyncio.fixture
async def api_client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[httpx.AsyncClient]:
    # Imported here: building the app reads settings, which the db_engine fixture provides.
    from orderdesk.core.db import get_session
    from orderdesk.main import create_app

    app = create_app()

    async def _session_override() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _session_override
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test", auth=("test-user", "test-pass")) as client:
        yield client
