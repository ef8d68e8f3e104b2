"""Pytest fixtures for testing"""

import pytest
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from finance_ledger.api.main import create_app
from finance_ledger.api.dependencies import get_unit_of_work
from finance_ledger.infrastructure.database.models import Base
from finance_ledger.infrastructure.database.unit_of_work import SqlAlchemyUnitOfWork
from finance_ledger.domain.models import Account, AccountStatus, AccountType

OWNER = "user_alice"


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def database() -> Generator[None, None, None]:
    """Create tables before each test and drop them afterwards"""
    Base.metadata.create_all(bind=engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def uow() -> Generator[SqlAlchemyUnitOfWork, None, None]:
    """Unit of work bound to the test database"""
    with SqlAlchemyUnitOfWork(TestingSessionLocal) as unit:
        yield unit


@pytest.fixture
def uow_factory():
    """Builds extra units of work that run alongside the `uow` fixture"""

    def _make() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(TestingSessionLocal)

    return _make


@pytest.fixture
def make_account():
    """Factory that persists an account in its own committed unit of work"""

    def _make(
        balance: str = "1000.00",
        owner_id: str = OWNER,
        type: AccountType = AccountType.BANK_ACCOUNT,
        include_in_balance: bool = True,
        status: AccountStatus = AccountStatus.ACTIVE,
        name: str = "Main",
    ) -> Account:
        with SqlAlchemyUnitOfWork(TestingSessionLocal) as unit:
            account = unit.accounts.add(
                Account(
                    owner_id=owner_id,
                    name=name,
                    balance=Decimal(balance),
                    type=type,
                    include_in_balance=include_in_balance,
                    status=status,
                )
            )
            unit.commit()
        return account

    return _make


@pytest.fixture
def account(make_account) -> Account:
    """Bank account holding 1000.00"""
    return make_account("1000.00")


@pytest.fixture
def owner_id() -> str:
    return OWNER


@pytest.fixture
def read_balance():
    """Committed balance read through a fresh unit of work"""

    def _read(account_id: int, owner_id: str = OWNER) -> Decimal:
        with SqlAlchemyUnitOfWork(TestingSessionLocal) as unit:
            return unit.accounts.get(account_id, owner_id).balance

    return _read


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_unit_of_work():
        with SqlAlchemyUnitOfWork(TestingSessionLocal) as unit:
            yield unit

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    return TestClient(app)
