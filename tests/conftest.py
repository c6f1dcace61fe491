"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real database. Tables are created before each test and dropped
after it, so every test starts from an empty ledger.
"""

import os
import uuid

import pytest

TEST_DATABASE_URL = "sqlite:///./test.db"

# Must be set before erp_ledger reads its settings
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from erp_ledger.main import app  # noqa: E402
from erp_ledger.models import AccountType, Base  # noqa: E402
from erp_ledger.models.base import get_db  # noqa: E402
from erp_ledger.schemas.account import AccountCreate  # noqa: E402
from erp_ledger.services.account_service import AccountService  # noqa: E402


engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


# The default chart of accounts used by the posting strategies,
# plus equity and a contra account for balance tests.
DEFAULT_CHART = [
    ("1000", "Cash", AccountType.ASSET),
    ("1010", "Bank", AccountType.ASSET),
    ("1200", "Accounts Receivable", AccountType.ASSET),
    ("1400", "Inventory", AccountType.ASSET),
    ("1590", "Accumulated Depreciation", AccountType.CONTRA_ASSET),
    ("2000", "Accounts Payable", AccountType.LIABILITY),
    ("2050", "Inventory Clearing", AccountType.LIABILITY),
    ("2100", "Payroll Tax Payable", AccountType.LIABILITY),
    ("2110", "Deductions Payable", AccountType.LIABILITY),
    ("2200", "Sales Tax Payable", AccountType.LIABILITY),
    ("3000", "Owner's Equity", AccountType.EQUITY),
    ("4000", "Revenue", AccountType.INCOME),
    ("5100", "Cost of Goods Sold", AccountType.EXPENSE),
    ("5200", "Salary Expense", AccountType.EXPENSE),
    ("6000", "General Expense", AccountType.EXPENSE),
]


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    The get_db dependency is overridden so the app uses the
    test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def tenant_id():
    return uuid.uuid4()


@pytest.fixture
def actor_id():
    return uuid.uuid4()


@pytest.fixture
def chart(db_session, tenant_id, actor_id):
    """Seed the default chart of accounts; returns {code: account id}."""
    service = AccountService(db_session)
    accounts = {}
    for code, name, account_type in DEFAULT_CHART:
        account = service.create_account(
            tenant_id, actor_id,
            AccountCreate(code=code, name=name, account_type=account_type),
        )
        accounts[code] = account.id
    db_session.commit()
    return accounts
