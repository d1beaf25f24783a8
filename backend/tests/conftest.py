"""Shared test fixtures for all test modules."""

import contextlib
import uuid

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import acctbill.models  # noqa: F401
from acctbill.core import database as db_module
from acctbill.core.database import Base
from acctbill.models.company import Company

# In-memory SQLite shared across connections through StaticPool
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)

# Well-known default company ID used across all tests
DEFAULT_COMPANY_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")


def _seed_default_company(session: Session) -> None:
    """Insert a default company used by all tests."""
    company = session.query(Company).filter(Company.id == DEFAULT_COMPANY_ID).first()
    if company is None:
        session.add(Company(id=DEFAULT_COMPANY_ID, name="Default Test Company"))
        session.commit()


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database.
    """
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    session = _TestSessionLocal()
    try:
        _seed_default_company(session)
    finally:
        session.close()

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def default_company_id():
    """Return the default company ID for tests."""
    return DEFAULT_COMPANY_ID


@pytest.fixture
def db_session():
    """Create a database session for direct service and repository testing."""
    gen = db_module.get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass
