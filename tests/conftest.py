"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real database, plus in-memory collaborators. The `ledger`
fixture runs a test once per backend, since both must honour
the same contract.
"""

import uuid
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from statement_ledger.main import app
from statement_ledger.models import Base, User
from statement_ledger.models.base import get_db
from statement_ledger.repositories import (
    InMemoryLedgerStore,
    InMemoryUserDirectory,
    SqlLedgerStore,
    SqlUserDirectory,
)
from statement_ledger.services import StatementService


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False, "timeout": 30},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


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
def session_factory():
    """Open extra sessions, each on its own connection, for concurrency tests."""
    return TestSessionLocal


@pytest.fixture
def client(db_session):
    """Provide a test client bound to the test session."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def new_user(name: str = "user") -> User:
    return User(
        id=uuid.uuid4(),
        name=name,
        email=f"{name}-{uuid.uuid4().hex[:8]}@example.com",
    )


def add_sql_user(db_session, name: str = "user") -> User:
    """Helper: persist and commit a user."""
    user = new_user(name)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def memory_ledger():
    users = InMemoryUserDirectory()
    store = InMemoryLedgerStore()
    return SimpleNamespace(
        users=users,
        store=store,
        service=StatementService(users, store),
        add_user=lambda name="user": users.add(new_user(name)),
    )


@pytest.fixture
def sql_ledger(db_session):
    users = SqlUserDirectory(db_session)
    store = SqlLedgerStore(db_session)
    return SimpleNamespace(
        users=users,
        store=store,
        service=StatementService(users, store),
        add_user=lambda name="user": add_sql_user(db_session, name),
    )


@pytest.fixture(params=["memory", "sql"])
def ledger(request):
    """The same ledger harness backed by each store implementation."""
    return request.getfixturevalue(f"{request.param}_ledger")


@pytest.fixture
def make_user(db_session):
    """Factory for committed users, for API tests."""
    def _make(name: str = "user") -> User:
        return add_sql_user(db_session, name)
    return _make
