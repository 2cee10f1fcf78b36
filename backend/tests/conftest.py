"""
Shared test fixtures and configuration for the payroll backend tests.
"""
import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from unittest.mock import MagicMock
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "true"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DB_CREATE_TABLES"] = "false"

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine():
    """Fresh in-memory database with the schema created."""
    from app.db.base import Base

    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def employee_repository(db_session):
    from app.repositories.employee_repository import EmployeeRepository
    return EmployeeRepository(db_session)


@pytest.fixture
def employee_service(employee_repository):
    from app.services.employee_service import EmployeeService
    return EmployeeService(employee_repository)


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app, with one session per request on the test database."""
    from app.api.deps import get_db
    from app.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def employee_payload():
    """A valid employee in the 20% tax slab."""
    return {
        "name": "Asha Verma",
        "email": "asha.verma@example.com",
        "salary": 600000,
        "department": "IT",
        "gender": "Female",
    }


def make_payload(index: int, **overrides):
    """Build a distinct valid employee payload."""
    payload = {
        "name": f"Employee {index}",
        "email": f"employee{index}@example.com",
        "salary": 100000 * index,
        "department": "IT",
        "gender": "Male",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def payload_factory():
    return make_payload


@pytest.fixture
def sample_employees():
    """A small mixed workforce across departments, genders and tax slabs."""
    return [
        make_payload(1, salary=150000, department="IT", gender="Male"),
        make_payload(2, salary=200000, department="HR", gender="Female"),
        make_payload(3, salary=450000, department="Finance", gender="Female"),
        make_payload(4, salary=800000, department="IT", gender="Female"),
        make_payload(5, salary=1500000, department="Legal", gender="Male"),
    ]


@pytest.fixture
def mock_request():
    """Create a mock FastAPI request object."""
    request = MagicMock()
    request.headers = {}
    request.url = MagicMock()
    request.url.path = "/employees/1"
    request.method = "GET"
    return request
