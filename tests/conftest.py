"""Shared test fixtures and utilities for all tests."""
import json
from contextlib import asynccontextmanager

import httpx
import pytest
import pytest_asyncio
from dependency_injector import providers
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.crm.config import LoopsSettings, Settings
from src.crm.containers import Container, create_entity_mapper
from src.crm.infrastructure.client_repository import ClientRepository
from src.crm.infrastructure.loops_client import LoopsClient
from src.crm.infrastructure.mappers.client_mapper import ClientMapper
from src.crm.main import WIRED_MODULES, create_app
from src.crm_client import CrmClient
from src.shared.background import BackgroundTaskRunner
from src.shared.database.database import Database, DatabaseSettings
from src.shared.database.unit_of_work import UnitOfWork

LOOPS_BASE_URL = "https://loops.example.com/api/v1"


class RecordingLoopsTransport(httpx.MockTransport):
    """
    Stand-in for the Loops API that records every request it receives.

    Responds with `status_code` and a Loops-shaped JSON body, or raises
    `error` when one is set.
    """

    def __init__(self, status_code: int = 200, error: Exception | None = None):
        super().__init__(self._handle)
        self.status_code = status_code
        self.error = error
        self.requests: list[httpx.Request] = []

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if 200 <= self.status_code < 300:
            body = {"success": True, "id": "contact-123", "message": "Contact created"}
        else:
            body = {"success": False, "message": "Something went wrong"}
        return httpx.Response(self.status_code, json=body)

    @property
    def bodies(self) -> list[dict]:
        return [json.loads(request.content) for request in self.requests]


@pytest.fixture
def async_db_url(tmp_path):
    """File-backed SQLite database, unique per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'crm_test.db'}"


@pytest_asyncio.fixture(scope="function")
async def db(async_db_url):
    """
    Create database instance with test database.
    Function-scoped for test isolation.
    """
    db = Database(DatabaseSettings(db_url=async_db_url))
    yield db
    await db.dispose()


@pytest_asyncio.fixture(scope="function")
async def clean_database(db):
    """
    Clean the database before each test.
    Drops and recreates all tables.
    """
    await db.drop_tables()
    await db.create_tables()
    yield db


@pytest.fixture
def loops_settings():
    """Loops settings with sync switched on and a key configured."""
    return LoopsSettings(
        api_key="test-api-key",
        base_url=LOOPS_BASE_URL,
        enabled=True,
        default_source="CRM API",
        timeout_seconds=5,
    )


@pytest.fixture
def loops_transport():
    return RecordingLoopsTransport()


@pytest_asyncio.fixture
async def loops_client(loops_settings, loops_transport):
    """LoopsClient talking to the recording transport instead of the network."""
    http_client = httpx.AsyncClient(transport=loops_transport, base_url=loops_settings.base_url)
    client = LoopsClient(settings=loops_settings, http_client=http_client)
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def background_runner():
    runner = BackgroundTaskRunner(shutdown_timeout_seconds=1.0)
    yield runner
    await runner.drain()


@pytest.fixture
def test_settings(async_db_url, loops_settings):
    return Settings(database_url=async_db_url, loops=loops_settings)


@pytest.fixture(scope="function")
def test_container(test_settings, clean_database, loops_client):
    """
    Create a test container with database and Loops overrides for proper test isolation.
    Function-scoped to ensure each test gets a fresh container.
    """
    container = Container()

    container.config.override(providers.Object(test_settings))
    container.database.override(providers.Object(clean_database))
    container.loops_client.override(providers.Object(loops_client))

    container.wire(modules=WIRED_MODULES)
    yield container
    container.loops_client.reset_override()
    container.database.reset_override()
    container.config.reset_override()
    container.unwire()


@pytest_asyncio.fixture(scope="function")
async def test_app(test_container):
    """
    Create test application with container.
    Function-scoped for test isolation; background sync tasks are drained on teardown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Database tables are already created by clean_database fixture
        yield

    app = create_app(test_container, lifespan=lifespan)
    yield app
    await test_container.background_runner().drain()


@pytest_asyncio.fixture
async def http_client(test_app):
    """Raw httpx client bound to the test app, for status code and header checks."""
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def crm_client(http_client):
    """
    Create a CRM client for testing.
    test_app already depends on clean_database for test isolation.
    """
    async with CrmClient(base_url="http://test", client=http_client) as client:
        yield client


# =========================================================================
# Common repository fixtures (available to all test directories)
# =========================================================================

@pytest.fixture
def client_repository(clean_database):
    """ClientRepository over a clean database."""
    return ClientRepository(db=clean_database, mapper=ClientMapper())


@pytest.fixture
def unit_of_work(clean_database):
    """UnitOfWork over a clean database."""
    return UnitOfWork(clean_database, create_entity_mapper(ClientMapper()))
