"""Pytest configuration and fixtures for the registration service tests."""

import asyncio
from typing import Any, Dict, List, Optional

import httpx
import pytest
from mongomock_motor import AsyncMongoMockClient

from dynreg.database.conn import SharedDatabase
from dynreg.database.schema import ensure_collections_and_indexes
from dynreg.database.tenant_conn import TenantConnectionRegistry
from dynreg.models.field_schema.field_schema import FieldDefinition


class FakeDatabase:
    """In-memory tenant database whose ping can be slowed down or made to fail."""

    def __init__(self, database: Any, client: "FakeMongoClient") -> None:
        self._database = database
        self._client = client

    async def command(self, command: Any, *args: Any, **kwargs: Any) -> Dict[str, Any]:
        self._client.pings += 1
        if self._client.ping_delay:
            await asyncio.sleep(self._client.ping_delay)
        if self._client.fail_with is not None:
            raise self._client.fail_with
        return {"ok": 1.0}

    async def list_collection_names(self, *args: Any, **kwargs: Any) -> List[str]:
        if self._client.prepare_error is not None:
            raise self._client.prepare_error
        return await self._database.list_collection_names(*args, **kwargs)

    def __getitem__(self, name: str) -> Any:
        return self._database[name]

    def __getattr__(self, name: str) -> Any:
        return getattr(self._database, name)


class FakeMongoClient:
    """Replaces AsyncIOMotorClient for one tenant database."""

    def __init__(
        self,
        uri: str,
        ping_delay: float,
        fail_with: Optional[Exception],
        prepare_error: Optional[Exception],
        **options: Any,
    ) -> None:
        self.uri = uri
        self.options = options
        self.ping_delay = ping_delay
        self.fail_with = fail_with
        self.prepare_error = prepare_error
        self.close_error: Optional[Exception] = None
        self.closed = False
        self.pings = 0
        self._client = AsyncMongoMockClient()
        self.databases: List[str] = []

    def __getitem__(self, name: str) -> FakeDatabase:
        self.databases.append(name)
        return FakeDatabase(self._client[name], self)

    def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class ClientFactory:
    """Counts how many tenant connections the registry opens."""

    def __init__(self, ping_delay: float = 0.0, fail_with: Optional[Exception] = None) -> None:
        self.ping_delay = ping_delay
        self.fail_with = fail_with
        self.prepare_error: Optional[Exception] = None
        self.clients: List[FakeMongoClient] = []

    def __call__(self, uri: str, **options: Any) -> FakeMongoClient:
        client = FakeMongoClient(uri, self.ping_delay, self.fail_with, self.prepare_error, **options)
        self.clients.append(client)
        return client

    @property
    def open_count(self) -> int:
        return len(self.clients)


@pytest.fixture
def client_factory() -> ClientFactory:
    return ClientFactory()


@pytest.fixture
def registry(client_factory: ClientFactory) -> TenantConnectionRegistry:
    """Registry with short timeouts and fake clients."""
    return TenantConnectionRegistry(
        uri="mongodb://test:27017",
        connect_timeout_s=0.5,
        client_factory=client_factory,
    )


@pytest.fixture
async def shared_database() -> Any:
    """Shared database backed by an in-memory client."""
    shared = SharedDatabase(
        uri="mongodb://test:27017",
        db_name="test_dynamic_registration",
        client_factory=lambda uri, **options: AsyncMongoMockClient(),
    )
    await ensure_collections_and_indexes(await shared.connect())
    yield shared
    await shared.close()


@pytest.fixture
def shared_db(shared_database: SharedDatabase) -> Any:
    return shared_database.database


@pytest.fixture
async def api(shared_database: SharedDatabase, registry: TenantConnectionRegistry) -> Any:
    """HTTP client bound to the FastAPI app, without running its lifespan."""
    from main import app

    app.state.shared_database = shared_database
    app.state.tenant_connections = registry
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await registry.close_all()


@pytest.fixture
def basic_fields() -> List[Dict[str, Any]]:
    """Project A style schema: name and email, both required."""
    return [
        {
            "id": "name",
            "label": "Full Name",
            "type": "text",
            "validation": {"required": True, "minLength": 2, "maxLength": 50},
        },
        {
            "id": "email",
            "label": "Email Address",
            "type": "email",
            "validation": {"required": True},
        },
    ]


@pytest.fixture
def basic_schema(basic_fields: List[Dict[str, Any]]) -> List[FieldDefinition]:
    return [FieldDefinition.model_validate(field) for field in basic_fields]
