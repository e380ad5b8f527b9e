import asyncio
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from config import database_config, tenant_database_config
from dynreg.database.schema import ensure_tenant_collections
from dynreg.utils.exceptions import InvalidRequestError, StorageUnavailableError
from dynreg.utils.logger_utils import logger

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_tenant_id(tenant_id: str) -> str:
    """Lowercase and drop everything outside [a-z0-9].

    Distinct raw ids can normalize to the same key ("Project-A" and "projecta")
    and then share one database. That collision is accepted behaviour.
    """
    return _NON_ALNUM.sub("", tenant_id.lower())


@dataclass
class TenantHandle:
    """Open connection scoped to one tenant database."""

    tenant_key: str
    database_name: str
    client: Any
    database: AsyncIOMotorDatabase
    closed: bool = field(default=False)

    @property
    def is_live(self) -> bool:
        return not self.closed

    def collection(self, name: Optional[str] = None):
        return self.database[name or tenant_database_config["USER_COLLECTION"]]


class TenantConnectionRegistry:
    """Process-wide cache of per-tenant MongoDB handles.

    Owned by the application (created in the lifespan, closed on shutdown).
    Cache hits read the dict without locking; misses go through a per-key
    asyncio lock so only one open is ever in flight for a tenant.
    """

    def __init__(
        self,
        uri: str,
        db_prefix: str = "tenant_",
        max_pool_size: int = 10,
        min_pool_size: int = 2,
        server_selection_timeout_ms: int = 5000,
        socket_timeout_ms: int = 45000,
        connect_timeout_s: float = 10.0,
        client_factory: Callable[..., Any] = AsyncIOMotorClient,
    ):
        self._uri = uri
        self._db_prefix = db_prefix
        self._max_pool_size = max_pool_size
        self._min_pool_size = min_pool_size
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._socket_timeout_ms = socket_timeout_ms
        self._connect_timeout_s = connect_timeout_s
        self._client_factory = client_factory
        self._handles: Dict[str, TenantHandle] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._closed = False

    @classmethod
    def from_config(cls, client_factory: Callable[..., Any] = AsyncIOMotorClient) -> "TenantConnectionRegistry":
        return cls(
            uri=database_config["MONGO_URI"],
            db_prefix=tenant_database_config["DB_PREFIX"],
            max_pool_size=tenant_database_config["MAX_POOL_SIZE"],
            min_pool_size=tenant_database_config["MIN_POOL_SIZE"],
            server_selection_timeout_ms=tenant_database_config["SERVER_SELECTION_TIMEOUT_MS"],
            socket_timeout_ms=tenant_database_config["SOCKET_TIMEOUT_MS"],
            connect_timeout_s=tenant_database_config["CONNECT_TIMEOUT_S"],
            client_factory=client_factory,
        )

    def tenant_key(self, tenant_id: str) -> str:
        key = normalize_tenant_id(tenant_id or "")
        if not key:
            raise InvalidRequestError(f"Tenant id {tenant_id!r} has no alphanumeric characters")
        return key

    def database_name(self, tenant_id: str) -> str:
        return f"{self._db_prefix}{self.tenant_key(tenant_id)}"

    async def resolve(self, tenant_id: str) -> TenantHandle:
        """Return the live handle for a tenant, opening it on first use."""
        key = self.tenant_key(tenant_id)

        handle = self._handles.get(key)
        if handle is not None and handle.is_live:
            return handle

        if self._closed:
            raise StorageUnavailableError("Tenant connections are shut down")

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Another task may have opened it while we waited
            handle = self._handles.get(key)
            if handle is not None and handle.is_live:
                return handle
            handle = await self._open(key)
            if self._closed:
                # close_all ran while this open was in flight
                self._close_handle(handle)
                raise StorageUnavailableError("Tenant connections are shut down")
            self._handles[key] = handle
            return handle

    async def _open(self, key: str) -> TenantHandle:
        database_name = f"{self._db_prefix}{key}"
        logger.info(f"📊 Creating connection to tenant database: {database_name}")
        client = None
        try:
            client = self._client_factory(
                self._uri,
                maxPoolSize=self._max_pool_size,
                minPoolSize=self._min_pool_size,
                serverSelectionTimeoutMS=self._server_selection_timeout_ms,
                socketTimeoutMS=self._socket_timeout_ms,
            )
            database = client[database_name]
            await asyncio.wait_for(database.command("ping"), timeout=self._connect_timeout_s)
            await ensure_tenant_collections(database)
        except Exception as e:
            if client is not None:
                client.close()
            reason = str(e) or type(e).__name__
            logger.error(f"❌ Error connecting to tenant database {database_name}: {reason}")
            raise StorageUnavailableError(f"Failed to connect to tenant database: {reason}") from e

        logger.info(f"✅ Connected to tenant database: {database_name}")
        return TenantHandle(tenant_key=key, database_name=database_name, client=client, database=database)

    async def close(self, tenant_id: str) -> None:
        """Close and forget one tenant's handle."""
        key = self.tenant_key(tenant_id)
        handle = self._handles.pop(key, None)
        if handle is not None:
            self._close_handle(handle)

    async def close_all(self) -> None:
        """Close every cached handle; one failing close never stops the others."""
        logger.info("🔌 Closing all tenant database connections...")
        self._closed = True
        handles = list(self._handles.values())
        self._handles.clear()
        self._locks.clear()
        for handle in handles:
            try:
                self._close_handle(handle)
            except Exception as e:
                logger.error(f"❌ Error closing connection for {handle.database_name}: {e}")
        logger.info("✅ All tenant connections closed")

    def _close_handle(self, handle: TenantHandle) -> None:
        handle.closed = True
        handle.client.close()
        logger.info(f"🔌 Closed connection to tenant database: {handle.database_name}")

    def active_tenants(self) -> List[str]:
        return [key for key, handle in self._handles.items() if handle.is_live]
