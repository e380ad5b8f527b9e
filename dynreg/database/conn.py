from typing import Any, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from config import database_config
from dynreg.utils.logger_utils import logger


class SharedDatabase:
    """Connection to the database holding tenant records and field schemas.

    Built and closed by the application lifespan, next to the tenant
    connection registry; request handlers reach it through ``app.state``.
    Registrations never go through it.
    """

    def __init__(
        self,
        uri: str,
        db_name: str,
        max_pool_size: int = 10,
        server_selection_timeout_ms: int = 5000,
        client_factory: Callable[..., Any] = AsyncIOMotorClient,
    ):
        self._uri = uri
        self._db_name = db_name
        self._max_pool_size = max_pool_size
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._client_factory = client_factory
        self._client = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    def from_config(cls, client_factory: Callable[..., Any] = AsyncIOMotorClient) -> "SharedDatabase":
        return cls(
            uri=database_config["MONGO_URI"],
            db_name=database_config["DB_NAME"],
            client_factory=client_factory,
        )

    async def connect(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            self._client = self._client_factory(
                self._uri,
                maxPoolSize=self._max_pool_size,
                serverSelectionTimeoutMS=self._server_selection_timeout_ms,
            )
            self._db = self._client[self._db_name]
            logger.info(f"✅ Connected to shared database: {self._db_name}")
        return self._db

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
            logger.info(f"❌ Disconnected from shared database: {self._db_name}")
        self._client = None
        self._db = None

    @property
    def database(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            raise RuntimeError("Shared database is not connected. Call `connect()` first.")
        return self._db

    @property
    def is_connected(self) -> bool:
        return self._db is not None
