from motor.motor_asyncio import AsyncIOMotorDatabase
from dynreg.utils.logger_utils import logger
from dynreg.models.tenant.tenant import Tenant, TenantOut
from dynreg.utils.exceptions import ConflictError, NotFoundError, StorageUnavailableError
from pymongo.errors import DuplicateKeyError, PyMongoError
from datetime import datetime, timezone
from config import database_config
from typing import List


def _tenants(db: AsyncIOMotorDatabase):
    return db[database_config["TENANT_COLLECTION"]]


async def create_tenant_helper(db: AsyncIOMotorDatabase, payload: Tenant) -> TenantOut:
    doc = payload.model_dump()
    doc["created_at"] = datetime.now(timezone.utc)
    doc["updated_at"] = doc["created_at"]
    try:
        # Uniqueness comes from the tenant_id index, there is no pre-check
        result = await _tenants(db).insert_one(doc)
    except DuplicateKeyError as e:
        raise ConflictError(f"Tenant already exists: {payload.tenant_id}") from e
    except PyMongoError as e:
        logger.error(f"create_tenant_helper error: {e}")
        raise StorageUnavailableError(f"Error creating tenant: {e}") from e
    logger.info(f"Tenant created: {payload.tenant_id}")
    return TenantOut(**{**doc, "_id": str(result.inserted_id)})


async def get_tenants_helper(db: AsyncIOMotorDatabase) -> List[TenantOut]:
    try:
        items: list[TenantOut] = []
        async for doc in _tenants(db).find({}):
            doc["_id"] = str(doc["_id"])
            items.append(TenantOut(**doc))
        return items
    except PyMongoError as e:
        logger.error(f"get_tenants_helper error: {e}")
        raise StorageUnavailableError(f"Error fetching tenants: {e}") from e


async def get_tenant_helper(db: AsyncIOMotorDatabase, tenant_id: str) -> TenantOut:
    try:
        doc = await _tenants(db).find_one({"tenant_id": tenant_id})
    except PyMongoError as e:
        logger.error(f"get_tenant_helper error: {e}")
        raise StorageUnavailableError(f"Error fetching tenant: {e}") from e
    if not doc:
        raise NotFoundError(f"Tenant not found: {tenant_id}")
    doc["_id"] = str(doc["_id"])
    return TenantOut(**doc)
