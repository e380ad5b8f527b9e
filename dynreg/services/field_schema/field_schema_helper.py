from datetime import datetime, timezone
from typing import List, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from config import database_config
from dynreg.models.field_schema.field_schema import FieldSchema, FieldSchemaOut, FieldSchemaUpdate
from dynreg.models.tenant.tenant import TenantOut
from dynreg.services.tenant_management.tenant_helper import get_tenants_helper
from dynreg.utils.exceptions import ConflictError, NotFoundError, StorageUnavailableError
from dynreg.utils.logger_utils import logger


def _schemas(db: AsyncIOMotorDatabase):
    return db[database_config["FIELD_SCHEMA_COLLECTION"]]


def _to_out(doc) -> FieldSchemaOut:
    doc["_id"] = str(doc["_id"])
    return FieldSchemaOut(**doc)


async def get_schema_helper(db: AsyncIOMotorDatabase, tenant_id: str) -> FieldSchemaOut:
    try:
        doc = await _schemas(db).find_one({"tenant_id": tenant_id})
    except PyMongoError as e:
        logger.error(f"get_schema_helper error: {e}")
        raise StorageUnavailableError(f"Error fetching field schema: {e}") from e
    if not doc:
        raise NotFoundError(f"No field schema found for tenant: {tenant_id}")
    return _to_out(doc)


async def list_schemas_helper(db: AsyncIOMotorDatabase) -> List[FieldSchemaOut]:
    try:
        items: list[FieldSchemaOut] = []
        async for doc in _schemas(db).find({}):
            items.append(_to_out(doc))
        return items
    except PyMongoError as e:
        logger.error(f"list_schemas_helper error: {e}")
        raise StorageUnavailableError(f"Error fetching schemas: {e}") from e


async def list_schemas_and_tenants_helper(db: AsyncIOMotorDatabase) -> Tuple[List[FieldSchemaOut], List[TenantOut]]:
    """Everything the admin overview shows: all schemas and all tenant records."""
    return await list_schemas_helper(db), await get_tenants_helper(db)


async def create_schema_helper(db: AsyncIOMotorDatabase, payload: FieldSchema) -> FieldSchemaOut:
    try:
        existing = await _schemas(db).find_one({"tenant_id": payload.tenant_id})
    except PyMongoError as e:
        logger.error(f"create_schema_helper lookup error: {e}")
        raise StorageUnavailableError(f"Error creating schema: {e}") from e
    if existing:
        raise ConflictError(f"Schema already exists for tenant: {payload.tenant_id}. Use PUT to update.")

    doc = payload.model_dump()
    doc["created_at"] = datetime.now(timezone.utc)
    doc["updated_at"] = doc["created_at"]
    try:
        result = await _schemas(db).insert_one(doc)
    except DuplicateKeyError as e:
        # Lost a race with a concurrent create for the same tenant
        raise ConflictError(f"Schema already exists for tenant: {payload.tenant_id}. Use PUT to update.") from e
    except PyMongoError as e:
        logger.error(f"create_schema_helper error: {e}")
        raise StorageUnavailableError(f"Error creating schema: {e}") from e

    doc = {**doc, "_id": result.inserted_id}
    logger.info(f"Field schema created for tenant {payload.tenant_id} with {len(payload.fields)} fields")
    return _to_out(doc)


async def update_schema_helper(db: AsyncIOMotorDatabase, tenant_id: str, payload: FieldSchemaUpdate) -> FieldSchemaOut:
    """Replace the whole field list; nothing of the previous definition survives."""
    update_data = payload.model_dump()
    update_data["updated_at"] = datetime.now(timezone.utc)
    try:
        doc = await _schemas(db).find_one_and_update(
            {"tenant_id": tenant_id},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER,
        )
    except PyMongoError as e:
        logger.error(f"update_schema_helper error: {e}")
        raise StorageUnavailableError(f"Error updating schema: {e}") from e
    if not doc:
        raise NotFoundError(f"Schema not found for tenant: {tenant_id}")
    logger.info(f"Field schema updated for tenant {tenant_id}")
    return _to_out(doc)


async def delete_schema_helper(db: AsyncIOMotorDatabase, tenant_id: str) -> None:
    try:
        res = await _schemas(db).delete_one({"tenant_id": tenant_id})
    except PyMongoError as e:
        logger.error(f"delete_schema_helper error: {e}")
        raise StorageUnavailableError(f"Error deleting schema: {e}") from e
    if res.deleted_count == 0:
        raise NotFoundError(f"Schema not found for tenant: {tenant_id}")
    logger.info(f"Field schema deleted for tenant {tenant_id}")
