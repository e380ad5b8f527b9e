from bson import ObjectId
from datetime import datetime, timezone
from math import ceil
from typing import Any, Dict, List, Optional, Tuple

from pymongo.errors import PyMongoError

from config import pagination_config
from dynreg.database.tenant_conn import TenantHandle
from dynreg.models.registered_user.registered_user import Pagination, RegisteredUserOut
from dynreg.utils.exceptions import NotFoundError, StorageUnavailableError
from dynreg.utils.logger_utils import logger


def normalize_pagination(page: Any = None, limit: Any = None) -> Tuple[int, int]:
    """Coerce page/limit query values; anything missing or invalid falls back to the defaults."""
    return (
        _positive_int(page, pagination_config["DEFAULT_PAGE"]),
        min(_positive_int(limit, pagination_config["DEFAULT_LIMIT"]), pagination_config["MAX_LIMIT"]),
    )


def _positive_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(current_page=page, total_pages=ceil(total / limit), total_users=total, limit=limit)


async def insert_registered_user(handle: TenantHandle, tenant_id: str, fields: Dict[str, Any]) -> RegisteredUserOut:
    """Store an already validated submission in the tenant's own database."""
    now = datetime.now(timezone.utc)
    doc = {
        "tenant_id": tenant_id,
        "fields": dict(fields),
        "created_at": now,
        "updated_at": now,
    }
    try:
        result = await handle.collection().insert_one(doc)
    except PyMongoError as e:
        logger.error(f"insert_registered_user error in {handle.database_name}: {e}")
        raise StorageUnavailableError(f"Failed to store registration: {e}") from e

    user = RegisteredUserOut(**{**doc, "_id": str(result.inserted_id)})
    logger.info(f"User {user.id} registered in database: {handle.database_name}")
    return user


async def list_registered_users(
    handle: TenantHandle,
    tenant_id: str,
    page: Optional[int] = None,
    limit: Optional[int] = None,
) -> Tuple[List[RegisteredUserOut], int]:
    """Newest-first page of a tenant's registrations plus the total count."""
    page, limit = normalize_pagination(page, limit)
    query = {"tenant_id": tenant_id}
    try:
        cursor = handle.collection().find(
            query,
            sort=[("created_at", -1), ("_id", -1)],
            skip=(page - 1) * limit,
            limit=limit,
        )
        users: list[RegisteredUserOut] = []
        async for doc in cursor:
            doc["_id"] = str(doc["_id"])
            users.append(RegisteredUserOut(**doc))
        total = await handle.collection().count_documents(query)
    except PyMongoError as e:
        logger.error(f"list_registered_users error in {handle.database_name}: {e}")
        raise StorageUnavailableError(f"Failed to fetch registered users: {e}") from e
    return users, total


async def get_registered_user(handle: TenantHandle, user_id: str) -> RegisteredUserOut:
    if not ObjectId.is_valid(user_id):
        raise NotFoundError("User not found")
    try:
        doc = await handle.collection().find_one({"_id": ObjectId(user_id)})
    except PyMongoError as e:
        logger.error(f"get_registered_user error in {handle.database_name}: {e}")
        raise StorageUnavailableError(f"Failed to fetch user: {e}") from e
    if not doc:
        raise NotFoundError("User not found")
    doc["_id"] = str(doc["_id"])
    return RegisteredUserOut(**doc)
