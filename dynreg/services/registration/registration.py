from typing import Any, Mapping, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from config import tenant_database_config
from dynreg.database.tenant_conn import TenantConnectionRegistry
from dynreg.models.registered_user.registered_user import RegisteredUserOut, RegisteredUserPage, RegistrationOut
from dynreg.models.validation.validation import ValidationResult
from dynreg.services.field_schema.field_schema_helper import get_schema_helper
from dynreg.services.tenant_storage.tenant_storage import (
    build_pagination,
    get_registered_user,
    insert_registered_user,
    list_registered_users,
    normalize_pagination,
)
from dynreg.services.validation.validation import validate_fields
from dynreg.utils.exceptions import ValidationFailedError
from dynreg.utils.logger_utils import logger


async def check_submission_helper(db: AsyncIOMotorDatabase, tenant_id: str, submitted_data: Mapping[str, Any]) -> ValidationResult:
    """Advisory validation against the current schema; nothing is stored."""
    schema = await get_schema_helper(db, tenant_id)
    return validate_fields(schema.fields, submitted_data)


async def register_user_helper(
    db: AsyncIOMotorDatabase,
    tenant_id: str,
    submitted_data: Mapping[str, Any],
    tenant_connections: TenantConnectionRegistry,
) -> RegistrationOut:
    logger.info(f"📝 Registration request for tenant: {tenant_id}")

    schema = await get_schema_helper(db, tenant_id)

    validation = validate_fields(schema.fields, submitted_data)
    if not validation.is_valid:
        logger.info(f"Registration for tenant {tenant_id} rejected on fields: {', '.join(validation.errors)}")
        raise ValidationFailedError(validation.errors)

    handle = await tenant_connections.resolve(tenant_id)
    user = await insert_registered_user(handle, tenant_id, validation.validated_fields)

    return RegistrationOut(
        user_id=user.id,
        tenant_id=user.tenant_id,
        fields=user.fields,
        database_name=handle.database_name,
        collection_name=tenant_database_config["USER_COLLECTION"],
        created_at=user.created_at,
    )


async def list_users_helper(
    tenant_id: str,
    tenant_connections: TenantConnectionRegistry,
    page: Optional[Any] = None,
    limit: Optional[Any] = None,
) -> RegisteredUserPage:
    page, limit = normalize_pagination(page, limit)
    logger.info(f"📊 Fetching users for tenant: {tenant_id} (page={page}, limit={limit})")

    handle = await tenant_connections.resolve(tenant_id)
    users, total = await list_registered_users(handle, tenant_id, page, limit)

    return RegisteredUserPage(
        users=users,
        pagination=build_pagination(page, limit, total),
        database_name=handle.database_name,
        collection_name=tenant_database_config["USER_COLLECTION"],
    )


async def get_user_helper(tenant_id: str, user_id: str, tenant_connections: TenantConnectionRegistry) -> RegisteredUserOut:
    handle = await tenant_connections.resolve(tenant_id)
    return await get_registered_user(handle, user_id)
