from typing import Any, Dict

from config import database_config, tenant_database_config
from dynreg.utils.logger_utils import logger


def _tenant_validator() -> Dict[str, Any]:
    return {
        "$jsonSchema": {
            "bsonType": "object",
            "required": ["tenant_id", "name"],
            "properties": {
                "tenant_id": {"bsonType": "string"},
                "name": {"bsonType": "string"},
                "description": {"bsonType": ["string", "null"]},
                "is_active": {"bsonType": ["bool", "null"]},
                "created_at": {"bsonType": ["date", "null"]},
                "updated_at": {"bsonType": ["date", "null"]},
            },
        }
    }


def _field_schema_validator() -> Dict[str, Any]:
    return {
        "$jsonSchema": {
            "bsonType": "object",
            "required": ["tenant_id", "fields"],
            "properties": {
                "tenant_id": {"bsonType": "string"},
                "fields": {
                    "bsonType": "array",
                    "items": {
                        "bsonType": "object",
                        "required": ["id", "label", "type"],
                        "properties": {
                            "id": {"bsonType": "string"},
                            "label": {"bsonType": "string"},
                            "type": {"enum": ["text", "email", "phone", "number", "textarea", "select"]},
                            "placeholder": {"bsonType": ["string", "null"]},
                            "options": {"bsonType": ["array", "null"]},
                            "validation": {"bsonType": ["object", "null"]},
                            "error_message": {"bsonType": ["string", "null"]},
                        },
                    },
                },
                "created_at": {"bsonType": ["date", "null"]},
                "updated_at": {"bsonType": ["date", "null"]},
            },
        }
    }


def _registered_user_validator() -> Dict[str, Any]:
    # fields is deliberately open: its shape is whatever the tenant schema accepted
    return {
        "$jsonSchema": {
            "bsonType": "object",
            "required": ["tenant_id", "fields", "created_at", "updated_at"],
            "properties": {
                "tenant_id": {"bsonType": "string"},
                "fields": {"bsonType": "object"},
                "created_at": {"bsonType": "date"},
                "updated_at": {"bsonType": "date"},
            },
        }
    }


async def _ensure_collections(db, collections: Dict[str, Dict[str, Any]]) -> None:
    existing = await db.list_collection_names()

    for name, validator in collections.items():
        try:
            if name not in existing:
                await db.create_collection(name, validator=validator)
                logger.info(f"Created collection {name} with validator")
            else:
                try:
                    await db.command({
                        "collMod": name,
                        "validator": validator,
                        "validationLevel": "moderate",
                    })
                    logger.info(f"Updated validator for collection {name}")
                except Exception as e:
                    logger.warning(f"Could not update validator for {name}: {e}")
        except Exception as e:
            logger.error(f"Error ensuring collection {name}: {e}")


async def ensure_collections_and_indexes(db) -> None:
    """Create the shared collections with validators and ensure indexes exist.

    This is idempotent and safe to call on every startup.
    """
    await _ensure_collections(db, {
        database_config["TENANT_COLLECTION"]: _tenant_validator(),
        database_config["FIELD_SCHEMA_COLLECTION"]: _field_schema_validator(),
    })

    # One tenant record and one schema per tenant id
    try:
        await db[database_config["TENANT_COLLECTION"]].create_index("tenant_id", unique=True, name="uniq_tenant_id")
    except Exception as e:
        logger.warning(f"Create index tenants.tenant_id failed or exists: {e}")

    try:
        await db[database_config["FIELD_SCHEMA_COLLECTION"]].create_index("tenant_id", unique=True, name="uniq_schema_tenant_id")
    except Exception as e:
        logger.warning(f"Create index fieldschemas.tenant_id failed or exists: {e}")


async def ensure_tenant_collections(db) -> None:
    """Prepare a tenant database the first time a handle is opened on it."""
    collection = tenant_database_config["USER_COLLECTION"]
    await _ensure_collections(db, {collection: _registered_user_validator()})

    try:
        await db[collection].create_index([("created_at", -1)], name="idx_created_at_desc")
        await db[collection].create_index("tenant_id", name="idx_tenant_id")
    except Exception as e:
        logger.warning(f"Create index {collection} (created_at, tenant_id) failed or exists: {e}")

    try:
        await db[collection].create_index("fields.email", sparse=True, name="idx_fields_email")
    except Exception as e:
        logger.warning(f"Create index {collection}.fields.email failed or exists: {e}")
