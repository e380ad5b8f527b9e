from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from dynreg.controllers.v1.dependencies import get_shared_db

from dynreg.models.field_schema.field_schema import FieldSchema, FieldSchemaUpdate
from dynreg.models.response.response import ApiResponse
from dynreg.models.tenant.tenant import Tenant
from dynreg.services.field_schema.field_schema_helper import (
    create_schema_helper,
    delete_schema_helper,
    get_schema_helper,
    list_schemas_and_tenants_helper,
    update_schema_helper,
)
from dynreg.services.tenant_management.tenant_helper import create_tenant_helper, get_tenants_helper


router = APIRouter(prefix="/admin")


@router.get("/schemas", response_model=ApiResponse, response_model_exclude_none=True)
async def list_schemas(db: AsyncIOMotorDatabase = Depends(get_shared_db)):
    """All field schemas together with all tenant records."""
    schemas, tenants = await list_schemas_and_tenants_helper(db)
    return ApiResponse(data={"schemas": schemas, "tenants": tenants})


@router.get("/schemas/{tenant_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def get_schema(tenant_id: str, db: AsyncIOMotorDatabase = Depends(get_shared_db)):
    return ApiResponse(data=await get_schema_helper(db, tenant_id))


@router.post("/schemas", response_model=ApiResponse, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
async def create_schema(payload: FieldSchema, db: AsyncIOMotorDatabase = Depends(get_shared_db)):
    schema = await create_schema_helper(db, payload)
    return ApiResponse(message="Field schema created successfully", data=schema)


@router.put("/schemas/{tenant_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def update_schema(tenant_id: str, payload: FieldSchemaUpdate, db: AsyncIOMotorDatabase = Depends(get_shared_db)):
    """Replace the tenant's whole field list."""
    schema = await update_schema_helper(db, tenant_id, payload)
    return ApiResponse(message="Field schema updated successfully", data=schema)


@router.delete("/schemas/{tenant_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def delete_schema(tenant_id: str, db: AsyncIOMotorDatabase = Depends(get_shared_db)):
    await delete_schema_helper(db, tenant_id)
    return ApiResponse(message="Field schema deleted successfully")


@router.get("/tenants", response_model=ApiResponse, response_model_exclude_none=True)
async def list_tenants(db: AsyncIOMotorDatabase = Depends(get_shared_db)):
    return ApiResponse(data=await get_tenants_helper(db))


@router.post("/tenants", response_model=ApiResponse, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
async def create_tenant(payload: Tenant, db: AsyncIOMotorDatabase = Depends(get_shared_db)):
    tenant = await create_tenant_helper(db, payload)
    return ApiResponse(message="Tenant created successfully", data=tenant)
