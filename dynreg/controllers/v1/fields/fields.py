from fastapi import APIRouter, Body, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Any, Dict

from dynreg.controllers.v1.dependencies import get_shared_db

from dynreg.models.response.response import ApiResponse
from dynreg.services.field_schema.field_schema_helper import get_schema_helper
from dynreg.services.registration.registration import check_submission_helper


router = APIRouter(prefix="/fields")


@router.get("/{tenant_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def get_fields(tenant_id: str, db: AsyncIOMotorDatabase = Depends(get_shared_db)):
    """Field schema used to render a tenant's public registration form."""
    schema = await get_schema_helper(db, tenant_id)
    return ApiResponse(data={"tenantId": schema.tenant_id, "fields": schema.fields})


@router.post("/{tenant_id}/validate", response_model=ApiResponse, response_model_exclude_none=True)
async def validate_submission(
    tenant_id: str,
    payload: Dict[str, Any] = Body(...),
    db: AsyncIOMotorDatabase = Depends(get_shared_db),
):
    """Check a submission against the schema without registering it."""
    result = await check_submission_helper(db, tenant_id, payload)
    return ApiResponse(success=result.is_valid, data=result, errors=result.errors or None)
