from fastapi import APIRouter, Body, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Any, Dict, Optional

from dynreg.controllers.v1.dependencies import get_shared_db, get_tenant_connections
from dynreg.database.tenant_conn import TenantConnectionRegistry
from dynreg.models.response.response import ApiResponse
from dynreg.services.registration.registration import (
    get_user_helper,
    list_users_helper,
    register_user_helper,
)


router = APIRouter(prefix="/register")


@router.post("/{tenant_id}", response_model=ApiResponse, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
async def register(
    tenant_id: str,
    payload: Dict[str, Any] = Body(...),
    db: AsyncIOMotorDatabase = Depends(get_shared_db),
    tenant_connections: TenantConnectionRegistry = Depends(get_tenant_connections),
):
    """Validate a submission against the tenant schema and store it in the tenant database."""
    registration = await register_user_helper(db, tenant_id, payload, tenant_connections)
    return ApiResponse(message="Registration successful", data=registration)


@router.get("/{tenant_id}/users", response_model=ApiResponse, response_model_exclude_none=True)
async def list_users(
    tenant_id: str,
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    limit: Optional[str] = Query(None, description="Page size"),
    tenant_connections: TenantConnectionRegistry = Depends(get_tenant_connections),
):
    return ApiResponse(data=await list_users_helper(tenant_id, tenant_connections, page, limit))


@router.get("/{tenant_id}/users/{user_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def get_user(
    tenant_id: str,
    user_id: str,
    tenant_connections: TenantConnectionRegistry = Depends(get_tenant_connections),
):
    return ApiResponse(data=await get_user_helper(tenant_id, user_id, tenant_connections))
