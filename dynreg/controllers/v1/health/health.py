from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from dynreg.controllers.v1.dependencies import get_tenant_connections
from dynreg.database.tenant_conn import TenantConnectionRegistry
from dynreg.models.response.response import ApiResponse


router = APIRouter()


@router.get("/health", response_model=ApiResponse, response_model_exclude_none=True)
async def health(tenant_connections: TenantConnectionRegistry = Depends(get_tenant_connections)):
    return ApiResponse(
        message="Server is running",
        data={
            "timestamp": datetime.now(timezone.utc),
            "activeTenantConnections": tenant_connections.active_tenants(),
        },
    )
