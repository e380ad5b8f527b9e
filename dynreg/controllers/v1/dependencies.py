from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from dynreg.database.tenant_conn import TenantConnectionRegistry


def get_tenant_connections(request: Request) -> TenantConnectionRegistry:
    """The registry is created by the application lifespan and lives on app.state."""
    return request.app.state.tenant_connections


def get_shared_db(request: Request) -> AsyncIOMotorDatabase:
    """Database with tenant records and field schemas, opened by the lifespan."""
    return request.app.state.shared_database.database
