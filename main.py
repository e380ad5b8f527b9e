from fastapi import FastAPI, Request, status
from fastapi.routing import APIRoute
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager

from config import CORS_ORIGINS
from dynreg.controllers.v1.admin.admin import router as admin_router
from dynreg.controllers.v1.fields.fields import router as fields_router
from dynreg.controllers.v1.health.health import router as health_router
from dynreg.controllers.v1.registration.registration import router as registration_router
from dynreg.database.conn import SharedDatabase
from dynreg.database.schema import ensure_collections_and_indexes
from dynreg.database.tenant_conn import TenantConnectionRegistry
from dynreg.models.response.response import ApiResponse
from dynreg.utils.exceptions import RegistrationAppError
from dynreg.utils.logger_utils import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""

    # Startup
    logger.info("🚀 Starting up the application...")
    app.state.shared_database = SharedDatabase.from_config()
    shared_db = await app.state.shared_database.connect()
    try:
        await ensure_collections_and_indexes(shared_db)
        logger.info("✅ Ensured DB schema (collections, validators, indexes)")
    except Exception as e:
        logger.warning(f"⚠️ Failed to ensure DB schema: {e}")
    app.state.tenant_connections = TenantConnectionRegistry.from_config()

    yield

    # Shutdown
    logger.info("🛑 Shutting down the application...")
    await app.state.tenant_connections.close_all()
    await app.state.shared_database.close()
    logger.info("✅ All connections closed")


app = FastAPI(title="Dynamic Registration API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _envelope(status_code: int, response: ApiResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json", by_alias=True, exclude_none=True))


@app.exception_handler(RegistrationAppError)
async def registration_error_handler(request: Request, exc: RegistrationAppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return _envelope(exc.status_code, ApiResponse(success=False, message=exc.message, errors=exc.errors))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body") or "body"
        errors.setdefault(location, error.get("msg", "Invalid value"))
    return _envelope(status.HTTP_400_BAD_REQUEST, ApiResponse(success=False, message="Invalid request", errors=errors))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _envelope(exc.status_code, ApiResponse(success=False, message=str(exc.detail)))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} failed: {exc}")
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, ApiResponse(success=False, message="Internal server error"))


# Routers
app.include_router(health_router, tags=["Health"])
app.include_router(fields_router, tags=["Fields"])
app.include_router(registration_router, tags=["Registration"])
app.include_router(admin_router, tags=["Admin"])


@app.get("/", tags=["Root"])
async def root():
    """Name, version and the list of exposed endpoints."""
    endpoints = [
        f"{method} {route.path}"
        for route in app.routes
        if isinstance(route, APIRoute) and route.include_in_schema and route.path != "/"
        for method in sorted(route.methods)
    ]
    return {"message": app.title, "version": app.version, "endpoints": endpoints}
