import os
from dotenv import load_dotenv
load_dotenv()

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

database_config = {
    "MONGO_URI": MONGO_URI,
    "DB_NAME": os.getenv("DB_NAME", "dynamic_registration"),
    "TENANT_COLLECTION": "tenants",
    "FIELD_SCHEMA_COLLECTION": "fieldschemas",
}

# Every tenant gets its own database named DB_PREFIX + normalized tenant id
tenant_database_config = {
    "DB_PREFIX": os.getenv("TENANT_DB_PREFIX", "tenant_"),
    "USER_COLLECTION": "registeredusers",
    "MAX_POOL_SIZE": int(os.getenv("TENANT_MAX_POOL_SIZE", 10)),
    "MIN_POOL_SIZE": int(os.getenv("TENANT_MIN_POOL_SIZE", 2)),
    "SERVER_SELECTION_TIMEOUT_MS": int(os.getenv("TENANT_SERVER_SELECTION_TIMEOUT_MS", 5000)),
    "SOCKET_TIMEOUT_MS": int(os.getenv("TENANT_SOCKET_TIMEOUT_MS", 45000)),
    "CONNECT_TIMEOUT_S": float(os.getenv("TENANT_CONNECT_TIMEOUT_S", 10)),
}

pagination_config = {
    "DEFAULT_PAGE": 1,
    "DEFAULT_LIMIT": 10,
    "MAX_LIMIT": 100,
}

LOG_CONFIG = {
    "LOG_LEVEL": os.getenv("LOG_LEVEL", "DEBUG"),
    "LOG_TO_FILE": os.getenv("LOG_TO_FILE", "true"),
}
