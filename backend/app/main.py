"""
Campus Admin Console Backend - FastAPI Application

Administration API for the school platform: user profiles, verification
and admin flags, backed by MongoDB.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from app.config import get_settings
from app.database.connections import get_mongo_client, close_connections
from app.database.databases import auth_db, campus_db
from app.database.registry import sync_registry, create_indexes
from app.routers import auth, health, users
from app.services.auth_service import AuthService

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("campus_console")


async def bootstrap_operator(client) -> None:
    """Create the first operator when the bootstrap credentials are set."""
    if not (settings.bootstrap_admin_email and settings.bootstrap_admin_password):
        return
    
    auth_service = AuthService(client[auth_db.DB_NAME], client[campus_db.DB_NAME])
    uid = await auth_service.ensure_bootstrap_admin(
        settings.bootstrap_admin_email,
        settings.bootstrap_admin_password,
        settings.bootstrap_admin_name,
    )
    logger.info(f"Bootstrap operator ready ({uid})")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    
    Startup:
    - Sync database registry
    - Create indexes
    - Create the bootstrap operator if configured
    
    Shutdown:
    - Close all database connections
    """
    logger.info("Starting up Campus Admin Console backend...")
    
    try:
        client = await get_mongo_client()
        await sync_registry(client)
        await create_indexes(client)
        await bootstrap_operator(client)
        logger.info("Database registry synced and indexes created")
    except PyMongoError as e:
        logger.warning(f"Database initialization warning: {e}")
    
    yield
    
    logger.info("Shutting down Campus Admin Console backend...")
    await close_connections()
    logger.info("Database connections closed")


# Create FastAPI application
app = FastAPI(
    title="Campus Admin Console API",
    description="""
## Campus Admin Console API

Back office for the school resource platform.

### Features
- **Users**: search, edit and delete user profiles
- **Admin flag**: stored as a document in the `admins` collection
- **Verified flag**: `isVerified` on the user document, single or bulk
- **Export**: CSV of the filtered user table

### Authentication
All console endpoints require a JWT token passed as a query parameter:
```
GET /users?token=your_jwt_token
```

Obtain a token via `POST /auth/login`. Only operators with the admin
flag can log in.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Campus Admin Console API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
