# venue_admin/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import datetime, timezone
from contextlib import asynccontextmanager
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import logging
from venue_admin.core.admin import setup_admin
from venue_admin.api.v1.routes import api_router
from venue_admin.api.v1.routes.auth import limiter
from venue_admin.core.config import settings
from venue_admin.core.database import db_helper
from venue_admin.core.deps import get_media_service
from venue_admin.core.exceptions import AppException, ValidationError

logging.basicConfig(
    level=logging.INFO if settings.debug else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: DB check and admin on startup, pending cleanups on shutdown"""
    logger.info(f"🚀 Starting {settings.app_name} in {'DEBUG' if settings.debug else 'PRODUCTION'} mode")

    masked_db_url = settings.db.DATABASE_URL
    if settings.db.DB_PASSWORD:
        masked_db_url = masked_db_url.replace(
            settings.db.DB_PASSWORD.get_secret_value(),
            "***"
        )
    logger.info(f"📝 Database: {masked_db_url}")
    logger.info(f"🪣 Storage: {settings.minio.public_base_url}/{settings.minio.MINIO_BUCKET_NAME}")

    try:
        await db_helper.ping()
        logger.info("✅ Database connection successful")
    except Exception as e:
        logger.error(f"❌ Database connection failed: {e}")
        raise

    setup_admin(app, db_helper.engine)

    yield

    # Shutdown
    await get_media_service().drain()
    await db_helper.dispose()
    logger.info("👋 Application shutdown complete")


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/", summary="Root endpoint", tags=["root"])
async def root():
    return {
        "message": f"Welcome to {settings.app_name} API",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        } if settings.debug else None,
        "environment": "development" if settings.debug else "production",
        "timestamp": _now()
    }


@app.get("/health", summary="Health check", tags=["health"])
async def health_check():
    try:
        db_value = await db_helper.ping()
        return {
            "status": "healthy",
            "timestamp": _now(),
            "environment": "development" if settings.debug else "production",
            "database": "connected",
            "database_ping": db_value,
            "app_name": settings.app_name,
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {
            "status": "unhealthy",
            "timestamp": _now(),
            "database": "connection failed",
            "error": str(e) if settings.debug else "Database connection error"
        }


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """Render every AppException as {detail, error, timestamp}"""
    if exc.status_code >= 500:
        logger.error(f"AppException: {exc.detail} (type: {type(exc).__name__})")
    else:
        logger.info(f"AppException: {exc.detail} (type: {type(exc).__name__})")

    content = {
        "detail": exc.detail,
        "error": type(exc).__name__,
        "timestamp": _now()
    }
    if isinstance(exc, ValidationError) and exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error": "InternalServerError",
            "timestamp": _now(),
            "debug_info": str(exc) if settings.debug else None
        }
    )


@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    return JSONResponse(
        status_code=404,
        content={
            "detail": getattr(exc, "detail", None) or "Not Found",
            "error": "NotFoundError",
            "timestamp": _now()
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "venue_admin.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning",
        access_log=False
    )
