"""Main FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.router import api_router
from app.core.config import settings
from app.core.database import create_tables, engine
from app.core.exceptions import AppException, InternalError
from app.middleware.logging import RequestLoggingMiddleware

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Suppress noisy SQLAlchemy and HTTP client logs
logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    create_tables()
    yield
    logger.info("Shutting down application")
    engine.dispose()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
Student Registration Backend API.

Persistence endpoints for student self-registrations plus a plain admin
credential check. The admin dashboard uses this service as its secondary
data store and falls back to Firestore when it is unreachable.

## Error Handling

All errors follow a standard format:
```json
{
  "success": false,
  "message": "Human readable message",
  "error": {"code": "ERROR_CODE", "message": "...", "details": {}}
}
```
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.detail,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "message": "Request validation failed",
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "Request validation failed",
                    "details": {
                        "errors": [
                            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                            for err in exc.errors()
                        ]
                    },
                },
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        error = InternalError("An internal server error occurred")
        return JSONResponse(status_code=error.status_code, content=error.detail)

    @app.get("/", tags=["Root"])
    async def root():
        """Service description; also the reachability target for probes."""
        prefix = settings.API_PREFIX
        return {
            "message": "Student Registration Backend API",
            "version": settings.APP_VERSION,
            "endpoints": {
                "students": {
                    f"POST {prefix}/students": "Add new student",
                    f"GET {prefix}/students": "Get all students",
                    f"GET {prefix}/students/stats": "Get statistics",
                    f"GET {prefix}/students/:id": "Get student by ID",
                    f"PUT {prefix}/students/:id": "Update student",
                    f"DELETE {prefix}/students/:id": "Delete student",
                    f"POST {prefix}/students/bulk-delete": "Delete multiple students",
                },
                "admin": {f"POST {prefix}/admin/login": "Admin login"},
            },
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app


# Create app instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=5000,
        reload=settings.DEBUG,
    )
