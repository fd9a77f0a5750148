"""HR Compliance — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from hr_compliance import __version__
from hr_compliance.common.exceptions import register_exception_handlers
from hr_compliance.common.rate_limit import limiter
from hr_compliance.compliance.router import records_router, status_router
from hr_compliance.config import settings
from hr_compliance.core_hr.router import companies_router, employees_router
from hr_compliance.database import engine
from hr_compliance.logging_config import configure_logging
from hr_compliance.schedule_check.router import router as schedule_check_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info("HR Compliance %s starting (%s)", __version__, settings.ENVIRONMENT)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="HR Compliance",
        description="Passport, DBS, immigration, right-to-work and spot-check tracking",
        version=__version__,
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check
    @app.get("/api/v1/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": __version__,
            "environment": settings.ENVIRONMENT,
        }

    # Register routers
    app.include_router(companies_router, prefix="/api/v1/companies", tags=["companies"])
    app.include_router(employees_router, prefix="/api/v1/employees", tags=["employees"])
    app.include_router(schedule_check_router, prefix="/api/v1/schedule-check", tags=["schedule-check"])
    app.include_router(status_router, prefix="/api/v1/schedule-status", tags=["schedule-status"])
    app.include_router(records_router, prefix="/api/v1/compliance", tags=["compliance"])

    return app


app = create_app()
