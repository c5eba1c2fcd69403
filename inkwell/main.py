"""
Inkwell API - FastAPI application entry point.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .config import get_settings
from .database import engine, Base
from .events import ALL_EVENTS, EventBus, log_event
from .limiter import limiter
from .logging_config import api_logger, approvals_logger
from .middleware import SecurityHeadersMiddleware, RequestLoggingMiddleware
from .responses import ApiException, api_exception_handler
from .routes import approvals_router, auth_router, posts_router

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and the per-app event bus on startup."""
    # In production, use migrations instead
    Base.metadata.create_all(bind=engine)

    event_bus = EventBus()
    event_bus.subscribe(ALL_EVENTS, log_event(approvals_logger))
    app.state.event_bus = event_bus
    api_logger.info("Inkwell API started", environment=settings.environment)

    yield

    api_logger.info("Inkwell API stopped")


app = FastAPI(
    title=settings.app_name,
    description="Blog/CMS backend with a publication approval workflow",
    version="1.0.0",
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(ApiException, api_exception_handler)

app.add_middleware(SecurityHeadersMiddleware)

if settings.debug:
    app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
        "X-Request-ID",
    ],
    max_age=3600,
)

app.include_router(auth_router)
app.include_router(posts_router)
app.include_router(approvals_router)


@app.get("/api/health")
def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "version": "1.0.0",
    }
