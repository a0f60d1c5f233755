# Main application file
#
# Run with: uvicorn glowiva.main:create_app --factory

import logging
import time

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from glowiva.database import Base, build_engine, build_session_factory
from glowiva.core.config import Settings
from glowiva.core.errors import register_exception_handlers
from glowiva.core.rate_limiter import limiter
from glowiva.models import admins, orders  # noqa: F401  (registers every table)
from glowiva.routers import (
    analytics,
    auth,
    employees,
    products,
    uploads,
)
from glowiva.routers import orders as orders_router

logger = logging.getLogger("glowiva")

API_PREFIX = "/api"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s | %(levelname)s | %(message)s",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings)

    # APP INIT

    app = FastAPI(
        title="Glowiva Retail API",
        description="Products, orders, employees with commission, and sales analytics",
        version="1.0.0",
        debug=settings.DEBUG,
    )

    app.state.settings = settings

    # DATABASE

    engine = build_engine(settings.DATABASE_URL)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)

    # CORS (Token-based auth)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
    )

    # RATE LIMITING

    limiter.enabled = settings.RATE_LIMIT_ENABLED
    app.state.limiter = limiter

    register_exception_handlers(app)

    # REQUEST LOGGING MIDDLEWARE

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        duration = round((time.time() - start_time) * 1000, 2)

        logger.info(
            f"{request.method} {request.url.path} "
            f"Status: {response.status_code} "
            f"Time: {duration}ms"
        )

        return response

    # ROUTERS

    api = APIRouter(prefix=API_PREFIX)
    api.include_router(auth.router)
    api.include_router(products.router)
    api.include_router(orders_router.router)
    api.include_router(employees.router)
    api.include_router(analytics.router)
    api.include_router(uploads.router)

    @api.get("/health")
    def health():
        return {"status": "ok", "environment": settings.ENV}

    app.include_router(api)

    # ROOT

    @app.get("/")
    def root():
        logger.info("Health check endpoint called")
        return {"message": "Glowiva Retail API is running"}

    logger.info(f"Application created ({settings.ENV})")
    return app
