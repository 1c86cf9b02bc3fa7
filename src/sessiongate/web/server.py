from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sessiongate.app import App
from sessiongate.config import Config
from sessiongate.core.modules.health.models import HealthReport
from sessiongate.errors import StoreUnavailableError, UserError
from sessiongate.web.error_handlers import general_exception_handler, store_unavailable_handler, user_error_handler
from sessiongate.web.openapi import set_custom_openapi
from sessiongate.web.routers import auth_router, profile_router

HEALTH_PATH = "/health"


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="SessionGate API",
        lifespan=lifespan,
        openapi_tags=[],  # Tags will be added by custom OpenAPI function
    )
    app.state.app = app_instance
    app.state.config = config

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Accept", "Authorization", "Content-Type"],
            max_age=300,
        )

    # Health check endpoint (at root level, not versioned)
    @app.get(HEALTH_PATH, responses={503: {"model": HealthReport, "description": "A backing store is down"}})
    async def health_check() -> JSONResponse:
        report = await app_instance.health()
        status_code = 200 if report.status == "up" else 503
        return JSONResponse(status_code=status_code, content=report.model_dump(mode="json"))

    # API v1 routes
    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(profile_router, prefix="/api/v1")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
