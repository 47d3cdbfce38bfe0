"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from studyplan.config import Settings, configure_logging, get_settings
from studyplan.agent.workflow import PlanOrchestrator
from studyplan.api.routes import router
from studyplan.database.session import Database
from studyplan.database.store import PlanStore
from studyplan.llm.router import ProviderClient


logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    provider_client: ProviderClient | None = None,
    orchestrator: PlanOrchestrator | None = None,
    store: PlanStore | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Services not passed in are built at startup and closed at shutdown;
    services passed in are used as-is and left open.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")

        client = provider_client or ProviderClient(settings)

        database: Database | None = None
        plan_store = store
        if plan_store is None:
            database = Database.from_settings(settings)
            await database.init()
            logger.info("Database initialized")
            plan_store = PlanStore(database)

        app.state.provider_client = client
        app.state.orchestrator = orchestrator or PlanOrchestrator(client, settings)
        app.state.store = plan_store

        yield

        # Shutdown
        logger.info("Shutting down...")
        if provider_client is None:
            await client.close()
        if database is not None:
            await database.close()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Study plan generator - AI study plans with a template fallback",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routes
    app.include_router(router)

    register_exception_handlers(app)

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """JSON error payloads for 400 / 404 / 500."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "Invalid request body",
                "details": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={
                    "success": False,
                    "error": "Route not found",
                    "message": f"The requested endpoint {request.url.path} does not exist.",
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Internal server error",
                "message": "Something went wrong on our end. Please try again later.",
            },
        )


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "studyplan.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
