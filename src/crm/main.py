import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.crm.api.routers import clients
from src.crm.containers import Container
from src.crm.core.services.seed import seed_sample_clients
from src.crm.logging import configure_logging

# Configure logging at module load time
configure_logging()

logger = logging.getLogger(__name__)

WIRED_MODULES = [
    "src.crm.api.routers.clients",
]


@asynccontextmanager
async def default_lifespan(app: FastAPI):
    """Default application lifespan manager - creates tables, seeds sample data, drains background work."""
    container: Container = app.state.container
    config = container.config()
    logger.info("Starting %s...", config.app_name)

    db = container.database()
    await db.create_tables()
    logger.info("Database initialized successfully")

    if config.seed.enabled:
        await seed_sample_clients(
            repository=container.client_repository(),
            unit_of_work=container.unit_of_work(),
            count=config.seed.count,
            seed=config.seed.random_seed,
        )

    if not config.loops_sync_available:
        logger.info("Loops.so contact sync is off (disabled or no API key)")

    yield

    logger.info("Shutting down %s...", config.app_name)
    await container.background_runner().drain()
    await container.loops_client().aclose()
    await db.dispose()


def _field_name(loc: tuple) -> str:
    # loc looks like ("body", "email") or ("query", "pageSize")
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts) or "body"


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests in the same {errors} shape as field rule violations."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        errors.setdefault(_field_name(tuple(error.get("loc", ()))), []).append(error.get("msg", "Invalid value."))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})


def create_app(container: Container, lifespan=default_lifespan) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        container: DI container providing settings, database and services.
        lifespan: Optional lifespan context manager. Defaults to default_lifespan.

    Returns:
        Configured FastAPI application.
    """
    container.wire(modules=WIRED_MODULES)

    config = container.config()

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        description="Client Relationship Management API",
        lifespan=lifespan,
    )

    # Attach container to app state for access in lifespan and routes
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors.allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Include routers
    app.include_router(clients.router, prefix="/api")

    @app.get("/")
    async def root():
        return {"message": f"Welcome to {config.app_name}"}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


container = Container()
app = create_app(container=container)
