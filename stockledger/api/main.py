"""
HTTP entry point for StockLedger.

``app`` is what uvicorn serves; ``create_app`` builds a fresh instance with
the middleware stack, error handlers and routers attached.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockledger.api.middleware import (
    ErrorHandlerMiddleware,
    LoggingMiddleware,
    setup_exception_handlers,
)
from stockledger.api.routes import health_router, products_router, reports_router
from stockledger.application.services import get_cache_signal
from stockledger.config import configure_logging, get_logger, get_settings
from stockledger.infrastructure.cache import close_report_cache
from stockledger.infrastructure.storage import close_pool

logger = get_logger(__name__)


async def _prepare_sqlite() -> None:
    from stockledger.infrastructure.storage.sqlite import get_pool
    from stockledger.infrastructure.storage.sqlite.migrations import run_migrations

    failed = [r for r in await run_migrations() if not r.success]
    if failed:
        raise RuntimeError(f"Migration {failed[0].version} failed: {failed[0].error}")
    await get_pool()
    logger.info("sqlite_ready")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Migrate and open storage before serving.

    On the way out, pending cache invalidations are awaited first so no
    stale report survives a restart, then the pool and cache client close.
    """
    settings = get_settings()
    logger.info(
        "stockledger_starting",
        host=settings.api.host,
        port=settings.api.port,
        storage=settings.storage.backend,
        cache_enabled=settings.cache.enabled,
    )

    if settings.storage.backend == "sqlite":
        try:
            await _prepare_sqlite()
        except Exception as e:
            logger.error("sqlite_startup_failed", error=str(e))
            raise

    yield

    logger.info("stockledger_stopping")
    await get_cache_signal().drain()

    for name, closer in (("pool", close_pool), ("report_cache", close_report_cache)):
        try:
            await closer()
        except Exception as e:
            logger.warning("shutdown_close_failed", resource=name, error=str(e))

    logger.info("stockledger_stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title="StockLedger API",
        description="Product catalog, stock movement ledger and stock reports",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Starlette runs the last-added middleware first
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    for router in (health_router, products_router, reports_router):
        app.include_router(router)

    # Liveness probe outside /api
    @app.get("/health")
    async def root_health() -> dict[str, str]:
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    api = get_settings().api
    uvicorn.run("stockledger.api.main:app", host=api.host, port=api.port, reload=api.debug)
