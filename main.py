import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI

from updater.config import Settings, settings
from updater.exception_handlers import register_exception_handlers
from updater.plugins.loader import initialize_plugins, shutdown_plugins
from updater.plugins.registry import PluginRegistry, plugin_registry
from updater.routes import monitoring, updates
from updater.services.update_checker import build_update_checker
from updater.utils.cache import CacheBackend, build_cache

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings = settings,
    *,
    cache: CacheBackend | None = None,
    http_client: httpx.AsyncClient | None = None,
    registry: PluginRegistry | None = None,
) -> FastAPI:
    """Create the FastAPI application with the updater wired to its hooks."""
    cache = cache or build_cache(app_settings)
    registry = registry or plugin_registry
    checker = build_update_checker(app_settings, cache, http_client=http_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up the updater...")
        await cache.connect()
        await initialize_plugins(registry, checker, app_settings.plugins_config_file)
        yield
        logger.info("Shutting down the updater...")
        await shutdown_plugins(registry)
        await cache.disconnect()

    app = FastAPI(
        title=app_settings.app_name,
        description="Self-update service for CMS plugins",
        debug=app_settings.debug,
        version=app_settings.app_version,
        lifespan=lifespan,
    )
    app.state.registry = registry
    app.state.checker = checker
    app.state.cache = cache

    register_exception_handlers(app)
    app.include_router(monitoring.router)
    app.include_router(updates.router, prefix="/api/v1/updates")

    if app_settings.debug:
        logger.info(f"Running in {app_settings.environment} mode")
        logging.getLogger("updater").setLevel(logging.DEBUG)

    return app


app = create_app()


@app.get("/", tags=["Root"])
async def root():
    return {"message": "Plugin updater is running", "plugin": settings.plugin_slug}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
