"""FastAPI entry point for the birthday site server."""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .api.routes import router as api_router
from .api.storage import create_repository
from .api.uploads import create_uploader
from .config import Settings, settings
from .server.websocket_handler import websocket_endpoint
from .wishes.store import LocalStore


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(config: Settings = settings):
    """Route every log record to stdout, with per-package levels.

    Levels come from the environment:
      BIRTHDAY_LOG_LEVEL=INFO                # Root level (DEBUG, INFO, WARNING, ERROR)
      BIRTHDAY_LOG_LEVEL_SCENE=WARNING       # Scene renderer (very verbose at DEBUG)
      BIRTHDAY_LOG_LEVEL_PRESENTATION=INFO   # Step transitions, effects
      BIRTHDAY_LOG_LEVEL_SERVER=INFO         # WebSocket server
      BIRTHDAY_LOG_LEVEL_API=INFO            # Persistence, uploads, drafting
    """
    logging.basicConfig(
        level=_level(config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    package_levels = {
        "birthday_site.scene": config.log_level_scene,
        "birthday_site.animation": config.log_level_scene,
        "birthday_site.presentation": config.log_level_presentation,
        "birthday_site.effects": config.log_level_presentation,
        "birthday_site.server": config.log_level_server,
        "birthday_site.api": config.log_level_api,
        # Chatty dependencies
        "httpx": "WARNING",
        "httpcore": "WARNING",
        "google_genai": "WARNING",
        "uvicorn.access": "WARNING",
    }

    for name, level in package_levels.items():
        logging.getLogger(name).setLevel(_level(level))


setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the storage backends and the wish store for the app's lifetime."""
    config: Settings = app.state.settings
    logger.info(f"Birthday site server starting on {config.host}:{config.port}")
    logger.info(f"Storage backend: {config.storage_backend} (uploads: {config.upload_backend})")
    logger.info(f"AI drafting: {'enabled' if config.gemini_api_key else 'disabled'}")

    app.state.repository = create_repository(config)
    app.state.uploader = create_uploader(config)
    app.state.store = LocalStore(config.wishes_db)
    yield
    logger.info("Closing wish store")
    app.state.store.close()


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """Build the application. Backends are created when the app starts."""
    config = config or settings

    app = FastAPI(
        title="Birthday Site Server",
        description="Personalized birthday sites with a server-driven presentation engine",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "service": "birthday-site-server",
            "storage_backend": config.storage_backend,
        }

    @app.websocket("/ws/view")
    async def websocket_route(websocket: WebSocket):
        """WebSocket endpoint for a live birthday site viewer."""
        await websocket_endpoint(
            websocket,
            websocket.app.state.repository,
            websocket.app.state.store,
            config,
        )

    app.include_router(api_router)

    if config.upload_backend == "local":
        app.mount("/uploads", StaticFiles(directory=config.upload_dir, check_dir=False), name="uploads")

    return app


app = create_app()


def main():
    """Console entry point."""
    uvicorn.run(
        "birthday_site.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    main()
