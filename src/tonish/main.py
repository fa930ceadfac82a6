"""Entry point for the Tonish API server.

Builds the FastAPI app and serves it with uvicorn's programmatic API on a
single asyncio event loop. All long-lived components are created in the
lifespan context manager and attached to app.state for route handlers.

Component wiring order (in lifespan):
1. TonishDatabase (connect, create schema)
2. UserStore, TaskStore, NotebookStore
3. AuthService (seeds the default user)
4. OllamaClient + AssistantService
5. Hub (control loop started before the first request is served)
"""

import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from tonish.ai.assistant import AssistantService
from tonish.ai.client import OllamaClient
from tonish.api.app import create_app
from tonish.auth.service import AuthService
from tonish.config import AppSettings
from tonish.data import NotebookStore, TaskStore, TonishDatabase, UserStore
from tonish.logging import get_logger, setup_logging
from tonish.realtime.hub import Hub


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build components on startup; stop the hub and close the database on shutdown."""
    logger = get_logger("tonish.main")
    settings: AppSettings = app.state.settings

    database = TonishDatabase(settings.database.path)
    await database.connect()

    user_store = UserStore(database)
    auth_service = AuthService(user_store, settings.auth)
    await auth_service.seed_default_user()

    ai_client = OllamaClient(settings.ai)
    hub = Hub(send_buffer_size=settings.hub.send_buffer_size)

    app.state.database = database
    app.state.user_store = user_store
    app.state.task_store = TaskStore(database)
    app.state.notebook_store = NotebookStore(database)
    app.state.auth_service = auth_service
    app.state.ai_client = ai_client
    app.state.assistant = AssistantService(ai_client)
    app.state.hub = hub

    await hub.start()
    logger.info("lifespan_started", database=settings.database.path)

    try:
        yield
    finally:
        await hub.stop()
        await database.close()
        logger.info("tonish_stopped")


def build_app(settings: AppSettings) -> FastAPI:
    """Create the application wired to the lifespan above."""
    return create_app(settings, lifespan=lifespan)


async def run() -> None:
    """Load settings, configure logging and serve until interrupted."""
    settings = AppSettings()
    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("tonish.main")

    app = build_app(settings)
    logger.info(
        "starting_server",
        host=settings.server.host,
        port=settings.server.port,
        auth_required=settings.server.auth_required,
    )

    config = uvicorn.Config(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
