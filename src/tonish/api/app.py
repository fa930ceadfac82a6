"""FastAPI application factory with CORS, error mapping and all routers."""

from __future__ import annotations

from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tonish.api.deps import current_user_id
from tonish.api.routes import ai, auth, notebooks, pages, tasks
from tonish.config import AppSettings
from tonish.exceptions import AIResponseParseError, TonishError
from tonish.logging import get_logger
from tonish.realtime import handler as ws

log = get_logger(__name__)

API_VERSION = "1.0.1"


async def _tonish_error_handler(request: Request, exc: TonishError) -> JSONResponse:
    """Map the exception hierarchy to {"error": ...} bodies."""
    content: dict[str, Any] = {"error": str(exc)}
    if isinstance(exc, AIResponseParseError):
        content["raw"] = exc.raw
    if exc.status_code >= 500:
        log.warning("request_failed", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=exc.status_code, content=content)


def create_app(settings: AppSettings, lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings, stored on app.state for handlers.
        lifespan: Optional async context manager that builds components
                  (database, stores, hub) and attaches them to app.state.

    Returns:
        Configured FastAPI application with middleware and routes.
    """
    app = FastAPI(title="Tonish API", version=API_VERSION, lifespan=lifespan)
    app.state.settings = settings

    origins = settings.server.cors_origin_list()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=bool(origins),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
    )

    app.add_exception_handler(TonishError, _tonish_error_handler)  # type: ignore[arg-type]

    @app.get("/")
    async def health() -> dict:
        return {"message": "Tonish API is running", "version": API_VERSION}

    # Bearer check on every data route; anonymous access unless auth_required.
    protected = [Depends(current_user_id)]
    app.include_router(auth.router, prefix="/api")
    app.include_router(tasks.router, prefix="/api/tasks", dependencies=protected)
    app.include_router(notebooks.router, prefix="/api/notebooks", dependencies=protected)
    app.include_router(pages.router, prefix="/api/pages", dependencies=protected)
    app.include_router(ai.router, prefix="/api/ai", dependencies=protected)
    app.include_router(ws.router)

    return app
