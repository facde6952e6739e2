"""FastAPI application entrypoint."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from board_admin.core.config import Settings, get_settings
from board_admin.core.responses import error_response
from board_admin.errors import MethodNotAllowed
from board_admin.repositories.memory import InMemoryStore
from board_admin.routes import boards_router
from board_admin.routes.boards import create_board_pipeline, delete_board_pipeline

# Declared verb per pipeline path, for methods the router itself rejects.
_PIPELINE_METHODS: dict[str, str] = {
    "/create-board": create_board_pipeline.method,
    "/delete-board": delete_board_pipeline.method,
}


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with settings resolved once for its lifetime."""
    app = FastAPI(title="Board Admin Functions", version="1.0.0")
    app.state.settings = settings if settings is not None else get_settings()
    app.state.store = InMemoryStore() if app.state.settings.store_backend == "memory" else None
    app.state.http_transport = None

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
        method = _PIPELINE_METHODS.get(request.url.path)
        if exc.status_code == 405 and method is not None:
            error = MethodNotAllowed()
            return error_response(error.message, error.status_code, method=method)
        return await http_exception_handler(request, exc)

    app.include_router(boards_router)

    return app


app = create_app()
