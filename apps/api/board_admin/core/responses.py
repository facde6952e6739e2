"""JSON response construction for pipeline outcomes."""

from __future__ import annotations

import logging
from typing import Any

from fastapi.responses import JSONResponse

from board_admin.core.cors import cors_headers
from board_admin.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(
    message: str,
    status_code: int,
    *,
    method: str,
    cause: BaseException | None = None,
) -> JSONResponse:
    """Serialize a failure as ``{"error": message}`` with CORS headers.

    ``cause`` is only used for diagnostics; its text never reaches the caller.
    """
    if cause is not None:
        logger.error(
            "pipeline.failed status=%s message=%s cause=%s: %s",
            status_code,
            message,
            type(cause).__name__,
            cause,
        )
    else:
        logger.warning("pipeline.rejected status=%s message=%s", status_code, message)

    payload = ErrorResponse(error=message)
    return JSONResponse(
        status_code=status_code,
        content=payload.model_dump(),
        headers=cors_headers(method),
    )


def success_response(body: dict[str, Any], *, method: str) -> JSONResponse:
    return JSONResponse(status_code=200, content=body, headers=cors_headers(method))
