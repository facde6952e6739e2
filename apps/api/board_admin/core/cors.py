"""Cross-origin request handling."""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import PlainTextResponse, Response

PREFLIGHT_METHOD = "OPTIONS"
ALLOWED_REQUEST_HEADERS = "authorization, x-client-info, apikey, content-type"

logger = logging.getLogger(__name__)


def cors_headers(method: str) -> dict[str, str]:
    """Fixed CORS header set for an endpoint accepting ``method``."""
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Headers": ALLOWED_REQUEST_HEADERS,
        "Access-Control-Allow-Methods": f"{method}, {PREFLIGHT_METHOD}",
    }


def handle_preflight(request: Request, method: str) -> Response | None:
    """Return the terminal preflight response, or ``None`` to continue the pipeline."""
    if request.method.upper() != PREFLIGHT_METHOD:
        return None

    logger.info("cors.preflight path=%s allow_methods=%s", request.url.path, method)
    return PlainTextResponse("ok", status_code=200, headers=cors_headers(method))
