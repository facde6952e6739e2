"""Dependency wiring for routes."""

from __future__ import annotations

from typing import Annotated
from uuid import uuid4

from fastapi import Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from board_admin.services.pipeline import PipelineContext

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_pipeline_context(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
) -> PipelineContext:
    """Collect the application-scoped collaborators for one invocation.

    The bearer credential is only extracted here; it is checked once the
    pipeline has passed CORS, the method check and the configuration check.
    """
    state = request.app.state
    return PipelineContext(
        settings=state.settings,
        correlation_id=_request_correlation_id(request),
        credentials=credentials,
        store=getattr(state, "store", None),
        transport=getattr(state, "http_transport", None),
    )
