"""Fixed-order request pipeline shared by the board endpoints."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import Any, Generic, TypeVar

import httpx
from fastapi import Request
from fastapi.responses import Response
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel

from board_admin.adapters.store import PrivilegedHandle
from board_admin.core.config import Settings
from board_admin.core.cors import handle_preflight
from board_admin.core.logging_safety import describe_payload_keys, safe_log_identifier
from board_admin.core.responses import error_response, success_response
from board_admin.errors import MethodNotAllowed, PipelineError, UnexpectedError, ValidationError
from board_admin.repositories.memory import InMemoryStore
from board_admin.schemas.auth import Role
from board_admin.services.authorization import authorize
from board_admin.services.identity_clients import build_identity_clients

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT", bound=BaseModel)


@dataclass(frozen=True, slots=True)
class PipelineContext:
    """Per-request collaborators resolved by the transport layer."""

    settings: Settings
    correlation_id: str
    credentials: HTTPAuthorizationCredentials | None = None
    store: InMemoryStore | None = None
    transport: httpx.AsyncBaseTransport | None = None


@dataclass(frozen=True, slots=True)
class Outcome:
    """Result of one pipeline run: a success body or a typed error."""

    body: dict[str, Any] | None = None
    error: PipelineError | None = None
    cause: BaseException | None = None

    @classmethod
    def success(cls, body: dict[str, Any]) -> Outcome:
        return cls(body=body)

    @classmethod
    def failure(cls, error: PipelineError, cause: BaseException | None = None) -> Outcome:
        return cls(error=error, cause=cause)

    @property
    def ok(self) -> bool:
        return self.error is None


async def read_json_object(request: Request) -> dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError as exc:
        raise ValidationError("Invalid JSON body.") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON body.")
    return payload


class BoardPipeline(ABC, Generic[InputT]):
    """One endpoint: CORS, method check, clients, validation, authorization, mutation.

    Subclasses declare ``name``, ``method`` and ``required_role`` and provide the
    payload validator and the single mutation.
    """

    name: str
    method: str
    required_role: Role = Role.ADMIN

    @abstractmethod
    def validate(self, payload: dict[str, Any]) -> InputT:
        """Return the validated input or raise ``ValidationError``."""

    @abstractmethod
    async def execute(self, privileged: PrivilegedHandle, data: InputT) -> dict[str, Any]:
        """Run the mutation and return the success body."""

    async def handle(self, request: Request, context: PipelineContext) -> Response:
        preflight = handle_preflight(request, self.method)
        if preflight is not None:
            return preflight

        outcome = await self.run(request, context)
        response = self.render(outcome)
        response.headers["X-Correlation-Id"] = context.correlation_id
        return response

    async def run(self, request: Request, context: PipelineContext) -> Outcome:
        logger.info(
            "pipeline.started endpoint=%s method=%s correlation_id=%s",
            self.name,
            request.method,
            safe_log_identifier(context.correlation_id, prefix="cid"),
        )
        try:
            if request.method.upper() != self.method:
                raise MethodNotAllowed()

            clients = await build_identity_clients(
                request,
                context.settings,
                context.credentials,
                store=context.store,
                transport=context.transport,
            )
            async with clients:
                payload = await read_json_object(request)
                logger.debug("pipeline.payload endpoint=%s keys=%s", self.name, describe_payload_keys(payload))
                data = self.validate(payload)
                await authorize(clients.scoped, clients.privileged, self.required_role)
                body = await self.execute(clients.privileged, data)
        except PipelineError as exc:
            return Outcome.failure(exc, cause=exc.__cause__)
        except Exception as exc:
            return Outcome.failure(UnexpectedError(), cause=exc)

        logger.info("pipeline.succeeded endpoint=%s", self.name)
        return Outcome.success(body)

    def render(self, outcome: Outcome) -> Response:
        if outcome.error is not None:
            return error_response(
                outcome.error.message,
                outcome.error.status_code,
                method=self.method,
                cause=outcome.cause,
            )
        return success_response(outcome.body or {"success": True}, method=self.method)
