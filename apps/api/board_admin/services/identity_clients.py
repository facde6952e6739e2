"""Construction of the scoped and privileged store handles for one request."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from types import TracebackType

import httpx
from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials

from board_admin.adapters.store import (
    MemoryPrivilegedHandle,
    MemoryScopedHandle,
    PrivilegedHandle,
    ScopedHandle,
    SupabasePrivilegedHandle,
    SupabaseScopedHandle,
)
from board_admin.core.config import Settings
from board_admin.errors import AuthenticationError, ConfigurationError
from board_admin.repositories.memory import InMemoryStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IdentityClients:
    """Both handles for one invocation; closes them on exit."""

    scoped: ScopedHandle
    privileged: PrivilegedHandle

    async def __aenter__(self) -> IdentityClients:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        try:
            await self.scoped.aclose()
        finally:
            await self.privileged.aclose()


def _bearer_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials.strip():
        logger.warning(
            "auth.rejected method=%s path=%s reason=invalid_or_missing_bearer",
            request.method,
            request.url.path,
        )
        raise AuthenticationError()
    return credentials.credentials.strip()


async def build_identity_clients(
    request: Request,
    settings: Settings,
    credentials: HTTPAuthorizationCredentials | None,
    *,
    store: InMemoryStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> IdentityClients:
    """Build the caller-scoped and privileged handles for ``request``.

    Missing deployment configuration is a server fault and is checked before
    the caller's credential.
    """
    missing = [
        name
        for name, value in (
            ("SUPABASE_URL", settings.url),
            ("SUPABASE_ANON_KEY", settings.anon_key),
            ("SUPABASE_SERVICE_ROLE_KEY", settings.service_role_key),
        )
        if not value
    ]
    if missing:
        logger.error("identity_clients.config_missing missing=%s", ",".join(missing))
        raise ConfigurationError()

    token = _bearer_token(request, credentials)

    if settings.store_backend == "memory":
        if store is None:
            logger.error("identity_clients.config_missing missing=memory_store")
            raise ConfigurationError()
        clients = IdentityClients(
            scoped=MemoryScopedHandle(store, token),
            privileged=MemoryPrivilegedHandle(store),
        )
    else:
        scoped = SupabaseScopedHandle(
            url=settings.url,
            anon_key=settings.anon_key,
            authorization=f"Bearer {token}",
            transport=transport,
        )
        try:
            privileged = SupabasePrivilegedHandle(
                url=settings.url,
                service_role_key=settings.service_role_key,
                transport=transport,
            )
        except Exception:
            await scoped.aclose()
            raise
        clients = IdentityClients(scoped=scoped, privileged=privileged)

    logger.info("identity_clients.initialized backend=%s", settings.store_backend)
    return clients
