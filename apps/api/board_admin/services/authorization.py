"""Caller authentication and role authorization."""

from __future__ import annotations

import logging

from board_admin.adapters.store import (
    CredentialRejected,
    PrivilegedHandle,
    RowNotFound,
    ScopedHandle,
    StoreError,
)
from board_admin.core.logging_safety import safe_log_identifier
from board_admin.errors import AuthenticationError, PermissionDenied, ProfileNotFound, RoleLookupError
from board_admin.schemas.auth import Role

logger = logging.getLogger(__name__)


async def authorize(scoped: ScopedHandle, privileged: PrivilegedHandle, required_role: Role) -> None:
    """Verify the caller's credential and require an exact role match.

    Raises ``AuthenticationError`` (401) when the credential does not resolve,
    ``ProfileNotFound`` (404) when the principal has no profile row,
    ``RoleLookupError`` (500) on any other profile lookup failure, and
    ``PermissionDenied`` (403) when the stored role differs from
    ``required_role``. Roles are not ordered: ``admin`` does not satisfy a
    ``janitor`` requirement.
    """
    try:
        principal = await scoped.resolve_principal()
    except CredentialRejected as exc:
        logger.warning("auth.rejected reason=token_verification_failed code=%s", exc.code or "-")
        raise AuthenticationError() from exc

    safe_principal_id = safe_log_identifier(principal.user_id, prefix="pid")
    logger.info("auth.accepted principal_id=%s", safe_principal_id)

    try:
        role = await privileged.query_role(principal.user_id)
    except RowNotFound as exc:
        logger.warning("auth.profile_missing principal_id=%s", safe_principal_id)
        raise ProfileNotFound() from exc
    except StoreError as exc:
        logger.error(
            "auth.role_lookup_failed principal_id=%s code=%s",
            safe_principal_id,
            exc.code or "-",
        )
        raise RoleLookupError() from exc

    if role != required_role:
        logger.warning(
            "auth.forbidden principal_id=%s role=%s required_role=%s",
            safe_principal_id,
            role.value,
            required_role.value,
        )
        raise PermissionDenied(required_role.value)

    logger.info("auth.authorized principal_id=%s role=%s", safe_principal_id, role.value)
