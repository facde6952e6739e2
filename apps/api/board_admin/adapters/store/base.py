"""Identity and store backend interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from board_admin.schemas.auth import Principal, Role

BOARDS_TABLE = "boards"
PROFILES_TABLE = "profiles"


class StoreError(Exception):
    """Raised when the backing store rejects or fails a request."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        self.code = code
        super().__init__(message)


class CredentialRejected(StoreError):
    """Raised when the caller's credential does not resolve to a principal."""


class RowNotFound(StoreError):
    """Raised when a single-row lookup matched nothing."""


class UniqueViolation(StoreError):
    """Raised when an insert collides with a uniqueness constraint."""


class ScopedHandle(ABC):
    """Store access restricted to the caller's own credential."""

    @abstractmethod
    async def resolve_principal(self) -> Principal:
        """Resolve the presented credential to a principal."""

    async def aclose(self) -> None:
        return None


class PrivilegedHandle(ABC):
    """Store access that bypasses per-row authorization."""

    @abstractmethod
    async def query_role(self, principal_id: str) -> Role:
        """Return the stored role for ``principal_id``."""

    @abstractmethod
    async def insert_row(self, table: str, values: BaseModel) -> dict[str, Any]:
        """Insert one row and return it as persisted."""

    @abstractmethod
    async def delete_rows(self, table: str, match: Mapping[str, str]) -> list[str]:
        """Delete rows whose columns equal ``match`` and return their ids."""

    async def aclose(self) -> None:
        return None


__all__ = [
    "BOARDS_TABLE",
    "PROFILES_TABLE",
    "CredentialRejected",
    "PrivilegedHandle",
    "RowNotFound",
    "ScopedHandle",
    "StoreError",
    "UniqueViolation",
]
