"""In-memory store handles for local development and tests."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from board_admin.adapters.store.base import (
    BOARDS_TABLE,
    CredentialRejected,
    PrivilegedHandle,
    RowNotFound,
    ScopedHandle,
    StoreError,
)
from board_admin.schemas.auth import Principal, Role

if TYPE_CHECKING:
    from board_admin.repositories.memory import InMemoryStore


class MemoryScopedHandle(ScopedHandle):
    """Accepts deterministic test tokens only.

    Expected token format: ``test:<user_id>``
    """

    def __init__(self, store: InMemoryStore, credential: str) -> None:
        self._store = store
        self._credential = credential

    async def resolve_principal(self) -> Principal:
        self._store.principal_lookup_count += 1
        parts = self._credential.split(":")
        if len(parts) != 2 or parts[0] != "test":
            raise CredentialRejected("invalid JWT")

        user_id = parts[1].strip()
        if not user_id:
            raise CredentialRejected("token missing subject")
        return Principal(user_id=user_id)


class MemoryPrivilegedHandle(PrivilegedHandle):
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def query_role(self, principal_id: str) -> Role:
        profile = self._store.get_profile(principal_id)
        if profile is None:
            raise RowNotFound("JSON object requested, multiple (or no) rows returned", code="PGRST116")
        return profile.role

    async def insert_row(self, table: str, values: BaseModel) -> dict[str, Any]:
        _require_boards_table(table)
        record = self._store.insert_board(**values.model_dump())
        return asdict(record)

    async def delete_rows(self, table: str, match: Mapping[str, str]) -> list[str]:
        _require_boards_table(table)
        if set(match) != {"id"}:
            raise StoreError(f"unsupported delete filter: {sorted(match)}")
        return self._store.delete_boards(board_id=match["id"])


def _require_boards_table(table: str) -> None:
    if table != BOARDS_TABLE:
        raise StoreError(f'relation "{table}" does not exist', code="42P01")


__all__ = ["MemoryPrivilegedHandle", "MemoryScopedHandle"]
