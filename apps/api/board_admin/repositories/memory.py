"""In-memory store used for local development and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from board_admin.adapters.store.base import StoreError, UniqueViolation
from board_admin.schemas.auth import Role

_UNIQUE_VIOLATION_CODE = "23505"
_INJECTED_FAILURE_CODE = "XX000"


@dataclass(slots=True)
class ProfileRecord:
    id: str
    role: Role
    created_at: datetime


@dataclass(slots=True)
class BoardRecord:
    id: str
    short_name: str
    name: str
    description: str | None
    created_at: datetime


@dataclass(slots=True)
class InMemoryStore:
    """Simple, deterministic persistence layer with call bookkeeping."""

    profiles: dict[str, ProfileRecord] = field(default_factory=dict)
    boards: dict[str, BoardRecord] = field(default_factory=dict)
    principal_lookup_count: int = 0
    role_lookup_count: int = 0
    board_insert_attempts: int = 0
    board_delete_attempts: int = 0
    role_lookup_failure_message: str | None = None
    insert_failure_message: str | None = None
    delete_failure_message: str | None = None

    @property
    def call_count(self) -> int:
        return (
            self.principal_lookup_count
            + self.role_lookup_count
            + self.board_insert_attempts
            + self.board_delete_attempts
        )

    def add_profile(self, user_id: str, role: Role = Role.USER) -> ProfileRecord:
        profile = ProfileRecord(id=user_id, role=role, created_at=datetime.now(UTC))
        self.profiles[user_id] = profile
        return profile

    def add_board(self, short_name: str, name: str, description: str | None = None) -> BoardRecord:
        board = BoardRecord(
            id=str(uuid4()),
            short_name=short_name,
            name=name,
            description=description,
            created_at=datetime.now(UTC),
        )
        self.boards[board.id] = board
        return board

    def get_profile(self, user_id: str) -> ProfileRecord | None:
        self.role_lookup_count += 1
        if self.role_lookup_failure_message is not None:
            raise StoreError(self.role_lookup_failure_message, code=_INJECTED_FAILURE_CODE)
        return self.profiles.get(user_id)

    def insert_board(self, *, short_name: str, name: str, description: str | None) -> BoardRecord:
        self.board_insert_attempts += 1
        if self.insert_failure_message is not None:
            raise StoreError(self.insert_failure_message, code=_INJECTED_FAILURE_CODE)
        if any(board.short_name == short_name for board in self.boards.values()):
            raise UniqueViolation(
                'duplicate key value violates unique constraint "boards_short_name_key"',
                code=_UNIQUE_VIOLATION_CODE,
            )
        return self.add_board(short_name=short_name, name=name, description=description)

    def delete_boards(self, *, board_id: str) -> list[str]:
        self.board_delete_attempts += 1
        if self.delete_failure_message is not None:
            raise StoreError(self.delete_failure_message, code=_INJECTED_FAILURE_CODE)
        removed = self.boards.pop(board_id, None)
        return [removed.id] if removed is not None else []
