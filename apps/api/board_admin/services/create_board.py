"""Board creation: payload validation and insert."""

from __future__ import annotations

import logging
import re
from typing import Any

from board_admin.adapters.store import BOARDS_TABLE, PrivilegedHandle, StoreError, UniqueViolation
from board_admin.errors import Conflict, MutationError, ValidationError
from board_admin.schemas.board import Board, BoardInsert, CreateBoardInput, CreateBoardResponse
from board_admin.services.pipeline import BoardPipeline

logger = logging.getLogger(__name__)

_SHORT_NAME_PATTERN = re.compile(r"[a-z0-9_]+")
_SHORT_NAME_MAX_LENGTH = 10
_NAME_MAX_LENGTH = 100
_DESCRIPTION_MAX_LENGTH = 500


def _utf16_length(value: str) -> int:
    """Length in UTF-16 code units, the unit browser clients count in."""
    return len(value.encode("utf-16-le", "surrogatepass")) // 2


def validate_create_board_payload(payload: dict[str, Any]) -> CreateBoardInput:
    short_name = payload.get("short_name")
    name = payload.get("name")
    description = payload.get("description")

    if not isinstance(short_name, str) or not short_name or not isinstance(name, str) or not name:
        raise ValidationError("Missing or invalid required string fields: short_name, name")
    if description == "":
        description = None
    if description is not None and not isinstance(description, str):
        raise ValidationError("Invalid description field type (must be string or null)")

    if not _SHORT_NAME_PATTERN.fullmatch(short_name) or len(short_name) > _SHORT_NAME_MAX_LENGTH:
        raise ValidationError("Short name must be 1-10 lowercase letters, numbers, or underscores.")
    if _utf16_length(name) > _NAME_MAX_LENGTH:
        raise ValidationError("Name must be between 1 and 100 characters.")
    if description is not None and _utf16_length(description) > _DESCRIPTION_MAX_LENGTH:
        raise ValidationError("Description cannot exceed 500 characters.")

    return CreateBoardInput(short_name=short_name, name=name, description=description)


async def insert_board(privileged: PrivilegedHandle, data: CreateBoardInput) -> Board:
    logger.info("board.create_attempt short_name=%s", data.short_name)
    values = BoardInsert(short_name=data.short_name, name=data.name, description=data.description)
    try:
        row = await privileged.insert_row(BOARDS_TABLE, values)
    except UniqueViolation as exc:
        raise Conflict(f"Board short name '/{data.short_name}/' already exists.") from exc
    except StoreError as exc:
        raise MutationError("Failed to create board due to a server error.") from exc

    board = Board.model_validate(row)
    logger.info("board.created board_id=%s short_name=%s", board.id, board.short_name)
    return board


class CreateBoardPipeline(BoardPipeline[CreateBoardInput]):
    name = "create-board"
    method = "POST"

    def validate(self, payload: dict[str, Any]) -> CreateBoardInput:
        return validate_create_board_payload(payload)

    async def execute(self, privileged: PrivilegedHandle, data: CreateBoardInput) -> dict[str, Any]:
        board = await insert_board(privileged, data)
        return CreateBoardResponse(board=board).model_dump(mode="json")
