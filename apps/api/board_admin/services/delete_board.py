"""Board deletion: payload validation and delete."""

from __future__ import annotations

import logging
import re
from typing import Any

from board_admin.adapters.store import BOARDS_TABLE, PrivilegedHandle, StoreError
from board_admin.errors import MutationError, MutationNotFound, ValidationError
from board_admin.schemas.board import DeleteBoardInput, DeleteBoardResponse
from board_admin.services.pipeline import BoardPipeline

logger = logging.getLogger(__name__)

# Format check only; the store decides whether the id exists.
_BOARD_ID_PATTERN = re.compile(r"[0-9a-fA-F-]{36}")


def validate_delete_board_payload(payload: dict[str, Any]) -> DeleteBoardInput:
    board_id = payload.get("id")
    if not isinstance(board_id, str) or not board_id:
        raise ValidationError("Missing or invalid required field: id")
    if not _BOARD_ID_PATTERN.fullmatch(board_id):
        raise ValidationError("Invalid board id format (must be UUID)")
    return DeleteBoardInput(id=board_id)


async def delete_board(privileged: PrivilegedHandle, data: DeleteBoardInput) -> None:
    logger.info("board.delete_attempt board_id=%s", data.id)
    try:
        deleted_ids = await privileged.delete_rows(BOARDS_TABLE, {"id": data.id})
    except StoreError as exc:
        raise MutationError("Failed to delete board due to a database error.") from exc

    if not deleted_ids:
        raise MutationNotFound("Board not found.")
    logger.info("board.deleted board_id=%s", data.id)


class DeleteBoardPipeline(BoardPipeline[DeleteBoardInput]):
    name = "delete-board"
    method = "DELETE"

    def validate(self, payload: dict[str, Any]) -> DeleteBoardInput:
        return validate_delete_board_payload(payload)

    async def execute(self, privileged: PrivilegedHandle, data: DeleteBoardInput) -> dict[str, Any]:
        await delete_board(privileged, data)
        return DeleteBoardResponse().model_dump()
