"""Board schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class CreateBoardInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    short_name: str
    name: str
    description: str | None = None


class DeleteBoardInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str


class BoardInsert(BaseModel):
    """Values written to the ``boards`` table; the store generates the rest."""

    short_name: str
    name: str
    description: str | None = None


class Board(BaseModel):
    """Persisted ``boards`` row."""

    id: str
    short_name: str | None = None
    name: str | None = None
    description: str | None = None
    created_at: datetime


class CreateBoardResponse(BaseModel):
    success: bool = True
    board: Board


class DeleteBoardResponse(BaseModel):
    success: bool = True
