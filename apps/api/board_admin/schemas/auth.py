"""Authentication schemas."""

from enum import Enum

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Roles stored on the ``profiles`` table, compared by strict equality."""

    USER = "user"
    JANITOR = "janitor"
    ADMIN = "admin"


class Principal(BaseModel):
    """Identity resolved from a bearer credential."""

    user_id: str = Field(min_length=1)
