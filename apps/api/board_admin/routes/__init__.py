"""Route modules."""

from .boards import router as boards_router

__all__ = ["boards_router"]
