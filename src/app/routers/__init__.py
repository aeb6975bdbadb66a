"""API routers."""

from .game import router as game_router
from .ws import router as ws_router

__all__ = ["game_router", "ws_router"]
