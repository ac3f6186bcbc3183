# API routers
from .actors import router as actors_router
from .shows import router as shows_router
from .seasons import router as seasons_router
from .episodes import router as episodes_router
from .characters import router as characters_router

__all__ = [
    "actors_router",
    "shows_router",
    "seasons_router",
    "episodes_router",
    "characters_router",
]
