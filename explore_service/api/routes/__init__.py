from .home import router as home_router
from .explore import router as explore_router


__all__ = [
    # home.py
    "home_router",
    # explore.py
    "explore_router",
]
