from .settings import router as settings_router
from .system import router as system_router

__all__ = [
    "settings_router",
    "system_router",
]
