from fastapi import FastAPI

from .context import create_app
from .lifecycle import app_lifespan
from .routes import settings_router, system_router


def build_app() -> FastAPI:
    app = create_app(lifespan=app_lifespan)
    app.include_router(settings_router)
    app.include_router(system_router)
    return app


app = build_app()

__all__ = ["app", "build_app"]
