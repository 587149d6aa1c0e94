"""FastAPI application for the outfit engines."""
from __future__ import annotations

from fastapi import FastAPI

from outfit_engines.service.routes import router


def create_app() -> FastAPI:
    app = FastAPI(title="Outfit Engines", version="0.1.0")
    app.include_router(router)
    return app


app = create_app()
