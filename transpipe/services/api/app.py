from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from transpipe.common.settings import get_settings
from transpipe.services.api.deps import get_launcher
from transpipe.services.api.routers import health, transcode

cfg = get_settings()


@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    # running encoders keep going; only stop accepting new reapers
    if get_launcher.cache_info().currsize:
        get_launcher().shutdown(wait=False)
        get_launcher.cache_clear()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Transpipe API",
        version="0.1.0",
        docs_url=f"{cfg.api.prefix}/docs",
        openapi_url=f"{cfg.api.prefix}/openapi.json",
        lifespan=_lifespan,
    )

    # Routers
    app.include_router(health.router)
    app.include_router(transcode.router)
    return app

app = create_app()
