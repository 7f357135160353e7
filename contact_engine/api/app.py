"""FastAPI application factory.

Lifespan
--------
The shared headless browser is launched lazily by the first request that
needs rendering.  On shutdown the lifespan closes it, so the browser never
outlives the server process.

Routers
-------
    /contacts   contact discovery for one business website
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contact_engine.api.routers import contacts as contacts_router
from contact_engine.scraper.renderer import renderer


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Shut the shared renderer down when the server stops."""
    try:
        yield
    finally:
        renderer.shutdown()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Contact Discovery API",
        description=(
            "Finds the people named on a small-business website, the email "
            "addresses it publishes, and which person owns which address."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(contacts_router.router, prefix="/contacts", tags=["contacts"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn contact_engine.api.app:app --reload
app = create_app()
