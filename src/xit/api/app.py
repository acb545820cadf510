"""Builds the FastAPI app that exposes xit! files over HTTP."""

from pathlib import Path

from fastapi import APIRouter, FastAPI

from xit.api.routes import register_routes


def create_app(root: Path) -> FastAPI:
    """
    App whose /api routes read, format and edit the xit! files under ``root``.

    The interactive docs live at /api/docs so every route shares one prefix.
    """
    app = FastAPI(
        title="xit-tools",
        description="Parse, format and edit xit! task lists",
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
    )

    router = APIRouter(prefix="/api")
    register_routes(router, root)
    app.include_router(router)

    return app
