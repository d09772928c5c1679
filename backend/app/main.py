"""
Main application module for the area mesh backend.

This file sets up the FastAPI application, configures CORS so the map
frontend can make cross-origin requests, mounts the static frontend
files when they exist, and exposes a simple health check endpoint.

The area kernel routes and the layer routes are included under the
`/api` namespace.
"""

import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .api.routes_areas import router as areas_router
from .api.routes_layers import router as layers_router
from .services.area_layers import mesh_worker_count
from .services.layers_store import init_db

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Factory to create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance.
    """
    app = FastAPI(title="Area mesh backend")

    # The schema must exist before the first layer request.
    @app.on_event("startup")  # type: ignore[misc]
    async def startup_event() -> None:
        init_db()
        logger.info(
            "Area backend started (mesh workers=%s, debug=%s)",
            mesh_worker_count(),
            bool(os.getenv("AREA_DEBUG")),
        )

    # Allow all origins by default.  Restrict this in production.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(areas_router, prefix="/api", tags=["areas"])
    app.include_router(layers_router, prefix="/api", tags=["layers"])

    # Serve the compiled frontend from the repository's frontend directory.
    frontend_dir = Path(__file__).resolve().parents[2] / "frontend"
    if frontend_dir.exists():
        app.mount(
            "/",
            StaticFiles(directory=str(frontend_dir), html=True),
            name="frontend",
        )

    return app


# Uvicorn imports this when running `uvicorn app.main:app` from backend/.
app = create_app()
