"""
FastAPI application factory

main_asyncio.py and the tests both build the app here; the tests swap in
their own service container through api.dependencies. Interactive docs
live at /docs and /redoc unless disabled.
"""

from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import dashboard, system
from api.middleware.error_handler import register_exception_handlers
from utils.logger import get_logger
from models.enums import LogCategory

log = get_logger().for_category(LogCategory.API)

API_PREFIX = "/api/v1"
SERVICE_NAME = "painel-ambiental-api"
VERSION = "1.0.0"

# used when the config gives no origins: local front-end dev servers
DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def create_app(
    cors_origins: Optional[List[str]] = None,
    docs_enabled: bool = True,
) -> FastAPI:
    """
    Build the dashboard API: /api/v1/dashboard/*, /api/v1/system/*,
    a liveness check at /api/health and a small index at /.
    """
    app = FastAPI(
        title="Painel Ambiental",
        description="Count-up indicators, live values, charts and map of the environmental dashboard",
        version=VERSION,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )

    origins = cors_origins or DEV_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    for router in (dashboard.router, system.router):
        app.include_router(router, prefix=API_PREFIX)

    @app.get("/api/health", tags=["System"], summary="Liveness check")
    async def liveness():
        return {"status": "healthy", "service": SERVICE_NAME, "version": VERSION}

    @app.get("/", include_in_schema=False)
    async def index():
        return {
            "service": SERVICE_NAME,
            "docs": "/docs" if docs_enabled else None,
            "health": "/api/health",
            "api": API_PREFIX,
        }

    log.info(f"API ready under {API_PREFIX}", cors=", ".join(origins), docs=docs_enabled)
    return app
