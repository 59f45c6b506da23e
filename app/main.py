"""
➡️ But : assembler toutes les pièces du puzzle.

create_app(settings) crée l’instance FastAPI et configure :

logs, titre, version, tags

schéma OpenAPI personnalisé

gestion des erreurs métier -> codes HTTP

engine SQL et stockage S3 (optionnels, construits une seule fois, rangés dans app.state)

Inclut les routers (/api/todos, /health) et initialise la table au démarrage (lifespan).

Point unique d’exécution : uvicorn app.main:app --reload.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from app.api.routers import health, todos
from app.core.config import Settings, get_settings
from app.core.errors import register_exception_handlers
from app.core.logging import configure_logging
from app.core.openapi import custom_openapi
from app.db.session import build_engine, init_db
from app.features.attachments.services import build_blob_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(app.state.engine)
    yield
    if app.state.engine is not None:
        app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        openapi_tags=[
            {"name": "todos", "description": "Todos and their attachments"},
            {"name": "health", "description": "Service status"},
        ],
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.blob_store = build_blob_store(settings)

    register_exception_handlers(app)

    # Routers
    app.include_router(todos.router, prefix="/api")
    app.include_router(health.router)

    # Génération du schéma OpenAPI custom
    app.openapi = lambda: custom_openapi(app)

    logger.info(
        "%s ready (env=%s, database=%s, storage=%s)",
        settings.APP_NAME,
        settings.ENV,
        "on" if app.state.engine is not None else "off",
        "on" if app.state.blob_store is not None else "off",
    )
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=get_settings().HOST,
        port=get_settings().PORT,
        reload=(get_settings().ENV == "dev"),
    )
