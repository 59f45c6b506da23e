"""
➡️ But : Configurer la connexion à la base et gérer les sessions.

build_engine(settings) : engine SQLAlchemy, ou None si aucune base n'est configurée.

init_db(engine) : crée les tables à partir des modèles SQLModel (idempotent).

get_session() : dépendance FastAPI qui ouvre une session par requête (ou None sans base), puis la ferme proprement.
"""

import logging
from typing import Any, Dict, Iterator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Session, create_engine

# Import all models for creating all tables
from app.db.models.todos import Todo  # noqa: F401
from app.core.config import Settings

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> Optional[Engine]:
    url = settings.DATABASE_URL
    if not url:
        logger.warning("DATABASE_URL not set: todo endpoints will answer 503")
        return None

    is_sqlite = url.startswith("sqlite:")
    timeout = settings.DB_TIMEOUT_SECONDS

    connect_args: Dict[str, Any] = {}
    if is_sqlite:
        # Requis pour SQLite quand utilisé dans un app serveur (multi-threads)
        connect_args["check_same_thread"] = False
        connect_args["timeout"] = timeout
    elif url.startswith("postgresql"):
        connect_args["connect_timeout"] = timeout
        connect_args["options"] = f"-c statement_timeout={timeout * 1000}"

    engine_kwargs: Dict[str, Any] = {
        "echo": False,
        "connect_args": connect_args,
        "pool_pre_ping": not is_sqlite,  # ping utile pour Postgres/MySQL ; inutile pour SQLite
    }
    if not is_sqlite:
        engine_kwargs["pool_timeout"] = timeout

    return create_engine(url, **engine_kwargs)


def init_db(engine: Optional[Engine]) -> bool:
    """
    Crée les tables si elles n'existent pas ; sûr à chaque démarrage.
    Une base injoignable est loguée, pas fatale : l'API répondra 500/503 ensuite.
    """
    if engine is None:
        return False
    try:
        SQLModel.metadata.create_all(engine)
    except SQLAlchemyError:
        logger.exception("Database initialization failed")
        return False
    logger.info("Database initialized successfully")
    return True


def ping(engine: Optional[Engine]) -> bool:
    if engine is None:
        return False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Database ping failed: %s", e)
        return False
    return True


def get_session(request: Request) -> Iterator[Optional[Session]]:
    """
    Dépendance FastAPI : fournit une session par requête, None si pas de base.
    Utilisation :
        def route(..., session: Optional[Session] = Depends(get_session)):
            ...
    """
    engine: Optional[Engine] = request.app.state.engine
    if engine is None:
        yield None
        return
    with Session(engine) as session:
        yield session
