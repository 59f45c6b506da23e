"""Crée la table todos sans démarrer le serveur : python -m scripts.init_db"""

import sys

from sqlmodel import Session

from app.core.config import get_settings
from app.core.logging import configure_logging
from app.db.repositories.todos import TodoRepository
from app.db.session import build_engine


def run_init() -> int:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    engine = build_engine(settings)
    if engine is None:
        print("DATABASE_URL (or SQLITE_PATH) is not set", file=sys.stderr)
        return 1
    with Session(engine) as session:
        TodoRepository(session).initialize()
    print("todos table ready")
    return 0


if __name__ == "__main__":
    sys.exit(run_init())
