"""
➡️ But : Centraliser les dépendances réutilisables des routes.

get_settings_dep() : la configuration construite au démarrage (app.state).
get_todo_repository() / get_blob_store() : collaborateurs optionnels (None si non configurés).
get_todo_service() : TodoService prêt à l'emploi.

🔹 Les tests remplacent ces dépendances via app.dependency_overrides.
"""

from typing import Optional

from fastapi import Depends, Request
from sqlmodel import Session

from app.core.config import Settings
from app.db.repositories.todos import TodoRepository
from app.db.session import get_session
from app.features.attachments.services import BlobStore
from app.features.todos.services import TodoService


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


# -----------------------------
# Repositories / stockage
# -----------------------------
def get_todo_repository(session: Optional[Session] = Depends(get_session)) -> Optional[TodoRepository]:
    return TodoRepository(session) if session is not None else None


def get_blob_store(request: Request) -> Optional[BlobStore]:
    return request.app.state.blob_store


# -----------------------------
# Todo service
# -----------------------------
def get_todo_service(
    repo: Optional[TodoRepository] = Depends(get_todo_repository),
    blobs: Optional[BlobStore] = Depends(get_blob_store),
) -> TodoService:
    return TodoService(repo=repo, blobs=blobs)
