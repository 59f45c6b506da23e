"""
➡️ But : Encapsuler toutes les opérations de base de données sur la table todos.

TodoRepository : CRUD par clé primaire, tri du plus récent au plus ancien.

Ne contient aucune logique métier, juste de la persistance ; lève NotFound / ValidationError.
"""

from typing import Optional, Sequence
from sqlmodel import col, select

from app.core.errors import NotFound, ValidationError
from app.db.models.base import utcnow
from app.db.models.todos import Todo
from app.db.repositories.base import BaseRepository


# Colonne id INTEGER (SERIAL sous Postgres) : au-delà, aucune ligne ne peut exister
MAX_ID = 2**31 - 1


class TodoRepository(BaseRepository[Todo]):
    model = Todo

    def list_all(self) -> Sequence[Todo]:
        statement = select(Todo).order_by(col(Todo.created_at).desc(), col(Todo.id).desc())
        with self._guard():
            return self.session.exec(statement).all()

    def get(self, todo_id: int) -> Todo:
        if not 0 < todo_id <= MAX_ID:
            raise NotFound()
        todo = self.find(todo_id)
        if todo is None:
            raise NotFound()
        return todo

    def insert(
        self,
        *,
        title: str,
        description: Optional[str] = None,
        file_url: Optional[str] = None,
        file_name: Optional[str] = None,
        file_key: Optional[str] = None,
    ) -> Todo:
        if not title:
            raise ValidationError("title required")
        now = utcnow()
        return self.add(
            title=title,
            description=description,
            file_url=file_url,
            file_name=file_name,
            file_key=file_key,
            created_at=now,
            updated_at=now,
        )

    def update(self, todo_id: int, *, title: str, description: Optional[str], completed: bool) -> Todo:
        if not title:
            raise ValidationError("title required")
        todo = self.get(todo_id)
        return self.save(
            todo,
            title=title,
            description=description,
            completed=completed,
            updated_at=utcnow(),
        )

    def delete(self, todo_id: int) -> None:
        if not 0 < todo_id <= MAX_ID or not self.remove(todo_id):
            raise NotFound()
