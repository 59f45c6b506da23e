"""
➡️ But : Contenir la logique métier : orchestrer le repository et le stockage S3, appliquer les règles.

TodoService :
- valide le titre avant tout effet de bord ;
- pièce jointe "best effort" : un upload raté n'empêche pas la création ;
- suppression : l'objet S3 est supprimé si possible, la ligne l'est toujours ;
- lève des erreurs métier (app.core.errors), traduites en HTTP par l'app.

Repository et stockage sont optionnels : sans base, tout lève StoreUnavailable.
"""

import logging
from typing import Optional, Sequence

from starlette.concurrency import run_in_threadpool

from app.core.errors import DeleteError, StorageTimeout, StoreUnavailable, UploadError, ValidationError
from app.db.models.todos import Todo
from app.db.repositories.todos import TodoRepository
from app.features.attachments.services import BlobStore, StoredBlob
from app.utils.media_files import IncomingFile

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 255


def _clean_title(title: Optional[str]) -> str:
    if title is None or not title.strip():
        raise ValidationError("title required")
    title = title.strip()
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"title must be at most {TITLE_MAX_LENGTH} characters")
    return title


class TodoService:
    def __init__(self, repo: Optional[TodoRepository], blobs: Optional[BlobStore] = None):
        self._repo = repo
        self.blobs = blobs

    @property
    def repo(self) -> TodoRepository:
        if self._repo is None:
            raise StoreUnavailable("database")
        return self._repo

    def list(self) -> Sequence[Todo]:
        return self.repo.list_all()

    def get(self, todo_id: int) -> Todo:
        return self.repo.get(todo_id)

    async def create(
        self,
        title: Optional[str],
        description: Optional[str] = None,
        file: Optional[IncomingFile] = None,
    ) -> Todo:
        title = _clean_title(title)
        repo = self.repo

        stored: Optional[StoredBlob] = None
        if file is not None:
            stored = await self._try_upload(file)

        # Écriture bloquante hors de la boucle d'événements
        return await run_in_threadpool(
            repo.insert,
            title=title,
            description=description,
            file_url=stored.url if stored else None,
            file_name=stored.display_name if stored else None,
            file_key=stored.key if stored else None,
        )

    async def _try_upload(self, file: IncomingFile) -> Optional[StoredBlob]:
        if self.blobs is None:
            logger.warning("Storage not configured, dropping attachment %r", file.filename)
            return None
        try:
            return await self.blobs.upload(file.data, file.filename, file.content_type)
        except (UploadError, StorageTimeout) as e:
            logger.warning("Attachment upload failed, creating todo without it: %s", e)
            return None

    def update(self, todo_id: int, *, title: Optional[str], description: Optional[str], completed: bool) -> Todo:
        return self.repo.update(
            todo_id,
            title=_clean_title(title),
            description=description,
            completed=completed,
        )

    def delete(self, todo_id: int) -> dict:
        repo = self.repo
        todo = repo.get(todo_id)
        if todo.file_key:
            self._try_delete_blob(todo.file_key)
        repo.delete(todo_id)
        return {"message": "Todo deleted successfully"}

    def _try_delete_blob(self, key: str) -> None:
        if self.blobs is None:
            logger.warning("Storage not configured, leaving orphan object %s", key)
            return
        try:
            self.blobs.delete(key)
        except (DeleteError, StorageTimeout) as e:
            logger.warning("Could not delete attachment %s: %s", key, e)
