"""Unit tests for TodoService with a real repository and a fake bucket."""
import asyncio
import logging
import threading

import pytest

from app.core.errors import NotFound, StorageTimeout, StoreUnavailable, ValidationError
from app.features.todos.services import TodoService
from app.utils.media_files import IncomingFile
from tests.helpers import FakeBlobStore

NOTE = IncomingFile(data=b"hello", filename="note.txt", content_type="text/plain")


def run(coro):
    return asyncio.run(coro)


class TestTodoService:
    """Test cases for TodoService."""

    def test_create_strips_title(self, repo):
        svc = TodoService(repo, FakeBlobStore())
        todo = run(svc.create("  Buy milk  ", "2%"))
        assert todo.title == "Buy milk"

    @pytest.mark.parametrize("title", [None, "", "  "])
    def test_create_requires_title_before_upload(self, repo, title):
        blobs = FakeBlobStore()
        svc = TodoService(repo, blobs)
        with pytest.raises(ValidationError, match="title required"):
            run(svc.create(title, None, NOTE))
        assert blobs.uploads == []
        assert repo.list_all() == []

    def test_create_with_attachment(self, repo):
        blobs = FakeBlobStore()
        todo = run(TodoService(repo, blobs).create("Buy milk", None, NOTE))
        [key] = blobs.objects
        assert todo.file_key == key
        assert todo.file_url.endswith(key)
        assert todo.file_name == "note.txt"

    def test_create_inserts_off_event_loop(self, repo, monkeypatch):
        threads = []
        insert = repo.insert

        def recording_insert(**kwargs):
            threads.append(threading.get_ident())
            return insert(**kwargs)

        monkeypatch.setattr(repo, "insert", recording_insert)

        async def scenario():
            loop_thread = threading.get_ident()
            todo = await TodoService(repo, FakeBlobStore()).create("Buy milk")
            return loop_thread, todo

        loop_thread, todo = run(scenario())
        assert todo.id is not None
        assert threads and threads[0] != loop_thread

    def test_upload_timeout_degrades(self, repo, caplog):
        class SlowBlobStore(FakeBlobStore):
            async def upload(self, data, original_name, content_type):
                raise StorageTimeout("storage")

        with caplog.at_level(logging.WARNING):
            todo = run(TodoService(repo, SlowBlobStore()).create("Buy milk", None, NOTE))
        assert todo.file_url is None and todo.file_name is None and todo.file_key is None
        assert "upload failed" in caplog.text

    def test_no_repository(self):
        svc = TodoService(None, FakeBlobStore())
        with pytest.raises(StoreUnavailable):
            svc.list()
        with pytest.raises(StoreUnavailable):
            run(svc.create("Buy milk"))
        with pytest.raises(StoreUnavailable):
            svc.delete(1)

    def test_update_unknown(self, repo):
        with pytest.raises(NotFound):
            TodoService(repo).update(1, title="x", description=None, completed=True)

    def test_delete_attempts_one_blob_delete(self, repo):
        blobs = FakeBlobStore()
        svc = TodoService(repo, blobs)
        todo = run(svc.create("Buy milk", None, NOTE))
        assert svc.delete(todo.id) == {"message": "Todo deleted successfully"}
        assert blobs.deleted == [todo.file_key]
        assert svc.list() == []

    def test_delete_without_storage_keeps_going(self, repo, caplog):
        todo = repo.insert(
            title="orphan",
            file_url="https://cdn.test/uploads/1-a.txt",
            file_name="a.txt",
            file_key="uploads/1-a.txt",
        )
        with caplog.at_level(logging.WARNING):
            TodoService(repo, None).delete(todo.id)
        assert repo.list_all() == []
        assert "uploads/1-a.txt" in caplog.text

    def test_delete_blob_timeout_swallowed(self, repo):
        class SlowBlobStore(FakeBlobStore):
            def delete(self, key):
                self.deleted.append(key)
                raise StorageTimeout("storage")

        blobs = SlowBlobStore()
        svc = TodoService(repo, blobs)
        todo = run(svc.create("Buy milk", None, NOTE))
        svc.delete(todo.id)
        assert len(blobs.deleted) == 1
        assert svc.list() == []

    def test_delete_unknown(self, repo):
        blobs = FakeBlobStore()
        with pytest.raises(NotFound):
            TodoService(repo, blobs).delete(5)
        assert blobs.deleted == []
