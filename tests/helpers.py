"""Test doubles and builders shared by the test modules."""
from app.core.config import Settings
from app.core.errors import DeleteError, UploadError
from app.features.attachments.services import StoredBlob
from app.utils.media_files import build_object_key


class FakeBlobStore:
    """In-memory stand-in for BlobStore, recording every call."""

    def __init__(self, fail_upload=False, fail_delete=False):
        self.fail_upload = fail_upload
        self.fail_delete = fail_delete
        self.objects = {}
        self.uploads = []
        self.deleted = []

    async def upload(self, data, original_name, content_type):
        self.uploads.append(original_name)
        if self.fail_upload:
            raise UploadError("bucket unreachable")
        key = build_object_key(prefix="uploads", original_name=original_name)
        self.objects[key] = (data, content_type)
        return StoredBlob(url=f"https://cdn.test/{key}", key=key, display_name=original_name)

    def delete(self, key):
        self.deleted.append(key)
        if self.fail_delete:
            raise DeleteError("access denied")
        self.objects.pop(key, None)


def make_settings(**overrides):
    values = dict(
        ENV="test",
        LOG_LEVEL="WARNING",
        DATABASE_URL=None,
        SQLITE_PATH=None,
        S3_ENDPOINT=None,
        S3_KEY=None,
        S3_SECRET=None,
        S3_BUCKET=None,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)
