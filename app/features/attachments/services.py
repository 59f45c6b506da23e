"""
➡️ But : Stocker les pièces jointes dans le bucket S3 (DigitalOcean Spaces, MinIO…).

BlobStore.upload() : écrit les octets sous une clé unique en public-read, retourne URL + clé + nom affiché.
BlobStore.delete() : supprime un objet par sa clé ; un objet déjà absent n'est pas une erreur.

Les erreurs du SDK sont traduites en UploadError / DeleteError / StorageTimeout ;
c'est le service appelant qui décide de les absorber.
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from botocore.exceptions import BotoCoreError, ClientError, ConnectTimeoutError, ReadTimeoutError
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings
from app.core.errors import DeleteError, StorageTimeout, UploadError
from app.utils.media_files import build_object_key
from app.utils.s3 import make_s3_client, public_url_for

logger = logging.getLogger(__name__)

_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


@dataclass(frozen=True)
class StoredBlob:
    url: str
    key: str
    display_name: str


class BlobStore:
    def __init__(
        self,
        settings: Settings,
        *,
        s3_client_factory: Callable[[Settings], object] = make_s3_client,
    ):
        self.settings = settings
        self.bucket = str(settings.S3_BUCKET)
        self._s3 = s3_client_factory(settings)

    def url_for(self, key: str) -> str:
        return public_url_for(
            key,
            endpoint=str(self.settings.S3_ENDPOINT),
            bucket=self.bucket,
            public_base=self.settings.S3_PUBLIC_URL,
        )

    def _put(self, key: str, data: bytes, content_type: str) -> None:
        self._s3.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
            ACL="public-read",
            Metadata={"sha256": hashlib.sha256(data).hexdigest()},
        )

    async def upload(self, data: bytes, original_name: str, content_type: str) -> StoredBlob:
        key = build_object_key(prefix=self.settings.UPLOAD_PREFIX, original_name=original_name)
        try:
            await run_in_threadpool(self._put, key, data, content_type)
        except (ConnectTimeoutError, ReadTimeoutError) as e:
            raise StorageTimeout("storage") from e
        except (BotoCoreError, ClientError) as e:
            raise UploadError(f"Upload of {key} failed: {e}") from e
        logger.info("Uploaded %s (%d bytes) to bucket %s", key, len(data), self.bucket)
        return StoredBlob(url=self.url_for(key), key=key, display_name=original_name)

    def delete(self, key: str) -> None:
        try:
            self._s3.delete_object(Bucket=self.bucket, Key=key)
        except (ConnectTimeoutError, ReadTimeoutError) as e:
            raise StorageTimeout("storage") from e
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_CODES:
                logger.info("Object %s already absent from bucket %s", key, self.bucket)
                return
            raise DeleteError(f"Delete of {key} failed: {e}") from e
        except BotoCoreError as e:
            raise DeleteError(f"Delete of {key} failed: {e}") from e


def build_blob_store(settings: Settings) -> Optional[BlobStore]:
    if not settings.storage_configured:
        logger.warning("S3 storage not configured: attachments disabled")
        return None
    return BlobStore(settings)
