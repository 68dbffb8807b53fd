# venue_admin/storage/minio_storage.py
import io
import logging
from typing import Optional
from urllib.parse import quote, unquote

from minio import Minio
from starlette.concurrency import run_in_threadpool

from venue_admin.core.config import MinIOConfig
from .base import StorageBackend, StorageError, StoredObject

logger = logging.getLogger(__name__)


class MinIOStorage(StorageBackend):
    def __init__(self, client: Minio, public_base_url: str, cache_control: str = "max-age=3600"):
        self.client = client
        self.public_base_url = public_base_url.rstrip("/")
        self.cache_control = cache_control

    @classmethod
    def from_config(cls, config: MinIOConfig, cache_control: str = "max-age=3600") -> "MinIOStorage":
        client = Minio(
            config.MINIO_ENDPOINT,
            access_key=config.MINIO_ACCESS_KEY,
            secret_key=config.MINIO_SECRET_KEY.get_secret_value(),
            secure=config.MINIO_SECURE,
        )
        return cls(client, config.public_base_url, cache_control=cache_control)

    def _exists(self, bucket: str, path: str) -> bool:
        for obj in self.client.list_objects(bucket, prefix=path):
            if obj.object_name == path:
                return True
        return False

    async def store(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        overwrite: bool = False,
    ) -> None:
        def _put():
            if not overwrite and self._exists(bucket, path):
                raise StorageError(f"Object {bucket}/{path} already exists")
            self.client.put_object(
                bucket,
                path,
                io.BytesIO(data),
                length=len(data),
                content_type=content_type,
                metadata={"Cache-Control": self.cache_control},
            )

        try:
            await run_in_threadpool(_put)
        except StorageError:
            raise
        except Exception as e:
            # S3Error and transport errors from urllib3 alike
            raise StorageError(f"Could not save {bucket}/{path}: {e}") from e
        logger.info(f"Stored {bucket}/{path} ({len(data)} bytes)")

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/{bucket}/{quote(path)}"

    async def delete(self, bucket: str, path: str) -> None:
        try:
            await run_in_threadpool(self.client.remove_object, bucket, path)
        except Exception as e:
            raise StorageError(f"Could not delete {bucket}/{path}: {e}") from e
        logger.info(f"Deleted {bucket}/{path}")

    def parse_public_url(self, url: str) -> Optional[StoredObject]:
        prefix = f"{self.public_base_url}/"
        if not url or not url.startswith(prefix):
            return None
        rest = url[len(prefix):].split("?", 1)[0]
        bucket, _, path = rest.partition("/")
        if not bucket or not path:
            return None
        return StoredObject(bucket=bucket, path=unquote(path))
