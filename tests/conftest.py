import os

os.environ.setdefault("DB__DB_HOST", "localhost")
os.environ.setdefault("DB__DB_NAME", "venue_admin_test")
os.environ.setdefault("DB__DB_USER", "test")
os.environ.setdefault("DB__DB_PASSWORD", "test")
os.environ.setdefault("MINIO__MINIO_ENDPOINT", "minio.test:9000")
os.environ.setdefault("MINIO__MINIO_ACCESS_KEY", "test")
os.environ.setdefault("MINIO__MINIO_SECRET_KEY", "test")
os.environ.setdefault("MINIO__MINIO_PUBLIC_URL", "https://cdn.test")
os.environ.setdefault("SECURITY__JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("UPLOADS__UPLOAD_MAX_SIZE_MB", "1")

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Tuple

import pytest

from venue_admin.models import User
from venue_admin.services.media_service import MediaService, UploadSource
from venue_admin.storage import StorageBackend, StorageError, StoredObject

PUBLIC_BASE = "https://cdn.test"


class FakeStorage(StorageBackend):
    """In-memory bucket store that records every call"""

    def __init__(self):
        self.objects: Dict[Tuple[str, str], bytes] = {}
        self.stored: List[Tuple[str, str, str]] = []
        self.deleted: List[Tuple[str, str]] = []
        self.fail_store = False
        self.fail_delete = False

    async def store(self, bucket, path, data, content_type, overwrite=False):
        if self.fail_store:
            raise StorageError("connection refused")
        if not overwrite and (bucket, path) in self.objects:
            raise StorageError(f"Object {bucket}/{path} already exists")
        self.objects[(bucket, path)] = data
        self.stored.append((bucket, path, content_type))

    def public_url(self, bucket, path):
        return f"{PUBLIC_BASE}/{bucket}/{path}"

    async def delete(self, bucket, path):
        self.deleted.append((bucket, path))
        if self.fail_delete:
            raise StorageError("access denied")
        self.objects.pop((bucket, path), None)

    def parse_public_url(self, url) -> Optional[StoredObject]:
        prefix = f"{PUBLIC_BASE}/"
        if not url.startswith(prefix):
            return None
        bucket, _, path = url[len(prefix):].partition("/")
        if not bucket or not path:
            return None
        return StoredObject(bucket, path)


class FakeRepository:
    """EntityRepository stand-in keeping rows as namespaces"""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None):
        self.rows: Dict[int, SimpleNamespace] = {}
        self.next_id = 1
        self.list_calls = 0
        self.updates: List[Tuple[int, Dict[str, Any]]] = []
        for row in rows or []:
            self._insert(dict(row))

    def _insert(self, values: Dict[str, Any]) -> SimpleNamespace:
        entity_id = values.pop("id", None) or self.next_id
        self.next_id = max(self.next_id, entity_id) + 1
        created_at = values.pop("created_at", None) or datetime(2026, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=entity_id)
        row = SimpleNamespace(id=entity_id, created_at=created_at, updated_at=None, **values)
        self.rows[entity_id] = row
        return row

    async def list(self, *, search=None, search_fields=(), filters=None, offset=0, limit=10):
        self.list_calls += 1
        rows = list(self.rows.values())
        if search:
            needle = search.lower()
            rows = [r for r in rows if any(needle in (getattr(r, f, None) or "").lower() for f in search_fields)]
        for name, value in (filters or {}).items():
            rows = [r for r in rows if getattr(r, name, None) == value]
        rows.sort(key=lambda r: (r.created_at, r.id), reverse=True)
        return rows[offset:offset + limit], len(rows)

    async def get_by_id(self, entity_id):
        return self.rows.get(entity_id)

    async def create(self, values):
        return self._insert(dict(values))

    async def update(self, entity_id, values):
        row = self.rows.get(entity_id)
        if row is None:
            return None
        self.updates.append((entity_id, dict(values)))
        for name, value in values.items():
            setattr(row, name, value)
        return row

    async def delete(self, entity_id):
        return self.rows.pop(entity_id, None) is not None


def make_file(name="photo.png", content_type="image/png", size=1024) -> UploadSource:
    return UploadSource(filename=name, content_type=content_type, data=b"\x89" * size)


def stored_url(path: str, bucket: str = "images") -> str:
    return f"{PUBLIC_BASE}/{bucket}/{path}"


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def media(storage):
    return MediaService(storage)


@pytest.fixture
def admin():
    return User(id=1, email="admin@venues.test", role="admin", password_hash="x")


@pytest.fixture
def blogger():
    return User(id=2, email="blogger@venues.test", role="blogger", password_hash="x")


@pytest.fixture
def other_blogger():
    return User(id=3, email="writer@venues.test", role="blogger", password_hash="x")
