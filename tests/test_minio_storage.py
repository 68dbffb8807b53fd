from types import SimpleNamespace

import pytest

from venue_admin.core.config import MinIOConfig
from venue_admin.storage import MinIOStorage, StorageError, StoredObject


class FakeMinio:
    """Records calls made through the minio SDK surface MinIOStorage uses"""

    def __init__(self, existing=()):
        self.existing = set(existing)
        self.puts = []
        self.removed = []
        self.fail = None

    def list_objects(self, bucket, prefix=None):
        for b, name in sorted(self.existing):
            if b == bucket and name.startswith(prefix or ""):
                yield SimpleNamespace(object_name=name)

    def put_object(self, bucket, name, data, length, content_type=None, metadata=None):
        if self.fail:
            raise self.fail
        self.puts.append({
            "bucket": bucket,
            "name": name,
            "body": data.read(),
            "length": length,
            "content_type": content_type,
            "metadata": metadata,
        })
        self.existing.add((bucket, name))

    def remove_object(self, bucket, name):
        if self.fail:
            raise self.fail
        self.removed.append((bucket, name))


@pytest.fixture
def client():
    return FakeMinio(existing=[("images", "clubs/taken.png"), ("images", "clubs/taken.png.bak")])


@pytest.fixture
def minio_storage(client):
    return MinIOStorage(client, "https://cdn.test/", cache_control="max-age=3600")


async def test_store_writes_with_cache_control(minio_storage, client):
    await minio_storage.store("images", "clubs/new.png", b"png-bytes", "image/png")

    put = client.puts[0]
    assert put["name"] == "clubs/new.png"
    assert put["body"] == b"png-bytes"
    assert put["length"] == 9
    assert put["content_type"] == "image/png"
    assert put["metadata"] == {"Cache-Control": "max-age=3600"}


async def test_store_refuses_existing_object(minio_storage, client):
    with pytest.raises(StorageError, match="already exists"):
        await minio_storage.store("images", "clubs/taken.png", b"x", "image/png")
    assert client.puts == []


async def test_prefix_match_is_not_an_existing_object(minio_storage, client):
    await minio_storage.store("images", "clubs/taken", b"x", "image/png")
    assert client.puts[0]["name"] == "clubs/taken"


async def test_store_with_overwrite(minio_storage, client):
    await minio_storage.store("images", "clubs/taken.png", b"x", "image/png", overwrite=True)
    assert len(client.puts) == 1


async def test_sdk_errors_are_wrapped(minio_storage, client):
    client.fail = ConnectionError("minio down")
    with pytest.raises(StorageError, match="minio down"):
        await minio_storage.store("images", "clubs/new.png", b"x", "image/png")
    with pytest.raises(StorageError):
        await minio_storage.delete("images", "clubs/taken.png")


async def test_delete(minio_storage, client):
    await minio_storage.delete("images", "clubs/taken.png")
    assert client.removed == [("images", "clubs/taken.png")]


def test_public_url_round_trip(minio_storage):
    url = minio_storage.public_url("images", "clubs/my logo.png")

    assert url == "https://cdn.test/images/clubs/my%20logo.png"
    assert minio_storage.parse_public_url(url) == StoredObject("images", "clubs/my logo.png")


@pytest.mark.parametrize("url", [
    "",
    "https://elsewhere.example.com/images/a.png",
    "https://cdn.test/images",
    "https://cdn.test/images/",
])
def test_parse_rejects_foreign_or_partial_urls(minio_storage, url):
    assert minio_storage.parse_public_url(url) is None


def test_parse_ignores_query_string(minio_storage):
    parsed = minio_storage.parse_public_url("https://cdn.test/images/events/a.png?v=2")
    assert parsed == StoredObject("images", "events/a.png")


def test_public_base_defaults_to_endpoint():
    config = MinIOConfig(
        MINIO_ENDPOINT="minio.local:9000",
        MINIO_ACCESS_KEY="key",
        MINIO_SECRET_KEY="secret",
    )
    assert config.public_base_url == "http://minio.local:9000"

    storage = MinIOStorage.from_config(config)
    assert storage.public_url("images", "a.png") == "http://minio.local:9000/images/a.png"
