import asyncio

import pytest

from venue_admin.core.exceptions import SizeExceeded, StorageWriteFailed, UnsupportedType
from venue_admin.services.media_service import (
    MIB,
    UploadConstraints,
    generate_object_name,
    object_path,
)
from venue_admin.storage import StoredObject

from conftest import make_file, stored_url

CONSTRAINTS = UploadConstraints(bucket="images", folder="events", max_size_in_mb=5, allowed_types=("image/png", "image/jpeg"))


async def test_upload_stores_under_folder_and_returns_public_url(media, storage):
    result = await media.upload(make_file("Poster.PNG"), CONSTRAINTS)

    assert result.ok
    assert result.path.startswith("events/")
    assert result.path.endswith(".png")
    assert result.url == stored_url(result.path)
    assert storage.stored == [("images", result.path, "image/png")]


async def test_oversized_file_is_rejected_without_write(media, storage):
    result = await media.upload(make_file(size=6 * MIB), CONSTRAINTS)

    assert isinstance(result.error, SizeExceeded)
    assert result.error.detail == "File size must be less than 5MB"
    assert storage.stored == []


async def test_file_at_exact_limit_is_accepted(media):
    result = await media.upload(make_file(size=5 * MIB), CONSTRAINTS)
    assert result.ok


async def test_unsupported_type_is_rejected_without_write(media, storage):
    result = await media.upload(make_file("doc.pdf", "application/pdf"), CONSTRAINTS)

    assert isinstance(result.error, UnsupportedType)
    assert "application/pdf" in result.error.detail
    assert storage.stored == []


async def test_size_is_checked_before_type(media):
    result = await media.upload(make_file("doc.pdf", "application/pdf", size=6 * MIB), CONSTRAINTS)
    assert isinstance(result.error, SizeExceeded)


async def test_storage_failure_becomes_error_result(media, storage):
    storage.fail_store = True

    result = await media.upload(make_file(), CONSTRAINTS)

    assert isinstance(result.error, StorageWriteFailed)
    assert result.url == ""


async def test_repeated_uploads_of_same_name_get_unique_paths(media):
    paths = {(await media.upload(make_file("same.png"), CONSTRAINTS)).path for _ in range(20)}
    assert len(paths) == 20


def test_generated_name_keeps_lowercased_extension():
    name = generate_object_name("Holiday Photo.JPEG")
    stamp, _, rest = name.partition("-")
    assert stamp.isdigit()
    assert rest.endswith(".jpeg")


def test_object_path_without_folder():
    assert object_path("", "a.png") == "a.png"
    assert object_path("/clubs/", "a.png") == "clubs/a.png"


def test_replace_on_save_same_url_does_nothing(media):
    calls = []
    url = stored_url("events/a.png")
    assert media.replace_on_save(url, url, schedule=lambda *a: calls.append(a)) is None
    assert calls == []


def test_replace_on_save_empty_previous_does_nothing(media):
    calls = []
    assert media.replace_on_save("", stored_url("events/b.png"), schedule=lambda *a: calls.append(a)) is None
    assert calls == []


def test_replace_on_save_external_url_is_left_alone(media):
    calls = []
    target = media.replace_on_save("https://elsewhere.example.com/a.png", "", schedule=lambda *a: calls.append(a))
    assert target is None
    assert calls == []


def test_replace_on_save_schedules_one_delete(media):
    calls = []
    target = media.replace_on_save(
        stored_url("events/a.png"),
        stored_url("events/b.png"),
        schedule=lambda func, *args: calls.append((func, args)),
    )

    assert target == StoredObject("images", "events/a.png")
    assert calls == [(media.delete_quietly, (target,))]


async def test_replace_on_save_does_not_wait_for_delete(media, storage):
    target = media.replace_on_save(stored_url("events/a.png"), "")

    # spawned, not yet run
    assert storage.deleted == []
    await media.drain()
    assert storage.deleted == [(target.bucket, target.path)]


async def test_delete_failure_is_swallowed(media, storage):
    storage.fail_delete = True
    assert await media.delete_quietly(StoredObject("images", "events/a.png")) is False
    assert storage.deleted == [("images", "events/a.png")]


async def test_drain_with_nothing_pending(media):
    await asyncio.wait_for(media.drain(), timeout=1)
