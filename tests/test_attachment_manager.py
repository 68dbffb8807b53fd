import asyncio

import pytest

from venue_admin.core.exceptions import SizeExceeded, UnsupportedType, UploadInProgress
from venue_admin.services.attachment_manager import (
    AttachmentState,
    MediaAttachmentManager,
    NotificationCollector,
)
from venue_admin.services.media_service import MIB, UploadConstraints

from conftest import make_file


class Form:
    """Parent form double recording the callbacks it receives"""

    def __init__(self):
        self.changes = []
        self.removed = 0

    def on_change(self, url):
        self.changes.append(url)

    def on_remove(self):
        self.removed += 1


@pytest.fixture
def form():
    return Form()


@pytest.fixture
def notifier():
    return NotificationCollector()


@pytest.fixture
def manager(media, form, notifier):
    return MediaAttachmentManager(
        media,
        value="",
        on_change=form.on_change,
        on_remove=form.on_remove,
        bucket="images",
        folder="events",
        max_size_in_mb=5,
        accepted_file_types=["image/png", "image/jpeg"],
        notifier=notifier,
    )


def test_starts_empty(manager):
    assert manager.state == AttachmentState.EMPTY
    assert manager.hint == "Supports: png, jpeg (max 5MB)"


async def test_upload_attaches_and_notifies(manager, form, notifier, storage):
    result = await manager.upload(make_file())

    assert result.ok
    assert manager.value == result.url
    assert manager.state == AttachmentState.ATTACHED
    assert form.changes == [result.url]
    assert notifier.messages == [("success", "Image uploaded successfully!")]
    assert len(storage.stored) == 1


async def test_oversized_upload_leaves_value_unchanged(manager, form, notifier, storage):
    manager.set_by_url("https://cdn.example.com/old.png")
    notifier.messages.clear()
    form.changes.clear()

    result = await manager.upload(make_file(size=6 * MIB))

    assert isinstance(result.error, SizeExceeded)
    assert manager.value == "https://cdn.example.com/old.png"
    assert manager.state == AttachmentState.ATTACHED
    assert form.changes == []
    assert notifier.messages == [("error", "File size must be less than 5MB")]
    assert storage.stored == []


async def test_failed_upload_from_empty_stays_empty(manager, storage):
    storage.fail_store = True

    result = await manager.upload(make_file())

    assert not result.ok
    assert manager.state == AttachmentState.EMPTY
    assert manager.value == ""


async def test_replace_keeps_attached(manager, form):
    first = await manager.upload(make_file("a.png"))
    second = await manager.upload(make_file("b.png"))

    assert manager.value == second.url
    assert form.changes == [first.url, second.url]
    assert manager.state == AttachmentState.ATTACHED


async def test_drop_of_pdf_is_rejected(manager, form, notifier, storage):
    result = await manager.drop([make_file("menu.pdf", "application/pdf")])

    assert isinstance(result.error, UnsupportedType)
    assert manager.state == AttachmentState.EMPTY
    assert form.changes == []
    assert notifier.messages == [("error", "Please drop a valid image file")]
    assert storage.stored == []


async def test_drop_picks_first_accepted_file(manager, storage):
    result = await manager.drop([
        make_file("menu.pdf", "application/pdf"),
        make_file("logo.jpg", "image/jpeg"),
    ])

    assert result.ok
    assert storage.stored[0][2] == "image/jpeg"


async def test_empty_file_selection_is_noop(manager, form, notifier):
    assert await manager.select_file([]) is None
    assert form.changes == []
    assert notifier.messages == []


async def test_file_selection_uploads_first_file(manager):
    result = await manager.select_file([make_file("a.png"), make_file("b.png")])
    assert result.ok
    assert result.path.endswith(".png")


def test_paste_url_attaches_without_network(manager, form, notifier, storage):
    assert manager.set_by_url("  https://cdn.example.com/a.png ")

    assert manager.value == "https://cdn.example.com/a.png"
    assert form.changes == ["https://cdn.example.com/a.png"]
    assert notifier.messages == [("success", "Image URL added successfully!")]
    assert storage.stored == [] and storage.deleted == []


def test_blank_url_is_ignored(manager, form):
    assert manager.set_by_url("   ") is False
    assert form.changes == []
    assert manager.state == AttachmentState.EMPTY


def test_remove_then_paste_never_deletes(manager, form, storage):
    manager.set_by_url("https://cdn.test/images/events/a.png")
    manager.remove()
    manager.set_by_url("https://cdn.example.com/b.png")

    assert manager.value == "https://cdn.example.com/b.png"
    assert form.changes == [
        "https://cdn.test/images/events/a.png",
        "",
        "https://cdn.example.com/b.png",
    ]
    assert form.removed == 1
    assert storage.deleted == []


def test_remove_calls_on_change_before_on_remove(media):
    order = []
    manager = MediaAttachmentManager(
        media,
        value="https://cdn.example.com/a.png",
        on_change=lambda url: order.append(("change", url)),
        on_remove=lambda: order.append(("remove",)),
        notifier=NotificationCollector(),
    )

    manager.remove()

    assert order == [("change", ""), ("remove",)]
    assert manager.state == AttachmentState.EMPTY


async def test_concurrent_upload_is_rejected(manager, storage, notifier):
    gate = asyncio.Event()
    original_store = storage.store

    async def slow_store(*args, **kwargs):
        await gate.wait()
        await original_store(*args, **kwargs)

    storage.store = slow_store

    first = asyncio.ensure_future(manager.upload(make_file("a.png")))
    await asyncio.sleep(0)
    assert manager.state == AttachmentState.UPLOADING

    second = await manager.upload(make_file("b.png"))
    assert isinstance(second.error, UploadInProgress)

    gate.set()
    result = await first
    assert result.ok
    assert manager.value == result.url
    assert len(storage.stored) == 1
    assert ("error", UploadInProgress().detail) in notifier.messages


def test_for_constraints_copies_upload_settings(media):
    constraints = UploadConstraints(bucket="media", folder="clubs", max_size_in_mb=2, allowed_types=("image/webp",))
    manager = MediaAttachmentManager.for_constraints(media, constraints, placeholder="Logo")

    assert manager.constraints == constraints
    assert manager.accepted_file_types == ("image/webp",)
    assert manager.placeholder == "Logo"
