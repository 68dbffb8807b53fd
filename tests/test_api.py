from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from venue_admin.api.v1.routes import entities as entity_routes
from venue_admin.core.database import db_helper
from venue_admin.core.deps import get_current_user, get_list_cache, get_media_service
from venue_admin.main import app
from venue_admin.models import User
from venue_admin.services.list_cache import ListCache
from venue_admin.services.media_service import MIB

from conftest import FakeRepository, stored_url

PNG = ("logo.png", b"\x89PNG" * 64, "image/png")


class Session:
    user = None


@pytest.fixture
def session_user():
    return Session()


@pytest.fixture
def repos(monkeypatch):
    by_model = {}

    def repository(session, model):
        return by_model.setdefault(model, FakeRepository())

    monkeypatch.setattr(entity_routes, "EntityRepository", repository)
    return by_model


@pytest.fixture
def client(media, repos, session_user):
    app.dependency_overrides[db_helper.session_getter] = lambda: None
    app.dependency_overrides[get_media_service] = lambda: media
    cache = ListCache()
    app.dependency_overrides[get_list_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def as_user(client, session_user):
    def login(role, user_id=1):
        session_user.user = User(
            id=user_id,
            email=f"{role}{user_id}@venues.test",
            role=role,
            password_hash="x",
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
        app.dependency_overrides[get_current_user] = lambda: session_user.user
        return session_user.user
    return login


def test_root_and_unknown_route(client):
    assert client.get("/").json()["message"].startswith("Welcome to")
    response = client.get("/api/v1/nowhere")
    assert response.status_code == 404
    assert response.json()["error"] == "NotFoundError"


def test_health_reports_database_state(client, monkeypatch):
    async def ping():
        return 1
    monkeypatch.setattr(db_helper, "ping", ping)
    body = client.get("/health").json()
    assert body["status"] == "healthy" and body["database_ping"] == 1

    async def down():
        raise ConnectionRefusedError("db down")
    monkeypatch.setattr(db_helper, "ping", down)
    assert client.get("/health").json()["status"] == "unhealthy"


def test_protected_routes_require_a_session(client):
    response = client.get("/api/v1/clubs")
    assert response.status_code == 401
    assert response.json()["error"] == "AuthRequired"

    response = client.post("/api/v1/media/upload?entity=clubs&field=logo_url", files={"file": PNG})
    assert response.status_code == 401


def test_me(client, as_user):
    as_user("admin")
    assert client.get("/api/v1/auth/me").json()["role"] == "admin"


class TestMediaUpload:
    def test_upload_returns_url_and_path(self, client, as_user, storage):
        as_user("admin")

        response = client.post("/api/v1/media/upload?entity=clubs&field=logo_url", files={"file": PNG})

        assert response.status_code == 200
        body = response.json()
        assert body["path"].startswith("clubs/")
        assert body["url"] == stored_url(body["path"])
        assert storage.stored[0][2] == "image/png"

    def test_unsupported_type(self, client, as_user, storage):
        as_user("admin")

        response = client.post(
            "/api/v1/media/upload?entity=clubs&field=logo_url",
            files={"file": ("menu.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 415
        assert response.json()["error"] == "UnsupportedType"
        assert storage.stored == []

    def test_oversized(self, client, as_user, storage):
        as_user("admin")

        response = client.post(
            "/api/v1/media/upload?entity=clubs&field=logo_url",
            files={"file": ("big.png", b"\x00" * (MIB + 10), "image/png")},
        )

        assert response.status_code == 413
        assert response.json()["detail"] == "File size must be less than 1MB"
        assert storage.stored == []

    def test_storage_down(self, client, as_user, storage):
        as_user("admin")
        storage.fail_store = True

        response = client.post("/api/v1/media/upload?entity=clubs&field=logo_url", files={"file": PNG})

        assert response.status_code == 502
        assert response.json()["error"] == "StorageWriteFailed"

    def test_field_must_be_an_image(self, client, as_user):
        as_user("admin")
        response = client.post("/api/v1/media/upload?entity=clubs&field=name", files={"file": PNG})
        assert response.status_code == 422
        assert response.json()["errors"] == {"name": "Not an image field"}

    def test_unknown_entity(self, client, as_user):
        as_user("admin")
        response = client.post("/api/v1/media/upload?entity=bars&field=logo_url", files={"file": PNG})
        assert response.status_code == 404

    def test_blogger_cannot_upload_club_logos(self, client, as_user):
        as_user("blogger")
        response = client.post("/api/v1/media/upload?entity=clubs&field=logo_url", files={"file": PNG})
        assert response.status_code == 403

    def test_constraints(self, client, as_user):
        as_user("blogger")
        body = client.get("/api/v1/media/constraints?entity=posts&field=image_url").json()
        assert body["folder"] == "posts"
        assert body["max_size_in_mb"] == 1
        assert body["hint"].endswith("(max 1MB)")


class TestEntityRoutes:
    def create_club(self, client, **extra):
        payload = {"name": "Chess", "description": "Weekly games", **extra}
        response = client.post("/api/v1/clubs", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    def test_create_and_read(self, client, as_user):
        as_user("admin")
        created = self.create_club(client)

        assert created["item"]["name"] == "Chess"
        assert created["messages"][-1] == {"level": "success", "message": "Clubs created successfully!"}

        item_id = created["item"]["id"]
        assert client.get(f"/api/v1/clubs/{item_id}").json()["item"]["description"] == "Weekly games"

        page = client.get("/api/v1/clubs?search=che").json()
        assert page["total"] == 1

    def test_validation_errors_list_every_field(self, client, as_user):
        as_user("admin")
        response = client.post("/api/v1/clubs", json={})
        assert response.status_code == 422
        assert set(response.json()["errors"]) == {"name", "description"}

    def test_page_size_is_capped(self, client, as_user):
        as_user("admin")
        assert client.get("/api/v1/live-shows?page_size=1000").status_code == 422

    def test_replacing_logo_deletes_old_object_after_response(self, client, as_user, storage):
        as_user("admin")
        old = client.post("/api/v1/media/upload?entity=clubs&field=logo_url", files={"file": PNG}).json()
        item = self.create_club(client, logo_url=old["url"])["item"]

        response = client.put(f"/api/v1/clubs/{item['id']}/images/logo_url", json={"url": "https://cdn.example.com/new.png"})

        assert response.status_code == 200
        assert response.json()["item"]["logo_url"] == "https://cdn.example.com/new.png"
        assert storage.deleted == [("images", old["path"])]

    def test_upload_to_record(self, client, as_user, storage):
        as_user("admin")
        item = self.create_club(client)["item"]

        response = client.post(f"/api/v1/clubs/{item['id']}/images/logo_url", files={"file": PNG})

        assert response.status_code == 200
        body = response.json()
        assert body["item"]["logo_url"].startswith("https://cdn.test/images/clubs/")
        assert {"level": "success", "message": "Image uploaded successfully!"} in body["messages"]
        assert storage.deleted == []

    def test_remove_image(self, client, as_user, storage):
        as_user("admin")
        item = self.create_club(client, logo_url="https://elsewhere.example.com/logo.png")["item"]

        response = client.delete(f"/api/v1/clubs/{item['id']}/images/logo_url")

        assert response.json()["item"]["logo_url"] is None
        assert storage.deleted == []

    def test_patch_and_delete(self, client, as_user):
        as_user("admin")
        item = self.create_club(client)["item"]

        patched = client.patch(f"/api/v1/clubs/{item['id']}", json={"name": "Chess Club"})
        assert patched.json()["item"]["name"] == "Chess Club"

        assert client.delete(f"/api/v1/clubs/{item['id']}").status_code == 204
        assert client.get(f"/api/v1/clubs/{item['id']}").status_code == 404

    def test_toggle(self, client, as_user):
        as_user("admin")
        created = client.post("/api/v1/lounges", json={"name": "Velvet", "description": "d", "location": "Riga"})
        item = created.json()["item"]
        assert item["is_featured"] is False

        toggled = client.post(f"/api/v1/lounges/{item['id']}/toggle/is_featured")
        assert toggled.json()["item"]["is_featured"] is True

        assert client.get("/api/v1/lounges?status=featured").json()["total"] == 1

    def test_roles(self, client, as_user):
        as_user("blogger", user_id=7)
        assert client.get("/api/v1/clubs").status_code == 403

        created = client.post("/api/v1/posts", json={"content": "Opening night!"})
        assert created.status_code == 201
        assert created.json()["item"]["user_id"] == 7

    def test_non_text_image_value_is_a_field_error(self, client, as_user):
        as_user("admin")
        item = self.create_club(client)["item"]

        response = client.patch(f"/api/v1/clubs/{item['id']}", json={"logo_url": 5})

        assert response.status_code == 422
        assert set(response.json()["errors"]) == {"logo_url"}

    def test_non_list_tags_are_a_field_error(self, client, as_user):
        as_user("admin")
        response = client.post(
            "/api/v1/restaurants",
            json={"name": "Trattoria", "description": "Pasta", "location": "Rome", "amenities": 5},
        )

        assert response.status_code == 422
        assert set(response.json()["errors"]) == {"amenities"}

    def test_events_belong_to_a_club(self, client, as_user):
        as_user("admin")
        club = self.create_club(client)["item"]

        response = client.post(
            "/api/v1/events",
            json={"title": "Blitz night", "club_id": club["id"], "start_date": "2026-06-01T20:00"},
        )

        assert response.status_code == 201, response.text
        item = response.json()["item"]
        assert item["club_id"] == club["id"]
        assert item["start_date"].startswith("2026-06-01T20:00")
        assert item["created_by"] == 1

        toggled = client.post(f"/api/v1/events/{item['id']}/toggle/is_featured")
        assert toggled.json()["item"]["is_featured"] is True
        assert client.get("/api/v1/events?status=featured").json()["total"] == 1

    def test_pub_and_beach_routes(self, client, as_user):
        as_user("admin")
        pub = client.post("/api/v1/pubs", json={"name": "The Anchor", "description": "Ales", "location": "Riga", "has_live_music": True})
        beach = client.post("/api/v1/beaches", json={"name": "Labadi", "description": "Sand", "location": "Accra", "beach_type": "public"})

        assert pub.status_code == 201 and pub.json()["item"]["has_live_music"] is True
        assert beach.status_code == 201 and beach.json()["item"]["beach_type"] == "public"
        assert client.get("/api/v1/beaches?search=laba").json()["total"] == 1
