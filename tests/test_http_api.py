"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration

from pageomatic.http_api import app, get_database
from pageomatic.sections.registry import create_default
from pageomatic.sections.types import SectionType
from pageomatic.storage.repositories import PageComponentRepository

ACTOR = {"X-Actor-Id": "editor-1"}


@pytest.fixture
def client(temp_db):
    """Test client bound to the temporary database."""
    app.dependency_overrides[get_database] = lambda: temp_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _body(*sections, **extra):
    return {"sections": list(sections), **extra}


class TestPageContent:
    """Tests for loading and saving page content."""

    def test_save_then_load(self, client):
        hero = create_default("hero", "h")
        response = client.put(
            "/pages/landing/content",
            json=_body(hero, properties={"pageTitle": "Landing"}, auxiliary={"section_order": ["h"]}),
            headers=ACTOR,
        )
        assert response.status_code == 200
        assert response.json()["saved"] == {"sections": 1, "page_properties": 1, "section_order": 1}

        loaded = client.get("/pages/landing/content").json()
        assert loaded["sections"] == [hero]
        assert loaded["properties"]["pageTitle"] == "Landing"
        assert loaded["auxiliary"] == {"section_order": ["h"]}
        assert loaded["versions"]["sections"] == 1
        assert loaded["has_sections"] is True

        assert client.get("/pages").json() == {"pages": ["landing"]}

    def test_missing_actor(self, client):
        response = client.put("/pages/landing/content", json=_body())
        assert response.status_code == 401
        assert client.get("/pages").json() == {"pages": []}

    def test_unknown_section_type(self, client):
        response = client.put(
            "/pages/landing/content",
            json=_body({"id": "x", "type": "carousel"}),
            headers=ACTOR,
        )
        assert response.status_code == 422
        assert response.json()["field"] == "type"

    def test_malformed_properties_rejected(self, client):
        response = client.put(
            "/pages/landing/content",
            json=_body(
                create_default("hero", "h"),
                properties={"visibleCount": "lots", "showMoreEnabled": "maybe"},
            ),
            headers=ACTOR,
        )
        assert response.status_code == 422
        assert response.json()["field"].startswith("properties.")
        assert client.get("/pages").json() == {"pages": []}

    def test_conflict(self, client):
        client.put("/pages/landing/content", json=_body(), headers=ACTOR)
        client.put("/pages/landing/content", json=_body(), headers=ACTOR)

        response = client.put(
            "/pages/landing/content",
            json=_body(expected_versions={"sections": 1, "page_properties": 1}),
            headers=ACTOR,
        )
        assert response.status_code == 409
        failure = response.json()["failures"]["sections"]
        assert failure["conflict"] is True
        assert failure["expected_version"] == 1
        assert failure["actual_version"] == 2

    def test_conflict_with_other_components_saved(self, client):
        client.put("/pages/landing/content", json=_body(), headers=ACTOR)
        response = client.put(
            "/pages/landing/content",
            json=_body(create_default("cta", "c"), expected_versions={"sections": 1}),
            headers=ACTOR,
        )
        assert response.status_code == 200

        response = client.put(
            "/pages/landing/content",
            json=_body(expected_versions={"sections": 1}),
            headers=ACTOR,
        )
        assert response.status_code == 409
        assert response.json()["saved"] == {"page_properties": 3}

    def test_failure_that_is_not_a_conflict(self, client, monkeypatch):
        original = PageComponentRepository.upsert

        def flaky(self, page_slug, component_type, *args, **kwargs):
            if component_type == "sections":
                raise RuntimeError("disk full")
            return original(self, page_slug, component_type, *args, **kwargs)

        monkeypatch.setattr(PageComponentRepository, "upsert", flaky)
        response = client.put("/pages/landing/content", json=_body(), headers=ACTOR)
        assert response.status_code == 207
        body = response.json()
        assert body["ok"] is False
        assert body["failures"]["sections"]["conflict"] is False
        assert body["saved"] == {"page_properties": 1}

    def test_load_empty_page(self, client):
        body = client.get("/pages/new-page/content").json()
        assert body["sections"] == []
        assert body["has_sections"] is False
        assert body["properties"]["visibleCount"] == 30

    def test_home_strips_footers(self, client):
        client.put(
            "/pages/home/content",
            json=_body(create_default("hero", "h"), create_default("footer", "f")),
            headers=ACTOR,
        )
        body = client.get("/pages/home/content").json()
        assert [s["id"] for s in body["sections"]] == ["h"]


class TestComponents:
    """Tests for deactivating components."""

    def test_deactivate(self, client):
        client.put("/pages/landing/content", json=_body(auxiliary={"slider": []}), headers=ACTOR)
        response = client.delete("/pages/landing/components/slider", headers=ACTOR)
        assert response.status_code == 200
        assert response.json()["deactivated"] is True
        assert "slider" not in client.get("/pages/landing/content").json()["auxiliary"]

    def test_deactivate_missing(self, client):
        response = client.delete("/pages/landing/components/slider", headers=ACTOR)
        assert response.status_code == 404

    def test_deactivate_requires_actor(self, client):
        assert client.delete("/pages/landing/components/slider").status_code == 401


class TestSectionTypes:
    """Tests for the section catalogue endpoints."""

    def test_list(self, client):
        types = client.get("/section-types").json()["section_types"]
        assert len(types) == len(SectionType)
        mini = next(t for t in types if t["type"] == "mini-card-grid")
        assert mini["media_targets"] == [
            {"slot": "thumbnail", "url_field": "thumbnailUrl", "kind_field": None, "card_scoped": True}
        ]

    def test_default(self, client):
        body = client.get("/section-types/media-text-right/default").json()
        assert body["type"] == "media-text-right"
        assert body["mediaPosition"] == "right"
        assert body["visible"] is True

    def test_default_unknown(self, client):
        assert client.get("/section-types/marquee/default").status_code == 404

    def test_health(self, client):
        assert client.get("/health").json() == {
            "status": "healthy",
            "service": "page-o-matic",
            "database": "ok",
        }
