"""Tests for API endpoints (no network logo fetches)."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cardhydrate.config import Settings
from cardhydrate.dependencies import get_settings
from cardhydrate.main import app
from tests.conftest import CARD_SVG, PROFILE


client = TestClient(app)

PROFILE_JSON = PROFILE.model_dump(by_alias=True)


@pytest.fixture
def templates_dir(tmp_path):
    (tmp_path / "bold_accent.svg").write_text(CARD_SVG, encoding="utf-8")
    app.dependency_overrides[get_settings] = lambda: Settings(templates_dir=str(tmp_path))
    yield tmp_path
    app.dependency_overrides.pop(get_settings, None)


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["templates_known"] == 18


def test_layout_known_template():
    response = client.get("/api/layout/bold_accent")
    assert response.status_code == 200
    data = response.json()
    assert data["known_template"]
    assert data["content_area"] == {"left": 60, "top": 50, "width": 500}
    assert data["positions"]["name"]["y"] == 170
    assert data["positions"]["logo"]["max_w"] == 100
    assert len([k for k in data["positions"] if k in ("phone", "email", "website", "address")]) == 4


def test_layout_unknown_template_uses_default():
    data = client.get("/api/layout/whatever.svg").json()
    assert not data["known_template"]
    assert data["content_area"] == {"left": 60, "top": 50, "width": 500}


def test_hydrate_svg():
    response = client.post("/api/hydrate", json={"svg": CARD_SVG, "profile": PROFILE_JSON, "template_id": "bold_accent"})
    assert response.status_code == 200
    data = response.json()
    assert data["object_count"] == len(data["objects"])
    assert data["processing_time_ms"] >= 0
    assert data["svg"].startswith("<?xml")
    by_id = {obj["id"]: obj for obj in data["objects"]}
    assert by_id["#name"]["text"] == "Acme Studio"
    assert "#layout_divider" in by_id
    assert "source" not in by_id["#bg_layer"]


def test_hydrate_preview_mode():
    response = client.post("/api/hydrate", json={"svg": CARD_SVG, "preserve_template_text": True})
    assert response.status_code == 200
    by_id = {obj["id"]: obj for obj in response.json()["objects"]}
    assert by_id["#name"]["text"] == "Jane Doe"
    assert "#layout_divider" not in by_id


def test_hydrate_canvas_json():
    doc = {"objects": [{"type": "textbox", "id": "#email", "text": "x", "width": 100, "height": 20}]}
    response = client.post("/api/hydrate", json={"canvas_json": doc, "profile": PROFILE_JSON})
    assert response.status_code == 200
    by_id = {obj["id"]: obj for obj in response.json()["objects"]}
    assert by_id["#email"]["text"] == "hello@acme.test"


def test_hydrate_malformed_svg():
    response = client.post("/api/hydrate", json={"svg": "<svg><rect"})
    assert response.status_code == 422


def test_hydrate_requires_source():
    response = client.post("/api/hydrate", json={"profile": PROFILE_JSON})
    assert response.status_code == 422


def test_hydrate_template_without_directory():
    app.dependency_overrides[get_settings] = lambda: Settings(templates_dir="")
    try:
        response = client.post("/api/hydrate", json={"template_id": "bold_accent"})
    finally:
        app.dependency_overrides.pop(get_settings, None)
    assert response.status_code == 404


def test_hydrate_template_from_directory(templates_dir):
    response = client.post("/api/hydrate", json={"template_id": "bold_accent", "profile": PROFILE_JSON})
    assert response.status_code == 200
    by_id = {obj["id"]: obj for obj in response.json()["objects"]}
    assert (by_id["#name"]["left"], by_id["#name"]["top"]) == (60, 170)


def test_hydrate_unknown_template_file(templates_dir):
    response = client.post("/api/hydrate", json={"template_id": "../secrets"})
    assert response.status_code == 404


def test_hydrate_svg_field_is_markup_only(tmp_path):
    secret = tmp_path / "secret.svg"
    secret.write_text(CARD_SVG.replace("Jane Doe", "SERVER-ONLY"), encoding="utf-8")
    response = client.post("/api/hydrate", json={"svg": str(secret), "preserve_template_text": True})
    assert response.status_code == 422
    assert "SERVER-ONLY" not in response.text


def test_hydrate_missing_path_string_is_rejected():
    response = client.post("/api/hydrate", json={"svg": "/nope/missing.svg"})
    assert response.status_code == 422


def test_hydrate_canvas_json_text_must_be_json():
    response = client.post("/api/hydrate", json={"canvas_json": "/etc/card.svg"})
    assert response.status_code == 422
