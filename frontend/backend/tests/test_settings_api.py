from __future__ import annotations

import json

from style_engine import StaticPermissions
from style_engine.errors import PersistenceError
from style_engine_web.dependencies import get_permissions
from style_engine_web.main import app


def test_options_catalog(client) -> None:
    response = client.get("/api/options")
    assert response.status_code == 200

    options = {option["key"]: option for option in response.json()["options"]}
    assert options["admin_bar_background"]["effect"] == {
        "kind": "cssVariable",
        "target": "--mas-bar-bg",
        "unit": "",
    }
    assert options["custom_css"]["maxLength"] == 50000


def test_commit_settings(client) -> None:
    response = client.post("/api/settings", json={"values": {"admin_bar_background": "#ff0000"}})
    assert response.status_code == 200
    payload = response.json()
    assert payload["version"] == 1
    assert payload["values"]["admin_bar_background"] == "#ff0000"
    assert payload["updatedAt"]

    assert client.get("/api/settings").json()["version"] == 1


def test_security_rejection_returns_422(client) -> None:
    response = client.post(
        "/api/settings", json={"values": {"custom_css": "<script>alert(1)</script>"}}
    )
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["failure"] == "security"
    assert detail["errors"][0]["reason"] == "threatPatternMatched"
    assert client.get("/api/settings").json()["version"] == 0


def test_persistence_failure_returns_503(client, engine, monkeypatch) -> None:
    def fail(snapshot) -> None:
        raise PersistenceError("read-only volume")

    monkeypatch.setattr(engine.store._persistence, "save", fail)

    response = client.post("/api/settings", json={"values": {"menu_width": 200}})
    assert response.status_code == 503
    assert response.json()["detail"]["failure"] == "persistence"


def test_permission_denied(client) -> None:
    app.dependency_overrides[get_permissions] = lambda: StaticPermissions(["admin"])

    denied = client.post("/api/settings", json={"values": {"menu_width": 200}})
    assert denied.status_code == 403

    allowed = client.post(
        "/api/settings", json={"values": {"menu_width": 200}}, headers={"X-Actor": "admin"}
    )
    assert allowed.status_code == 200


def test_export_import_and_reset(client) -> None:
    client.post("/api/settings", json={"values": {"menu_width": 220, "dark_mode": True}})
    exported = client.get("/api/settings/export")
    assert exported.status_code == 200
    assert exported.json()["formatVersion"] == 1

    reset = client.post("/api/settings/reset")
    assert reset.json()["values"]["menu_width"] == 160

    imported = client.post("/api/settings/import", json={"document": exported.text})
    assert imported.status_code == 200
    assert imported.json()["values"]["menu_width"] == 220
    assert imported.json()["version"] == 3


def test_import_unknown_format_returns_400(client) -> None:
    document = json.dumps({"formatVersion": 2, "exportedAt": "now", "values": {}})
    response = client.post("/api/settings/import", json={"document": document})
    assert response.status_code == 400
    assert response.json()["detail"]["failure"] == "import_format"


def test_stylesheet(client) -> None:
    client.post("/api/settings", json={"values": {"menu_width": 240}})
    response = client.get("/api/stylesheet")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/css")
    assert response.headers["X-Settings-Version"] == "1"
    assert "mas-animations" in response.headers["X-Body-Classes"]
    assert "--mas-menu-width: 240px;" in response.text


def test_preview_roundtrip(client) -> None:
    response = client.post("/api/preview", json={"controlId": "admin_bar_background", "value": "#00ff00"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["cssVariables"]["--mas-bar-bg"] == "#00ff00"
    assert payload["pending"] == {"admin_bar_background": "#00ff00"}
    assert client.get("/api/settings").json()["version"] == 0

    flushed = client.post("/api/preview/flush")
    assert flushed.status_code == 200
    assert flushed.json()["values"]["admin_bar_background"] == "#00ff00"
    assert client.get("/api/preview").json()["pending"] == {}


def test_preview_unknown_control(client) -> None:
    response = client.post("/api/preview", json={"controlId": "nope", "value": 1})
    assert response.status_code == 404
