from __future__ import annotations


def test_preset_lifecycle(client) -> None:
    created = client.post(
        "/api/presets",
        json={"name": "Ocean", "values": {"primary_color": "#0077be"}, "description": "Blue"},
    )
    assert created.status_code == 200
    assert created.json()["id"] == "ocean"

    listed = client.get("/api/presets").json()["presets"]
    assert [preset["id"] for preset in listed] == ["ocean"]

    applied = client.post("/api/presets/ocean/apply")
    assert applied.status_code == 200
    assert applied.json()["values"]["primary_color"] == "#0077be"

    assert client.delete("/api/presets/ocean").json() == {"deleted": True}
    assert client.delete("/api/presets/ocean").status_code == 404


def test_invalid_preset_values(client) -> None:
    response = client.post(
        "/api/presets", json={"name": "Bad", "values": {"menu_width": 9999}}
    )
    assert response.status_code == 422
    assert response.json()["detail"]["errors"][0]["reason"] == "outOfRange"


def test_apply_missing_preset(client) -> None:
    assert client.post("/api/presets/missing/apply").status_code == 404
    assert client.post("/api/presets/BAD_ID/apply").status_code == 400


def test_preset_write_failure_is_service_unavailable(client, engine) -> None:
    engine.presets.base_dir.write_text("not a directory", encoding="utf-8")

    response = client.post("/api/presets", json={"name": "Ocean", "values": {"dark_mode": True}})

    assert response.status_code == 503
    assert "ocean" in response.json()["detail"]


def test_preset_with_markup_is_a_security_rejection(client) -> None:
    response = client.post(
        "/api/presets",
        json={"name": "Sneaky", "values": {"custom_css": "<script>alert(1)</script>"}},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["failure"] == "security"
