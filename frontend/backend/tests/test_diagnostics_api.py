from __future__ import annotations


def test_extension_points_are_documented(client) -> None:
    response = client.get("/api/extension-points")
    assert response.status_code == 200

    points = {point["name"]: point for point in response.json()["extensionPoints"]}
    assert points["settings.beforeSave"]["kind"] == "filter"
    assert points["settings.afterCommit"]["hasCallbacks"] is False
    assert "security.threatPatterns" in points


def test_extension_stats_after_commit(client, engine) -> None:
    def broken(snapshot) -> None:
        raise RuntimeError("audit log offline")

    engine.extensions.add_action("settings.afterCommit", broken)
    client.post("/api/settings", json={"values": {"dark_mode": True}})

    payload = client.get("/api/stats/extensions").json()
    stats = {stat["extensionPointName"]: stat for stat in payload["stats"]}
    assert stats["settings.afterCommit"]["invocationCount"] == 1
    assert payload["totalExecutions"] >= 1
    assert payload["errors"][0]["message"] == "audit log offline"


def test_cache_stats(client) -> None:
    client.get("/api/stylesheet")
    client.get("/api/stylesheet")

    payload = client.get("/api/stats/cache").json()
    assert payload["hitCount"] == 1
    assert payload["missCount"] == 1
    assert payload["hitRate"] == 0.5
    assert payload["itemCount"] == 1


def test_security_stats(client) -> None:
    client.post("/api/settings", json={"values": {"custom_css": "<script>alert(1)</script>"}})
    client.post("/api/settings", json={"values": {"menu_width": 9999}})

    payload = client.get("/api/stats/security").json()

    assert payload["totalRejections"] == 2
    assert payload["securityRejections"] == 1
    assert payload["patternMatches"] == {"script-tag": 1}
    assert payload["activePatternCount"] > 0
    assert payload["validatorCount"] == 6
    assert [entry["keys"] for entry in payload["history"]] == [["menu_width"], ["custom_css"]]
    assert payload["history"][1]["security"] is True
    assert payload["history"][1]["occurredAt"]

    limited = client.get("/api/stats/security", params={"limit": 1}).json()
    assert len(limited["history"]) == 1
