"""Request and commit correlation ids."""

from __future__ import annotations

import logging

import pytest
from style_engine_web.services.request_context import RequestContextFilter


class ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: list[logging.LogRecord] = []
        self.addFilter(RequestContextFilter())

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def captured():
    handler = ListHandler()
    target = logging.getLogger("style_engine")
    previous_level = target.level
    target.setLevel(logging.INFO)
    target.addHandler(handler)
    yield handler
    target.removeHandler(handler)
    target.setLevel(previous_level)


def test_request_id_header_roundtrip(client) -> None:
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.headers["X-Request-Id"]

    response = client.get("/api/health", headers={"X-Request-Id": "req-123"})
    assert response.headers.get("X-Request-Id") == "req-123"


def test_commit_records_carry_request_and_commit_ids(client, captured) -> None:
    response = client.post(
        "/api/settings",
        json={"values": {"dark_mode": True}},
        headers={"X-Request-Id": "req-commit"},
    )
    assert response.status_code == 200

    committed = [
        record for record in captured.records if record.getMessage().startswith("Committed")
    ]
    assert len(committed) == 1
    assert committed[0].request_id == "req-commit"
    assert committed[0].commit_id not in ("", "-")


def test_rejected_commit_records_carry_commit_id(client, captured) -> None:
    client.post(
        "/api/settings",
        json={"values": {"menu_width": 9999}},
        headers={"X-Request-Id": "req-rejected"},
    )

    rejected = [
        record for record in captured.records if record.getMessage().startswith("Rejected batch")
    ]
    assert rejected
    assert rejected[0].request_id == "req-rejected"
    assert rejected[0].commit_id != "-"
