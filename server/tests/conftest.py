"""Shared fixtures for the WBJEE Finder tests."""

import json

import pytest
from fastapi.testclient import TestClient

from wbjee_finder.config import Settings
from wbjee_finder.main import create_app

SAMPLE_RECORDS = [
    {"institute": "Jadavpur University", "program": "Computer Science", "category": "OPEN", "opening": 1, "closing": 112},
    {"institute": "IIEST Shibpur", "program": "Electrical Engineering", "category": "OPEN", "opening": 210, "closing": 640},
]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sample_records():
    return [dict(record) for record in SAMPLE_RECORDS]


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "wbjee_orcr_data.json"
    path.write_text(json.dumps(SAMPLE_RECORDS), encoding="utf-8")
    return path


@pytest.fixture
def public_dir(tmp_path):
    path = tmp_path / "public"
    path.mkdir()
    (path / "index.html").write_text("<!doctype html><title>WBJEE Finder</title>", encoding="utf-8")
    (path / "manifest.json").write_text('{"name": "WBJEE Finder"}', encoding="utf-8")
    return path


@pytest.fixture
def settings(data_file, public_dir):
    return Settings(
        data_file=str(data_file),
        public_dir=str(public_dir),
        rate_limit_max=100,
        admin_token="",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
