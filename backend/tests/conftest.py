import os

# Console logging only and local storage while testing
os.environ.setdefault("LOG_DIR", "")
os.environ.setdefault("STORAGE_MODE", "local")

import httpx
import pytest
from fastapi.testclient import TestClient

from pulpuluck.main import app
from pulpuluck.models.fountain_model import Fountain, GeoPoint
from pulpuluck.repos.feedback_repo import LocalFeedbackRepository, get_feedback_repository
from pulpuluck.repos.snapshot_repo import LocalSnapshotStore


def make_fountain(fountain_id: str, lat: float, lng: float, **tags) -> Fountain:
    return Fountain(
        id=fountain_id,
        location=GeoPoint(lat=lat, lng=lng),
        display_name=tags.get("name", "Drinking Fountain"),
        attributes=tags,
    )


def mock_client(handler) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by ``handler`` instead of the network."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def snapshot_store(tmp_path) -> LocalSnapshotStore:
    return LocalSnapshotStore(base_dir=tmp_path)


@pytest.fixture
def feedback_file(tmp_path):
    return tmp_path / "fountain-feedback.json"


@pytest.fixture
def feedback_repo(feedback_file) -> LocalFeedbackRepository:
    return LocalFeedbackRepository(file_path=feedback_file)


@pytest.fixture
def api_client(feedback_repo):
    app.dependency_overrides[get_feedback_repository] = lambda: feedback_repo
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
