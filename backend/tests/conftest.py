"""Shared fixtures: each test gets its own SQLite file under tmp_path."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from consolidator.config import Settings
from consolidator.database import close_database, get_session, open_database
from consolidator.main import create_app


@pytest.fixture(autouse=True)
def _isolate_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONSOLIDATOR_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("CONSOLIDATOR_DATABASE", raising=False)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    data_dir = tmp_path / "data"
    return Settings(data_dir=data_dir, database_path=data_dir / "test.db")


@pytest.fixture
def db(tmp_path: Path):
    open_database(tmp_path / "service.db")
    session = get_session()
    try:
        yield session
    finally:
        session.close()
        close_database()


@pytest.fixture
def client(settings: Settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
