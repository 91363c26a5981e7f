from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the foojra package importable for local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from foojra.core import config as core_config  # noqa: E402
from foojra.core import security  # noqa: E402
from foojra.repositories.json_storage import JsonStorage, MemoryStorage  # noqa: E402
from foojra.repositories.mock_repository import MockDataRepository  # noqa: E402


@pytest.fixture(autouse=True)
def test_settings(tmp_path, monkeypatch):
    """Fresh settings per test: temp data dir, fixed secret, cheap hashing."""
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    monkeypatch.setenv("JWT_EXPIRE", "1h")
    monkeypatch.setenv("PASSWORD_HASH_TIME_COST", "1")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    core_config.get_settings.cache_clear()
    security._hasher.cache_clear()
    yield core_config.get_settings()
    core_config.get_settings.cache_clear()


@pytest.fixture()
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def repo(memory_storage) -> MockDataRepository:
    return MockDataRepository(memory_storage)


@pytest.fixture()
def json_storage(tmp_path) -> JsonStorage:
    return JsonStorage(tmp_path / "data")
