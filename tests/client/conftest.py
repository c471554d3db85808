import pytest

from amc_portal.client import LocalStorage, MockDataAccess, MockDataStore
from amc_portal.config import ClientSettings


@pytest.fixture
def client_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("AMC_API_BASE_URL", "http://api.test/")
    monkeypatch.setenv("AMC_MOCK_MODE", "false")
    monkeypatch.setenv("AMC_STORAGE_DIR", str(tmp_path))
    return ClientSettings()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path))


@pytest.fixture
def store(storage):
    return MockDataStore(storage)


@pytest.fixture
def mock_access(store):
    return MockDataAccess(store)


@pytest.fixture
def as_admin(mock_access):
    mock_access.login("admin@amc.com", "admin123", "admin")
    return mock_access


@pytest.fixture
def as_john(mock_access):
    mock_access.login("john@amc.com", "john123", "user")
    return mock_access
