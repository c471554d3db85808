from unittest import mock

import pytest
import requests

from amc_portal.client import BackendProbe, ClientDataAccess, build_data_access
from amc_portal.config import ClientSettings
from amc_portal.exceptions import InternalError, ValidationError


@pytest.fixture
def probe(client_settings):
    probe = BackendProbe(client_settings, session=mock.Mock(spec=requests.Session))
    probe.available = True
    return probe


@pytest.fixture
def live():
    return mock.Mock()


@pytest.fixture
def facade(live, as_john, probe):
    return ClientDataAccess(live, as_john, probe)


def test_health_check_marks_backend_available(client_settings):
    session = mock.Mock(spec=requests.Session)
    session.get.return_value = mock.Mock(ok=True)
    probe = BackendProbe(client_settings, session=session)

    assert probe.check_health() is True
    session.get.assert_called_once_with("http://api.test/health", timeout=client_settings.health_timeout)
    assert probe.use_live is True


def test_health_check_failure_means_mock(client_settings):
    session = mock.Mock(spec=requests.Session)
    session.get.side_effect = requests.ConnectionError("down")
    probe = BackendProbe(client_settings, session=session)

    assert probe.check_health() is False
    assert probe.use_live is False


def test_mock_mode_never_probes(monkeypatch):
    monkeypatch.setenv("AMC_MOCK_MODE", "anything")
    settings = ClientSettings()
    session = mock.Mock(spec=requests.Session)
    probe = BackendProbe(settings, session=session)

    assert probe.check_health() is False
    session.get.assert_not_called()


def test_offline_host_uses_mock(facade, probe, live):
    probe.set_online(False)

    assert facade.mode == "mock"
    assert len(facade.get_tasks()) == 5
    live.get_tasks.assert_not_called()


def test_live_reads_when_available(facade, live):
    live.get_tasks.return_value = [{"id": "live-1"}]

    assert facade.mode == "live"
    assert facade.get_tasks(status="pending") == [{"id": "live-1"}]
    live.get_tasks.assert_called_once_with(status="pending")


def test_failed_live_read_falls_back_to_mock(facade, live):
    live.get_unread_count.side_effect = InternalError("Server error")
    live.get_tasks.side_effect = requests.Timeout("slow")

    assert facade.get_unread_count() == 2
    assert len(facade.get_tasks()) == 5


def test_failed_live_write_propagates(facade, live, as_john):
    live.create_task.side_effect = ValidationError("Assigned user not found")

    with pytest.raises(ValidationError):
        facade.create_task({"title": "x", "category": "daily"})
    assert all(t["title"] != "x" for t in as_john.get_tasks())


def test_build_data_access_in_mock_mode(monkeypatch, tmp_path):
    monkeypatch.setenv("AMC_MOCK_MODE", "true")
    monkeypatch.setenv("AMC_STORAGE_DIR", str(tmp_path))

    access = build_data_access(ClientSettings())

    assert access.mode == "mock"
    assert access.login("admin@amc.com", "admin123", "admin")["user"]["role"] == "admin"
    assert (tmp_path / "local_storage.json").exists()
