# amc_portal/client/facade.py
import logging
from typing import Any, List, Optional

import requests

from amc_portal.client.base import READ_OPERATIONS, DataAccess, Record
from amc_portal.client.live_access import LiveDataAccess
from amc_portal.client.mock_access import MockDataAccess
from amc_portal.client.mock_store import MockDataStore
from amc_portal.client.storage import LocalStorage
from amc_portal.config import ClientSettings, get_client_settings
from amc_portal.exceptions import PortalError

logger = logging.getLogger(__name__)


class BackendProbe:
    """Decides whether the live API should be used.

    Two signals have to agree: the last health check succeeded and the host
    reports the network as online. Mock mode overrides both.
    """

    def __init__(self, settings: ClientSettings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()
        self.available = False
        self.online = True

    def check_health(self) -> bool:
        if self.settings.mock_mode:
            self.available = False
            return False
        try:
            response = self.session.get(f"{self.settings.api_base_url}/health", timeout=self.settings.health_timeout)
            self.available = response.ok
        except requests.RequestException as e:
            logger.info(f"Backend health check failed: {e}")
            self.available = False

        if self.available:
            logger.info("Backend connected successfully")
        else:
            logger.info("Backend not available - running in mock mode")
        return self.available

    def set_online(self, online: bool) -> None:
        self.online = online

    @property
    def use_live(self) -> bool:
        return not self.settings.mock_mode and self.available and self.online


class ClientDataAccess:
    """Routes each call to the live API or to mock data.

    Reads that fail on the live path are answered from mock data with a
    warning. Writes never fall back; their errors reach the caller.
    """

    def __init__(self, live: DataAccess, mock: DataAccess, probe: BackendProbe):
        self.live = live
        self.mock = mock
        self.probe = probe

    @property
    def mode(self) -> str:
        return "live" if self.probe.use_live else "mock"

    def _call(self, operation: str, *args: Any, **kwargs: Any) -> Any:
        if not self.probe.use_live:
            return getattr(self.mock, operation)(*args, **kwargs)

        if operation not in READ_OPERATIONS:
            return getattr(self.live, operation)(*args, **kwargs)

        try:
            return getattr(self.live, operation)(*args, **kwargs)
        except (PortalError, requests.RequestException) as e:
            logger.warning(f"Live {operation} failed, using mock data: {e}")
            return getattr(self.mock, operation)(*args, **kwargs)

    # Auth
    def login(self, email: str, password: str, role: str) -> Record:
        return self._call("login", email, password, role)

    def signup(self, name: str, email: str, password: str, role: str = "user",
               post: Optional[str] = None, department: Optional[str] = None) -> Record:
        return self._call("signup", name, email, password, role=role, post=post, department=department)

    def get_current_user(self) -> Record:
        return self._call("get_current_user")

    def update_profile(self, **changes: Any) -> Record:
        return self._call("update_profile", **changes)

    def change_password(self, current_password: str, new_password: str) -> None:
        return self._call("change_password", current_password, new_password)

    def logout(self) -> None:
        return self._call("logout")

    def get_users(self, role: Optional[str] = None) -> List[Record]:
        return self._call("get_users", role=role)

    # Tasks
    def get_tasks(self, **filters: Any) -> List[Record]:
        return self._call("get_tasks", **filters)

    def get_task(self, task_id: str) -> Record:
        return self._call("get_task", task_id)

    def create_task(self, task: Record) -> Record:
        return self._call("create_task", task)

    def update_task(self, task_id: str, changes: Record) -> Record:
        return self._call("update_task", task_id, changes)

    def update_task_status(self, task_id: str, status: str, actual_time: Optional[int] = None) -> Record:
        return self._call("update_task_status", task_id, status, actual_time=actual_time)

    def delete_task(self, task_id: str) -> None:
        return self._call("delete_task", task_id)

    def get_task_stats(self) -> Record:
        return self._call("get_task_stats")

    # Notifications
    def get_notifications(self, limit: int = 50, unread_only: bool = False,
                          type: Optional[str] = None) -> List[Record]:
        return self._call("get_notifications", limit=limit, unread_only=unread_only, type=type)

    def get_unread_count(self) -> int:
        return self._call("get_unread_count")

    def create_notification(self, notification: Record) -> Record:
        return self._call("create_notification", notification)

    def mark_notification_read(self, notification_id: str) -> Record:
        return self._call("mark_notification_read", notification_id)

    def mark_all_notifications_read(self) -> int:
        return self._call("mark_all_notifications_read")

    def delete_notification(self, notification_id: str) -> None:
        return self._call("delete_notification", notification_id)

    # Remarks
    def get_remarks(self, user_id: Optional[str] = None, task_id: Optional[str] = None,
                    type: Optional[str] = None) -> List[Record]:
        return self._call("get_remarks", user_id=user_id, task_id=task_id, type=type)

    def add_remark(self, message: str, type: str = "feedback", task_id: Optional[str] = None) -> Record:
        return self._call("add_remark", message, type=type, task_id=task_id)

    def respond_to_remark(self, remark_id: str, response: str) -> Record:
        return self._call("respond_to_remark", remark_id, response)

    def delete_remark(self, remark_id: str) -> None:
        return self._call("delete_remark", remark_id)


def build_data_access(settings: Optional[ClientSettings] = None, probe_now: bool = True) -> ClientDataAccess:
    """Wire storage, both implementations and the probe together"""
    settings = settings or get_client_settings()
    storage = LocalStorage(settings.storage_dir)
    mock = MockDataAccess(MockDataStore(storage))
    live = LiveDataAccess(settings, storage)
    probe = BackendProbe(settings)
    if probe_now:
        probe.check_health()
    return ClientDataAccess(live, mock, probe)
