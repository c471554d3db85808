# amc_portal/client/mock_store.py
import copy
import json
import logging
from typing import Any, Callable, Dict, List, Optional

from amc_portal.client import mock_data
from amc_portal.client.storage import LocalStorage

logger = logging.getLogger(__name__)

USERS_KEY = "amc_users"
TASKS_KEY = "amc_tasks"
NOTIFICATIONS_KEY = "amc_notifications"
REMARKS_KEY = "amc_remarks"
CREDENTIALS_KEY = "amc_credentials"
CURRENT_USER_KEY = "amc_current_user"


class MockDataStore:
    """Offline collections kept in local storage.

    Each collection is seeded the first time it is read while its key is
    empty (or holds JSON that no longer parses). Saves overwrite the whole
    serialized collection.
    """

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def _read(self, key: str, seed: Callable[[], Any]) -> Any:
        raw = self.storage.get_item(key)
        if raw is not None:
            try:
                return json.loads(raw)
            except ValueError:
                logger.warning(f"Stored {key} is corrupt, reseeding")
        value = seed()
        self._write(key, value)
        return value

    def _write(self, key: str, value: Any) -> None:
        self.storage.set_item(key, json.dumps(value))

    # Users
    def get_users(self) -> List[Dict]:
        return self._read(USERS_KEY, lambda: copy.deepcopy(mock_data.MOCK_USERS))

    def save_users(self, users: List[Dict]) -> None:
        self._write(USERS_KEY, users)

    # Tasks
    def get_tasks(self) -> List[Dict]:
        return self._read(TASKS_KEY, mock_data.generate_mock_tasks)

    def save_tasks(self, tasks: List[Dict]) -> None:
        self._write(TASKS_KEY, tasks)

    # Notifications
    def get_notifications(self) -> List[Dict]:
        return self._read(NOTIFICATIONS_KEY, mock_data.generate_mock_notifications)

    def save_notifications(self, notifications: List[Dict]) -> None:
        self._write(NOTIFICATIONS_KEY, notifications)

    # Remarks
    def get_remarks(self) -> List[Dict]:
        return self._read(REMARKS_KEY, mock_data.generate_mock_remarks)

    def save_remarks(self, remarks: List[Dict]) -> None:
        self._write(REMARKS_KEY, remarks)

    # Credentials
    def get_credentials(self) -> Dict[str, str]:
        return self._read(CREDENTIALS_KEY, lambda: dict(mock_data.MOCK_CREDENTIALS))

    def save_credentials(self, credentials: Dict[str, str]) -> None:
        self._write(CREDENTIALS_KEY, credentials)

    # Session
    def get_current_user(self) -> Optional[Dict]:
        raw = self.storage.get_item(CURRENT_USER_KEY)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            self.storage.remove_item(CURRENT_USER_KEY)
            return None

    def set_current_user(self, user: Dict) -> None:
        self._write(CURRENT_USER_KEY, user)

    def clear_current_user(self) -> None:
        self.storage.remove_item(CURRENT_USER_KEY)

    def reset(self) -> None:
        for key in (USERS_KEY, TASKS_KEY, NOTIFICATIONS_KEY, REMARKS_KEY, CREDENTIALS_KEY, CURRENT_USER_KEY):
            self.storage.remove_item(key)
