# amc_portal/client/live_access.py
import json
import logging
from typing import Any, Dict, List, Optional

import requests

from amc_portal.client.base import Record
from amc_portal.client.mock_store import CURRENT_USER_KEY
from amc_portal.client.storage import LocalStorage
from amc_portal.config import ClientSettings
from amc_portal.exceptions import InternalError, PortalError, error_for_status

logger = logging.getLogger(__name__)

REFRESH_TOKEN_KEY = "amc_refresh_token"

# shown when the server gives no message of its own
DEFAULT_MESSAGES = {
    400: "Invalid request. Please check the submitted data.",
    401: "Your session has expired. Please log in again.",
    403: "Access denied. You don't have permission to perform this action.",
    404: "The requested resource was not found.",
    409: "This record already exists.",
    500: "Server error. Please try again later.",
}


def api_error(response: requests.Response) -> PortalError:
    """Map an error response to the matching PortalError subclass"""
    message = None
    errors = None
    try:
        body = response.json()
        message = body.get("message")
        errors = body.get("errors")
    except (ValueError, AttributeError):
        pass
    default = DEFAULT_MESSAGES.get(response.status_code, DEFAULT_MESSAGES[500])
    return error_for_status(response.status_code, message or default, errors)


class LiveDataAccess:
    """DataAccess over the REST API with bearer tokens"""

    def __init__(self, settings: ClientSettings, storage: LocalStorage, session: Optional[requests.Session] = None):
        self.base_url = settings.api_base_url
        self.timeout = settings.request_timeout
        self.storage = storage
        self.session = session or requests.Session()
        self.access_token: Optional[str] = None

    # Transport

    @property
    def refresh_token(self) -> Optional[str]:
        return self.storage.get_item(REFRESH_TOKEN_KEY)

    def _store_session(self, result: Record) -> None:
        self.access_token = result.get("accessToken")
        if result.get("refreshToken"):
            self.storage.set_item(REFRESH_TOKEN_KEY, result["refreshToken"])
        if result.get("user"):
            self.storage.set_item(CURRENT_USER_KEY, json.dumps(result["user"]))

    def _clear_session(self) -> None:
        self.access_token = None
        self.storage.remove_item(REFRESH_TOKEN_KEY)
        self.storage.remove_item(CURRENT_USER_KEY)

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        try:
            return self.session.request(
                method, f"{self.base_url}{path}", headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise InternalError(f"Unable to reach the server: {e}") from e

    def _refresh(self) -> bool:
        refresh_token = self.refresh_token
        if not refresh_token:
            return False
        self.access_token = None
        response = self._send("POST", "/api/auth/refresh", json={"refreshToken": refresh_token})
        if not response.ok:
            logger.info("Token refresh rejected, clearing session")
            self._clear_session()
            return False
        self._store_session(response.json().get("data", {}))
        return True

    def _request(self, method: str, path: str, retry: bool = True, **kwargs) -> Any:
        response = self._send(method, path, **kwargs)
        # one refresh-and-retry when the access token has expired
        if response.status_code == 401 and retry and self._refresh():
            return self._request(method, path, retry=False, **kwargs)
        if not response.ok:
            raise api_error(response)
        if not response.content:
            return None
        return response.json().get("data")

    @staticmethod
    def _params(**params: Any) -> Dict[str, Any]:
        return {key: value for key, value in params.items() if value is not None}

    # Auth

    def login(self, email: str, password: str, role: str) -> Record:
        result = self._request(
            "POST", "/api/auth/login", retry=False, json={"email": email, "password": password, "role": role}
        )
        self._store_session(result)
        return result

    def signup(self, name: str, email: str, password: str, role: str = "user",
               post: Optional[str] = None, department: Optional[str] = None) -> Record:
        payload = {"name": name, "email": email, "password": password, "role": role,
                   "post": post, "department": department}
        result = self._request("POST", "/api/auth/register", retry=False, json=self._params(**payload))
        self._store_session(result)
        return result

    def get_current_user(self) -> Record:
        return self._request("GET", "/api/auth/me")

    def update_profile(self, **changes: Any) -> Record:
        user = self._request("PUT", "/api/auth/profile", json=self._params(**changes))
        self.storage.set_item(CURRENT_USER_KEY, json.dumps(user))
        return user

    def change_password(self, current_password: str, new_password: str) -> None:
        self._request(
            "PUT",
            "/api/auth/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    def logout(self) -> None:
        try:
            self._request("POST", "/api/auth/logout", retry=False)
        finally:
            self._clear_session()

    def get_users(self, role: Optional[str] = None) -> List[Record]:
        return self._request("GET", "/api/users", params=self._params(role=role))

    # Tasks

    def get_tasks(self, status: Optional[str] = None, category: Optional[str] = None,
                  priority: Optional[str] = None, search: Optional[str] = None,
                  assigned_to: Optional[str] = None, limit: Optional[int] = 50) -> List[Record]:
        params = self._params(status=status, category=category, priority=priority,
                              search=search, assignedTo=assigned_to, limit=limit)
        return self._request("GET", "/api/tasks", params=params)

    def get_task(self, task_id: str) -> Record:
        return self._request("GET", f"/api/tasks/{task_id}")

    def create_task(self, task: Record) -> Record:
        return self._request("POST", "/api/tasks", json=task)

    def update_task(self, task_id: str, changes: Record) -> Record:
        return self._request("PUT", f"/api/tasks/{task_id}", json=changes)

    def update_task_status(self, task_id: str, status: str, actual_time: Optional[int] = None) -> Record:
        payload = self._params(status=status, actualTime=actual_time)
        return self._request("PATCH", f"/api/tasks/{task_id}/status", json=payload)

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/api/tasks/{task_id}")

    def get_task_stats(self) -> Record:
        return self._request("GET", "/api/tasks/stats")

    # Notifications

    def get_notifications(self, limit: int = 50, unread_only: bool = False,
                          type: Optional[str] = None) -> List[Record]:
        params = self._params(limit=limit, unreadOnly=str(unread_only).lower(), type=type)
        return self._request("GET", "/api/notifications", params=params)

    def get_unread_count(self) -> int:
        return self._request("GET", "/api/notifications/unread-count")["count"]

    def create_notification(self, notification: Record) -> Record:
        return self._request("POST", "/api/notifications", json=notification)

    def mark_notification_read(self, notification_id: str) -> Record:
        return self._request("PATCH", f"/api/notifications/{notification_id}/read")

    def mark_all_notifications_read(self) -> int:
        return self._request("PATCH", "/api/notifications/read-all")["count"]

    def delete_notification(self, notification_id: str) -> None:
        self._request("DELETE", f"/api/notifications/{notification_id}")

    # Remarks

    def get_remarks(self, user_id: Optional[str] = None, task_id: Optional[str] = None,
                    type: Optional[str] = None) -> List[Record]:
        params = self._params(userId=user_id, taskId=task_id, type=type)
        return self._request("GET", "/api/remarks", params=params)

    def add_remark(self, message: str, type: str = "feedback", task_id: Optional[str] = None) -> Record:
        payload = self._params(message=message, type=type, taskId=task_id)
        return self._request("POST", "/api/remarks", json=payload)

    def respond_to_remark(self, remark_id: str, response: str) -> Record:
        return self._request("PATCH", f"/api/remarks/{remark_id}/respond", json={"response": response})

    def delete_remark(self, remark_id: str) -> None:
        self._request("DELETE", f"/api/remarks/{remark_id}")
