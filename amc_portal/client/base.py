# amc_portal/client/base.py
"""The one interface UI code talks to, whether it is online or not.

Every method returns the same camelCase dicts the REST API puts under
``data`` and raises the errors from ``amc_portal.exceptions``.
"""

from typing import Any, Dict, List, Optional, Protocol

Record = Dict[str, Any]

# operations the facade may serve from mock data when the live call fails
READ_OPERATIONS = frozenset({
    "get_current_user",
    "get_users",
    "get_tasks",
    "get_task",
    "get_task_stats",
    "get_notifications",
    "get_unread_count",
    "get_remarks",
})


class DataAccess(Protocol):
    # Auth
    def login(self, email: str, password: str, role: str) -> Record: ...

    def signup(
        self,
        name: str,
        email: str,
        password: str,
        role: str = "user",
        post: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Record: ...

    def get_current_user(self) -> Record: ...

    def update_profile(self, **changes: Any) -> Record: ...

    def change_password(self, current_password: str, new_password: str) -> None: ...

    def logout(self) -> None: ...

    def get_users(self, role: Optional[str] = None) -> List[Record]: ...

    # Tasks
    def get_tasks(self, **filters: Any) -> List[Record]: ...

    def get_task(self, task_id: str) -> Record: ...

    def create_task(self, task: Record) -> Record: ...

    def update_task(self, task_id: str, changes: Record) -> Record: ...

    def update_task_status(self, task_id: str, status: str, actual_time: Optional[int] = None) -> Record: ...

    def delete_task(self, task_id: str) -> None: ...

    def get_task_stats(self) -> Record: ...

    # Notifications
    def get_notifications(
        self, limit: int = 50, unread_only: bool = False, type: Optional[str] = None
    ) -> List[Record]: ...

    def get_unread_count(self) -> int: ...

    def create_notification(self, notification: Record) -> Record: ...

    def mark_notification_read(self, notification_id: str) -> Record: ...

    def mark_all_notifications_read(self) -> int: ...

    def delete_notification(self, notification_id: str) -> None: ...

    # Remarks
    def get_remarks(
        self, user_id: Optional[str] = None, task_id: Optional[str] = None, type: Optional[str] = None
    ) -> List[Record]: ...

    def add_remark(self, message: str, type: str = "feedback", task_id: Optional[str] = None) -> Record: ...

    def respond_to_remark(self, remark_id: str, response: str) -> Record: ...

    def delete_remark(self, remark_id: str) -> None: ...
