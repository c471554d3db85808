import pytest

from amc_portal.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


def test_login_stores_current_user(mock_access, store):
    result = mock_access.login("JOHN@amc.com", "john123", "user")

    assert result["user"]["id"] == "2"
    assert result["accessToken"] is None
    assert store.get_current_user()["id"] == "2"
    assert mock_access.get_current_user()["lastLogin"] is not None


@pytest.mark.parametrize(
    "email,password,role,message",
    [
        ("john@amc.com", "wrong", "user", "Invalid credentials"),
        ("nobody@amc.com", "john123", "user", "Invalid credentials"),
        ("john@amc.com", "john123", "admin", "Invalid role for this user"),
    ],
)
def test_login_failures(mock_access, email, password, role, message):
    with pytest.raises(AuthenticationError) as exc:
        mock_access.login(email, password, role)
    assert exc.value.message == message


def test_signup_then_login(mock_access):
    user = mock_access.signup("New Person", "new@amc.com", "secret1")["user"]
    mock_access.logout()

    assert mock_access.login("new@amc.com", "secret1", "user")["user"]["id"] == user["id"]


def test_signup_duplicate_and_validation(mock_access):
    with pytest.raises(ConflictError):
        mock_access.signup("John Again", "john@amc.com", "secret1")
    with pytest.raises(ValidationError):
        mock_access.signup("X", "x@amc.com", "secret1")
    with pytest.raises(ValidationError):
        mock_access.signup("Shorty", "short@amc.com", "123")


def test_requires_login(mock_access):
    with pytest.raises(AuthenticationError):
        mock_access.get_tasks()


def test_user_sees_only_own_tasks(as_john):
    tasks = as_john.get_tasks()

    assert {t["assignedTo"] for t in tasks} == {"2"}
    assert len(tasks) == 5
    assert tasks[0]["assignedToName"] == "John Doe"
    assert tasks[0]["assignedByName"] == "Admin User"


def test_task_search_and_filters(as_admin):
    assert [t["id"] for t in as_admin.get_tasks(search="network")] == ["task-2"]
    assert {t["category"] for t in as_admin.get_tasks(category="weekly")} == {"weekly"}
    assert len(as_admin.get_tasks(limit=3)) == 3


def test_get_task_permissions(as_john):
    assert as_john.get_task("task-1")["id"] == "task-1"
    with pytest.raises(AuthorizationError):
        as_john.get_task("task-6")
    with pytest.raises(NotFoundError):
        as_john.get_task("task-99")


def test_create_task_notifies_other_assignee(as_admin, store):
    task = as_admin.create_task({"title": "Fire drill", "category": "monthly", "assignedTo": "4"})

    assert task["status"] == "pending"
    assert task["assignedBy"] == "1"
    assert task["dueDate"] is not None
    notes = [n for n in store.get_notifications() if n["userId"] == "4"]
    assert len(notes) == 1
    assert notes[0]["metadata"]["taskId"] == task["id"]


def test_create_task_for_self_does_not_notify(as_john, store):
    before = len(store.get_notifications())
    as_john.create_task({"title": "My own", "category": "daily", "assignedTo": "2"})

    assert len(store.get_notifications()) == before


def test_create_task_validation(as_admin):
    with pytest.raises(ValidationError):
        as_admin.create_task({"title": " ", "category": "daily"})
    with pytest.raises(ValidationError):
        as_admin.create_task({"title": "Bad", "category": "hourly"})
    with pytest.raises(ValidationError):
        as_admin.create_task({"title": "Ghost", "category": "daily", "assignedTo": "99"})


def test_due_date_is_checked_and_normalized(as_admin, store):
    before = as_admin.get_task_stats()

    with pytest.raises(ValidationError, match="dueDate must be an ISO-8601 date"):
        as_admin.create_task({"title": "Later", "category": "daily", "dueDate": "next friday"})
    with pytest.raises(ValidationError):
        as_admin.update_task("task-2", {"dueDate": "soon"})

    assert len(store.get_tasks()) == 10
    assert as_admin.get_task_stats() == before

    created = as_admin.create_task({"title": "Later", "category": "daily", "dueDate": "2030-01-01T09:00:00Z"})
    assert created["dueDate"] == "2030-01-01T09:00:00+00:00"
    updated = as_admin.update_task(created["id"], {"dueDate": "2030-02-01T09:00:00+02:00"})
    assert updated["dueDate"] == "2030-02-01T07:00:00+00:00"


def test_update_task_reassignment_notifies(as_admin, store):
    updated = as_admin.update_task("task-2", {"assignedTo": "5", "title": "Network sweep"})

    assert updated["assignedToName"] == "Sarah Wilson"
    assert updated["title"] == "Network sweep"
    assert [n["type"] for n in store.get_notifications() if n["userId"] == "5"] == ["task-assigned"]


def test_status_rules(as_john):
    completed = as_john.update_task_status("task-2", "completed", actual_time=15)
    assert completed["completedAt"] is not None
    assert completed["actualTime"] == 15

    with pytest.raises(AuthorizationError):
        as_john.update_task_status("task-6", "completed")
    with pytest.raises(ValidationError):
        as_john.update_task_status("task-2", "finished")


def test_delete_task_requires_assigner(as_john, mock_access):
    with pytest.raises(AuthorizationError):
        as_john.delete_task("task-1")

    mock_access.login("admin@amc.com", "admin123", "admin")
    mock_access.delete_task("task-1")
    with pytest.raises(NotFoundError):
        mock_access.get_task("task-1")


def test_stats_flip_overdue_and_compute_compliance(as_john, store):
    tasks = store.get_tasks()
    tasks[1]["dueDate"] = "2000-01-01T00:00:00+00:00"
    store.save_tasks(tasks)

    stats = as_john.get_task_stats()

    assert stats == {
        "totalTasks": 5,
        "completedTasks": 2,
        "pendingTasks": 1,
        "inProgressTasks": 1,
        "overdueTasks": 1,
        "complianceRate": 40,
    }
    assert as_john.mark_overdue() == []


def test_notifications_scoped_to_current_user(as_john, mock_access):
    assert as_john.get_unread_count() == 2
    as_john.mark_notification_read("notif-1")
    assert [n["id"] for n in as_john.get_notifications(unread_only=True)] == ["notif-2"]
    assert as_john.mark_all_notifications_read() == 1
    assert as_john.get_unread_count() == 0

    mock_access.login("jane@amc.com", "jane123", "user")
    with pytest.raises(NotFoundError):
        mock_access.mark_notification_read("notif-2")
    with pytest.raises(NotFoundError):
        mock_access.delete_notification("notif-2")


def test_create_notification_permissions(as_john):
    with pytest.raises(AuthorizationError):
        as_john.create_notification({"title": "Hi", "message": "there", "userId": "3"})

    note = as_john.create_notification({"title": "Memo", "message": "to self"})
    assert note["userId"] == "2"
    assert note["type"] == "system-alert"


def test_remarks_flow(as_john, mock_access):
    remark = as_john.add_remark("Cable is frayed", type="issue", task_id="task-1")
    assert {r["userId"] for r in as_john.get_remarks()} == {"2"}
    with pytest.raises(AuthorizationError):
        as_john.respond_to_remark(remark["id"], "ok")

    mock_access.login("admin@amc.com", "admin123", "admin")
    answered = mock_access.respond_to_remark(remark["id"], "Replacing it today")
    assert answered["respondedAt"] is not None
    assert len(mock_access.get_remarks()) == 4

    mock_access.login("jane@amc.com", "jane123", "user")
    with pytest.raises(AuthorizationError):
        mock_access.delete_remark(remark["id"])


def test_profile_and_password(as_john):
    updated = as_john.update_profile(department="Facilities", role="admin")
    assert updated["department"] == "Facilities"
    assert updated["role"] == "user"

    with pytest.raises(AuthenticationError):
        as_john.change_password("wrong", "another1")
    as_john.change_password("john123", "another1")
    as_john.logout()
    assert as_john.login("john@amc.com", "another1", "user")["user"]["id"] == "2"
