import pytest

from amc_portal.models import Activity, ActivityType, TaskCategory
from amc_portal.repositories import TaskRepository


@pytest.fixture
def task(database, admin, user):
    with database.session() as session:
        return TaskRepository(session).create(
            title="Lift inspection", category=TaskCategory.MONTHLY, assigned_by=admin.id, assigned_to=user.id
        )


def add_remark(client, headers, **payload):
    payload.setdefault("message", "The lift makes a noise")
    return client.post("/api/remarks", headers=headers, json=payload)


def test_add_remark(client, db, user, user_headers, task):
    response = add_remark(client, user_headers, type="issue", taskId=task.id)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["userId"] == user.id
    assert data["userName"] == "John Doe"
    assert data["type"] == "issue"
    assert data["taskId"] == task.id
    assert data["adminResponse"] is None

    entry = db.query(Activity).filter(Activity.activity_type == ActivityType.REMARK_ADDED).one()
    assert entry.meta["remarkId"] == data["id"]


def test_add_remark_for_unknown_task(client, user_headers):
    response = add_remark(client, user_headers, taskId="missing")

    assert response.status_code == 400
    assert response.json()["message"] == "Task not found"


def test_users_see_only_their_remarks(client, user_headers, other_headers, admin_headers):
    add_remark(client, user_headers, message="from john")
    add_remark(client, other_headers, message="from jane")

    mine = client.get("/api/remarks", headers=user_headers).json()["data"]
    assert [r["message"] for r in mine] == ["from john"]

    everyone = client.get("/api/remarks", headers=admin_headers).json()["data"]
    assert {r["message"] for r in everyone} == {"from john", "from jane"}


def test_admin_responds_to_remark(client, user_headers, admin_headers):
    remark = add_remark(client, user_headers).json()["data"]

    assert client.patch(
        f"/api/remarks/{remark['id']}/respond", headers=user_headers, json={"response": "self-answer"}
    ).status_code == 403

    response = client.patch(f"/api/remarks/{remark['id']}/respond", headers=admin_headers, json={"response": "On it"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["adminResponse"] == "On it"
    assert data["respondedAt"] is not None


def test_delete_remark_owner_or_admin(client, user_headers, other_headers, admin_headers):
    first = add_remark(client, user_headers).json()["data"]
    second = add_remark(client, user_headers).json()["data"]

    assert client.delete(f"/api/remarks/{first['id']}", headers=other_headers).status_code == 403
    assert client.delete(f"/api/remarks/{first['id']}", headers=user_headers).status_code == 200
    assert client.delete(f"/api/remarks/{second['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/remarks/{second['id']}", headers=admin_headers).status_code == 404
