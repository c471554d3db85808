from amc_portal.models import Notification, Task, User, UserRole
from create_tables import DEFAULT_ADMIN, create_default_admin
from seed_all import SAMPLE_TASKS, SAMPLE_USERS, seed


def test_default_admin_is_created_once(database, db, client):
    create_default_admin(database)
    create_default_admin(database)

    admins = db.query(User).filter(User.role == UserRole.ADMIN).all()
    assert [a.email for a in admins] == [DEFAULT_ADMIN["email"]]

    response = client.post(
        "/api/auth/login",
        json={"email": DEFAULT_ADMIN["email"], "password": DEFAULT_ADMIN["password"], "role": "admin"},
    )
    assert response.status_code == 200


def test_seed_creates_sample_accounts_and_tasks(database, db):
    seed(database)

    assert db.query(User).count() == len(SAMPLE_USERS)
    assert db.query(Task).count() == len(SAMPLE_TASKS)
    assert db.query(Notification).count() == 2

    seeded_user = db.query(User).filter(User.email == "user@amc-portal.com").one()
    assert {t.assigned_to for t in db.query(Task)} == {seeded_user.id}
    assert all(t.due_date is not None for t in db.query(Task))
