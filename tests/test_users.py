from amc_portal.models import Activity, ActivityType, User


def test_user_routes_require_admin(client, user, user_headers):
    response = client.get("/api/users", headers=user_headers)

    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "Insufficient permissions"}
    assert client.get(f"/api/users/{user.id}", headers=user_headers).status_code == 403


def test_list_users_with_role_filter(client, admin, user, other_user, admin_headers):
    everyone = client.get("/api/users", headers=admin_headers).json()["data"]
    assert {u["email"] for u in everyone} == {admin.email, user.email, other_user.email}
    assert all("passwordHash" not in u and "password_hash" not in u for u in everyone)

    admins = client.get("/api/users", headers=admin_headers, params={"role": "admin"}).json()["data"]
    assert [u["id"] for u in admins] == [admin.id]


def test_get_user(client, user, admin_headers):
    data = client.get(f"/api/users/{user.id}", headers=admin_headers).json()["data"]

    assert data["name"] == "John Doe"
    assert data["isActive"] is True
    assert client.get("/api/users/nobody", headers=admin_headers).status_code == 404


def test_admin_updates_user_profile(client, db, admin, user, admin_headers):
    response = client.put(
        f"/api/users/{user.id}", headers=admin_headers, json={"department": "Facilities", "post": "Supervisor"}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["department"] == "Facilities"
    assert data["post"] == "Supervisor"
    assert data["role"] == "user"

    entry = db.query(Activity).filter(Activity.activity_type == ActivityType.PROFILE_UPDATED).one()
    assert entry.user_id == admin.id


def test_deactivate_user(client, db, admin, user, admin_headers, user_headers):
    response = client.delete(f"/api/users/{user.id}", headers=admin_headers)

    assert response.status_code == 200
    assert db.query(User).filter(User.id == user.id).one().is_active is False
    entry = db.query(Activity).filter(Activity.activity_type == ActivityType.USER_DEACTIVATED).one()
    assert entry.meta == {"targetUserId": user.id}

    # the deactivated user's token stops working
    assert client.get("/api/auth/me", headers=user_headers).status_code == 401


def test_admin_cannot_deactivate_self(client, admin, admin_headers):
    response = client.delete(f"/api/users/{admin.id}", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "You cannot deactivate your own account"
