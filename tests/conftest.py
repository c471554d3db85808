import os

# must be set before amc_portal reads its settings
os.environ.setdefault("APP_ENV", "test")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["REFRESH_SECRET_KEY"] = "test-refresh-secret"
os.environ["SCHEDULER_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient

from amc_portal.config import get_client_settings, get_settings
from amc_portal.database import Database
from amc_portal.models import UserRole
from amc_portal.repositories import UserRepository
from amc_portal.utils.security import create_access_token, hash_password

get_settings.cache_clear()
get_client_settings.cache_clear()

from main import create_app  # noqa: E402


@pytest.fixture
def database():
    db = Database("sqlite://").open()
    db.create_all()
    yield db
    db.close()


@pytest.fixture
def db(database):
    with database.session() as session:
        yield session


@pytest.fixture
def app(database):
    return create_app(settings=get_settings(), database=database)


@pytest.fixture
def client(app):
    return TestClient(app)


def make_user(database, email, role=UserRole.USER, password="secret123", name=None, **extra):
    with database.session() as session:
        return UserRepository(session).create(
            name=name or email.split("@")[0].title(),
            email=email,
            password_hash=hash_password(password),
            role=role,
            **extra,
        )


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def admin(database):
    return make_user(database, "admin@amc-portal.com", UserRole.ADMIN, password="admin123", name="Admin User")


@pytest.fixture
def user(database):
    return make_user(database, "john@amc-portal.com", password="john123", name="John Doe")


@pytest.fixture
def other_user(database):
    return make_user(database, "jane@amc-portal.com", password="jane123", name="Jane Smith")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def user_headers(user):
    return auth_headers(user)


@pytest.fixture
def other_headers(other_user):
    return auth_headers(other_user)
