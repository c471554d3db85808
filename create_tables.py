# create_tables.py
"""
Create all tables and a default admin account.
Run with: python create_tables.py [--reset]
"""

import argparse

from amc_portal.config import get_settings
from amc_portal.database import Database
from amc_portal.models import UserRole
from amc_portal.repositories import UserRepository
from amc_portal.utils.security import hash_password

DEFAULT_ADMIN = {
    "name": "System Administrator",
    "email": "admin@amc-portal.com",
    "password": "admin123",
    "post": "System Administrator",
    "department": "IT Department",
}


def create_default_admin(database: Database):
    """Create the default admin user unless that email is already taken"""
    with database.session() as db:
        users = UserRepository(db)
        if users.find_by_email(DEFAULT_ADMIN["email"], include_inactive=True):
            print("ℹ️  Admin user already exists")
            return

        users.create(
            name=DEFAULT_ADMIN["name"],
            email=DEFAULT_ADMIN["email"],
            password_hash=hash_password(DEFAULT_ADMIN["password"]),
            role=UserRole.ADMIN,
            post=DEFAULT_ADMIN["post"],
            department=DEFAULT_ADMIN["department"],
        )
        print("✅ Default admin user created!")
        print(f"   Email: {DEFAULT_ADMIN['email']}")
        print(f"   Password: {DEFAULT_ADMIN['password']}")


def create_tables(reset: bool = False, database: Database = None):
    settings = get_settings()
    database = database or Database(settings.database_url, sslmode=settings.database_sslmode).open()
    try:
        if reset:
            database.drop_all()
            print("🗑️  Existing tables dropped")
        database.create_all()
        print("✅ All tables created successfully!")
        create_default_admin(database)
    finally:
        database.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the AMC Portal schema")
    parser.add_argument("--reset", action="store_true", help="drop every table first")
    args = parser.parse_args()
    create_tables(reset=args.reset)
