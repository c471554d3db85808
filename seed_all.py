"""
Database seeding script
Creates the schema and populates it with sample accounts, tasks and notifications
"""

from datetime import timedelta

from amc_portal.config import get_settings
from amc_portal.database import Database
from amc_portal.models import NotificationType, TaskCategory, TaskPriority, UserRole
from amc_portal.repositories import NotificationRepository, TaskRepository, UserRepository
from amc_portal.utils.datetime import isoformat_utc, utc_now
from amc_portal.utils.security import hash_password

SAMPLE_USERS = [
    {
        "name": "Admin User",
        "email": "admin@amc-portal.com",
        "password": "admin123",
        "role": UserRole.ADMIN,
        "post": "System Administrator",
        "department": "IT Department",
    },
    {
        "name": "John Doe",
        "email": "user@amc-portal.com",
        "password": "user123",
        "role": UserRole.USER,
        "post": "Maintenance Technician",
        "department": "Operations",
    },
]

SAMPLE_TASKS = [
    {
        "title": "Daily Equipment Inspection",
        "description": "Inspect all critical equipment for any signs of wear or damage",
        "category": TaskCategory.DAILY,
        "priority": TaskPriority.HIGH,
        "estimated_time": 60,
    },
    {
        "title": "Weekly Safety Check",
        "description": "Conduct comprehensive safety inspection of the facility",
        "category": TaskCategory.WEEKLY,
        "priority": TaskPriority.MEDIUM,
        "estimated_time": 120,
    },
    {
        "title": "Monthly Preventive Maintenance",
        "description": "Perform scheduled preventive maintenance on all machinery",
        "category": TaskCategory.MONTHLY,
        "priority": TaskPriority.HIGH,
        "estimated_time": 240,
    },
]


def seed(database: Database):
    print("🌱 Seeding database with sample data...")
    database.create_all()

    with database.session() as db:
        users = UserRepository(db)
        created = {}
        for data in SAMPLE_USERS:
            existing = users.find_by_email(data["email"], include_inactive=True)
            if existing:
                print(f"ℹ️  {data['email']} already exists, skipping")
                created[data["role"]] = existing
                continue
            created[data["role"]] = users.create(
                name=data["name"],
                email=data["email"],
                password_hash=hash_password(data["password"]),
                role=data["role"],
                post=data["post"],
                department=data["department"],
            )
            print(f"✅ Created {data['role'].value} user: {data['email']}")

        admin, user = created[UserRole.ADMIN], created[UserRole.USER]

        tasks = TaskRepository(db)
        now = utc_now()
        first_task = None
        for data in SAMPLE_TASKS:
            task = tasks.create(
                title=data["title"],
                description=data["description"],
                category=data["category"],
                priority=data["priority"],
                assigned_to=user.id,
                assigned_by=admin.id,
                due_date=data["category"].default_due_date(now),
                estimated_time=data["estimated_time"],
            )
            first_task = first_task or task
        print("✅ Created sample tasks")

        notifications = NotificationRepository(db)
        notifications.create(
            user_id=user.id,
            title="Welcome to AMC Portal",
            message="Welcome to the Asset Management & Maintenance Portal. Start by reviewing your assigned tasks.",
            type=NotificationType.SYSTEM_ALERT,
            priority=TaskPriority.MEDIUM,
        )
        notifications.create(
            user_id=user.id,
            title="New Task Assigned",
            message=f"You have been assigned a new task: {first_task.title}",
            type=NotificationType.TASK_ASSIGNED,
            priority=TaskPriority.HIGH,
            metadata={
                "taskId": first_task.id,
                "taskTitle": first_task.title,
                "dueDate": isoformat_utc(first_task.due_date or now + timedelta(days=1)),
            },
        )
        print("✅ Created sample notifications")

    print("\n🎉 Database seeded successfully!")
    print("\n📋 Test Accounts:")
    for data in SAMPLE_USERS:
        print(f"   {data['role'].value:<5}  {data['email']:<24} / {data['password']}")


def main():
    settings = get_settings()
    database = Database(settings.database_url, sslmode=settings.database_sslmode).open()
    try:
        seed(database)
    except Exception as e:
        print(f"❌ Error seeding database: {e}")
        raise
    finally:
        database.close()


if __name__ == "__main__":
    main()
