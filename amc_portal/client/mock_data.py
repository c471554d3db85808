# amc_portal/client/mock_data.py
# Seed content for offline mode

from datetime import datetime, timedelta
from typing import Dict, List

from amc_portal.models.enums import TaskCategory
from amc_portal.utils.datetime import isoformat_utc, utc_now

MOCK_USERS: List[Dict] = [
    {
        "id": "1",
        "name": "Admin User",
        "email": "admin@amc.com",
        "role": "admin",
        "post": "System Administrator",
        "department": "IT",
        "joinDate": "2023-01-01T00:00:00+00:00",
        "isActive": True,
    },
    {
        "id": "2",
        "name": "John Doe",
        "email": "john@amc.com",
        "role": "user",
        "post": "IT Technician",
        "department": "IT",
        "joinDate": "2023-03-15T00:00:00+00:00",
        "isActive": True,
    },
    {
        "id": "3",
        "name": "Jane Smith",
        "email": "jane@amc.com",
        "role": "user",
        "post": "Network Engineer",
        "department": "IT",
        "joinDate": "2023-02-10T00:00:00+00:00",
        "isActive": True,
    },
    {
        "id": "4",
        "name": "Mike Johnson",
        "email": "mike@amc.com",
        "role": "user",
        "post": "System Administrator",
        "department": "IT",
        "joinDate": "2023-01-05T00:00:00+00:00",
        "isActive": True,
    },
    {
        "id": "5",
        "name": "Sarah Wilson",
        "email": "sarah@amc.com",
        "role": "user",
        "post": "Security Specialist",
        "department": "Security",
        "joinDate": "2023-04-20T00:00:00+00:00",
        "isActive": True,
    },
]

# email -> plaintext password, offline demo only
MOCK_CREDENTIALS: Dict[str, str] = {
    "admin@amc.com": "admin123",
    "john@amc.com": "john123",
    "jane@amc.com": "jane123",
    "mike@amc.com": "mike123",
    "sarah@amc.com": "sarah123",
}

# (title, description, category, estimated minutes)
TASK_DEFINITIONS = [
    ("AV Check", "Check audio/video equipment in all conference rooms", TaskCategory.DAILY, 30),
    ("Network Connectivity Check", "Verify network connectivity on every floor", TaskCategory.DAILY, 20),
    ("Server Room Temperature", "Record server room temperature and humidity", TaskCategory.DAILY, 10),
    ("Printer Status Check", "Check toner and paper levels on shared printers", TaskCategory.DAILY, 15),
    ("Backup Verification", "Confirm last night's backups completed", TaskCategory.DAILY, 20),
    ("UPS Battery Test", "Run the weekly UPS self test", TaskCategory.WEEKLY, 45),
    ("Security Patch Review", "Review and schedule pending security patches", TaskCategory.WEEKLY, 60),
    ("Access Log Audit", "Audit badge and VPN access logs", TaskCategory.WEEKLY, 40),
    ("Inventory Reconciliation", "Reconcile hardware inventory with the asset register", TaskCategory.MONTHLY, 120),
    ("Disaster Recovery Drill", "Restore a sample system from backup", TaskCategory.MONTHLY, 180),
]


def generate_mock_tasks(now: datetime = None) -> List[Dict]:
    now = now or utc_now()
    tasks = []
    for index, (title, description, category, estimated_time) in enumerate(TASK_DEFINITIONS):
        if index % 4 == 0:
            status = "completed"
        elif index % 3 == 0:
            status = "in-progress"
        else:
            status = "pending"

        if index % 3 == 0:
            priority = "high"
        elif index % 2 == 0:
            priority = "medium"
        else:
            priority = "low"

        tasks.append({
            "id": f"task-{index + 1}",
            "title": title,
            "description": description,
            "category": category.value,
            "status": status,
            "priority": priority,
            "assignedTo": "2" if index < 5 else "3",
            "assignedBy": "1",
            "dueDate": isoformat_utc(category.default_due_date(now)),
            "estimatedTime": estimated_time,
            "actualTime": None,
            "remarks": None,
            "createdAt": isoformat_utc(now),
            "updatedAt": isoformat_utc(now),
            "completedAt": isoformat_utc(now) if status == "completed" else None,
        })
    return tasks


def generate_mock_notifications(now: datetime = None) -> List[Dict]:
    now = now or utc_now()
    return [
        {
            "id": "notif-1",
            "title": "New Task Assigned",
            "message": "AV Check task has been assigned to you",
            "type": "task-assigned",
            "priority": "medium",
            "userId": "2",
            "isRead": False,
            "metadata": {"taskId": "task-1"},
            "createdAt": isoformat_utc(now),
        },
        {
            "id": "notif-2",
            "title": "Task Reminder",
            "message": "Network Connectivity check is due in 1 hour",
            "type": "task-reminder",
            "priority": "high",
            "userId": "2",
            "isRead": False,
            "metadata": {"taskId": "task-2"},
            "createdAt": isoformat_utc(now),
        },
    ]


def generate_mock_remarks(now: datetime = None) -> List[Dict]:
    now = now or utc_now()
    return [
        {
            "id": "remark-1",
            "userId": "2",
            "taskId": "task-1",
            "message": "The AV system in conference room A is not responding. "
                       "I've tried basic troubleshooting but it still doesn't work.",
            "type": "issue",
            "createdAt": isoformat_utc(now - timedelta(days=2)),
            "adminResponse": "Thank you for reporting this. The AV vendor will visit tomorrow morning to fix the issue.",
            "respondedAt": isoformat_utc(now - timedelta(days=1)),
        },
        {
            "id": "remark-2",
            "userId": "3",
            "taskId": None,
            "message": "We should automate backup verification instead of checking manually every month.",
            "type": "suggestion",
            "createdAt": isoformat_utc(now - timedelta(hours=6)),
            "adminResponse": None,
            "respondedAt": None,
        },
        {
            "id": "remark-3",
            "userId": "4",
            "taskId": "task-3",
            "message": "The server room temperature monitoring is working well. No issues to report this week.",
            "type": "feedback",
            "createdAt": isoformat_utc(now - timedelta(hours=2)),
            "adminResponse": None,
            "respondedAt": None,
        },
    ]
