import asyncio
from datetime import timedelta

import pytest

from amc_portal.config import get_settings
from amc_portal.models import Notification, NotificationType, Task, TaskCategory, TaskStatus
from amc_portal.repositories import TaskRepository
from amc_portal.services import RealtimeChannel
from amc_portal.services.scheduler import TaskScheduler
from amc_portal.utils.datetime import utc_now


class FakeSocket:
    def __init__(self):
        self.sent = []

    async def send_text(self, text):
        self.sent.append(text)


@pytest.fixture
def realtime():
    return RealtimeChannel()


@pytest.fixture
def scheduler(database, realtime):
    return TaskScheduler(database, realtime, get_settings())


def add_task(database, creator, assignee, due_in, title="Generator test"):
    with database.session() as session:
        return TaskRepository(session).create(
            title=title,
            category=TaskCategory.DAILY,
            assigned_by=creator.id,
            assigned_to=assignee.id if assignee else None,
            due_date=utc_now() + due_in,
        )


def notifications(db, notification_type):
    return db.query(Notification).filter(Notification.type == notification_type).all()


def test_sweep_marks_overdue_and_notifies_once(scheduler, database, db, admin, user):
    task = add_task(database, admin, user, -timedelta(hours=2))

    assert asyncio.run(scheduler.sweep_overdue()) == 1
    assert db.query(Task).filter(Task.id == task.id).one().status == TaskStatus.OVERDUE

    overdue = notifications(db, NotificationType.TASK_OVERDUE)
    assert len(overdue) == 1
    assert overdue[0].user_id == user.id
    assert overdue[0].meta["taskId"] == task.id

    assert asyncio.run(scheduler.sweep_overdue()) == 0
    assert len(notifications(db, NotificationType.TASK_OVERDUE)) == 1


def test_sweep_pushes_to_connected_assignee(scheduler, realtime, database, admin, user):
    socket = FakeSocket()
    realtime.join(socket, user.id)
    add_task(database, admin, user, -timedelta(hours=1))

    asyncio.run(scheduler.sweep_overdue())

    assert len(socket.sent) == 1
    assert '"notification-created"' in socket.sent[0]


def test_sweep_without_assignee_sends_nothing(scheduler, database, db, admin):
    add_task(database, admin, None, -timedelta(hours=1))

    assert asyncio.run(scheduler.sweep_overdue()) == 0
    assert db.query(Task).one().status == TaskStatus.OVERDUE


def test_reminders_for_tasks_due_within_a_day(scheduler, database, db, admin, user):
    soon = add_task(database, admin, user, timedelta(hours=3), "soon")
    add_task(database, admin, user, timedelta(days=3), "later")

    assert asyncio.run(scheduler.send_due_reminders()) == 1

    reminders = notifications(db, NotificationType.TASK_REMINDER)
    assert [n.meta["taskId"] for n in reminders] == [soon.id]
    assert reminders[0].title == "Task Reminder"

    # at most one reminder per task per day
    assert asyncio.run(scheduler.send_due_reminders()) == 0


def test_start_and_stop_register_jobs(scheduler):
    async def run():
        scheduler.start()
        scheduler.start()
        job_ids = {job.id for job in scheduler.scheduler.get_jobs()}
        scheduler.stop()
        return job_ids

    assert asyncio.run(run()) == {"sweep_overdue_tasks", "send_due_reminders"}
    assert scheduler.is_running is False
