# amc_portal/services/scheduler.py
"""
Periodic jobs: overdue sweep with overdue notifications, and reminders for
tasks due within the next 24 hours
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from amc_portal.config import Settings, get_settings
from amc_portal.database import Database
from amc_portal.models import NotificationType, Task
from amc_portal.repositories import NotificationRepository, TaskRepository
from amc_portal.services.notification_service import NotificationService
from amc_portal.services.realtime import RealtimeChannel
from amc_portal.utils.datetime import utc_now

logger = logging.getLogger(__name__)

REMINDER_WINDOW = timedelta(hours=24)


def start_of_day(now: datetime) -> datetime:
    return datetime.combine(now.date(), datetime.min.time())


class TaskScheduler:
    """Scheduler for overdue sweeps and due-soon reminders"""

    def __init__(self, database: Database, realtime: Optional[RealtimeChannel] = None, settings: Optional[Settings] = None):
        self.database = database
        self.realtime = realtime
        self.settings = settings or get_settings()
        self.scheduler = AsyncIOScheduler()
        self.is_running = False

    def start(self):
        if self.is_running:
            return

        self.scheduler.add_job(
            self.sweep_overdue,
            trigger=IntervalTrigger(minutes=self.settings.overdue_sweep_minutes),
            id='sweep_overdue_tasks',
            name='Sweep Overdue Tasks',
            replace_existing=True
        )
        self.scheduler.add_job(
            self.send_due_reminders,
            trigger=IntervalTrigger(minutes=self.settings.reminder_check_minutes),
            id='send_due_reminders',
            name='Send Due Reminders',
            replace_existing=True
        )

        self.scheduler.start()
        self.is_running = True
        logger.info("Task scheduler started successfully")

    def stop(self):
        if self.is_running:
            self.scheduler.shutdown(wait=False)
            self.is_running = False
            logger.info("Task scheduler stopped")

    async def _notify_once_per_day(
        self, service: NotificationService, task: Task, notification_type: NotificationType, now: datetime
    ) -> bool:
        repo = NotificationRepository(service.db)
        if repo.exists_for_task_since(task.assigned_to, notification_type, task.id, start_of_day(now)):
            logger.debug(f"{notification_type.value} already sent today for task {task.id}, skipping")
            return False

        if notification_type == NotificationType.TASK_OVERDUE:
            await service.create_task_overdue_notification(task)
        else:
            await service.create_task_reminder_notification(task)
        return True

    async def sweep_overdue(self) -> int:
        """Flip past-due tasks to overdue and tell each assignee; returns notifications sent"""
        sent = 0
        try:
            with self.database.session() as db:
                now = utc_now()
                tasks = TaskRepository(db)
                task_ids = tasks.mark_overdue(now)
                logger.info(f"Overdue sweep flipped {len(task_ids)} task(s)")

                service = NotificationService(db, self.realtime)
                for task in tasks.find_by_ids(task_ids):
                    if task.assigned_to and await self._notify_once_per_day(
                        service, task, NotificationType.TASK_OVERDUE, now
                    ):
                        sent += 1
        except Exception as e:
            logger.error(f"Error sweeping overdue tasks: {e}")
        return sent

    async def send_due_reminders(self) -> int:
        """Remind assignees of open tasks due within the next 24 hours"""
        sent = 0
        try:
            with self.database.session() as db:
                now = utc_now()
                due_soon = TaskRepository(db).find_due_between(now, now + REMINDER_WINDOW)
                logger.info(f"Found {len(due_soon)} task(s) due within 24 hours")

                service = NotificationService(db, self.realtime)
                for task in due_soon:
                    if await self._notify_once_per_day(service, task, NotificationType.TASK_REMINDER, now):
                        sent += 1
        except Exception as e:
            logger.error(f"Error sending due reminders: {e}")
        return sent
