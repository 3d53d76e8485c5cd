"""Upcoming-deadline notifications.

Meant to be run once a day by an external scheduler (cron, a Kubernetes
CronJob) through the ``taskboard-deadlines`` command; there is no
in-process timer.
"""
import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from . import crud, models
from .config import get_settings
from .errors import NotificationDeliveryError
from .notifications import NotificationService

logger = logging.getLogger("taskboard-core.deadlines")


def send_deadline_notifications(
    db: Session,
    notifier: NotificationService,
    today: Optional[date] = None,
    days_ahead: Optional[int] = None,
) -> list[models.Notification]:
    """
    Notify assignees of active tasks due within the next few days.

    Args:
        db: Database session
        notifier: Notification service used for delivery
        today: Reference day (defaults to the current date)
        days_ahead: Size of the look-ahead window in days, inclusive
            (defaults to the deadline_days_ahead setting)

    Returns:
        Notifications that were stored

    Raises:
        NotificationDeliveryError: If some records could not be stored, after
            every task has been handled
    """
    today = today or date.today()
    if days_ahead is None:
        days_ahead = get_settings().deadline_days_ahead
    horizon = today + timedelta(days=days_ahead)
    tasks = crud.get_tasks_due_between(db, today, horizon)
    logger.info(f"Found {len(tasks)} task(s) due between {today} and {horizon}")

    sent: list[models.Notification] = []
    failed: list[str] = []
    for task in tasks:
        if not task.assignees:
            continue
        text = f'Task "{task.title}" in project "{task.project.title}" is due on {task.end_date.isoformat()}.'
        try:
            sent.extend(notifier.deliver(
                db,
                [(user.id, models.NotificationType.DEADLINE, text) for user in task.assignees],
                notifier.task_link(task.project_id, task.id),
            ))
        except NotificationDeliveryError as e:
            failed.extend(e.recipient_ids)

    if failed:
        raise NotificationDeliveryError(
            f"Deadline notifications could not be stored for {len(failed)} recipient(s).",
            recipient_ids=failed,
        )
    return sent


def main() -> None:
    """Run one deadline sweep against the configured database."""
    from .database import SessionLocal

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # No live connections exist outside the API process
    notifier = NotificationService(link_prefix=settings.notification_link_prefix)
    db = SessionLocal()
    try:
        sent = send_deadline_notifications(db, notifier)
        logger.info(f"Sent {len(sent)} deadline notification(s)")
    finally:
        db.close()


if __name__ == "__main__":
    main()
