"""Notification fan-out for task changes and comments.

One logical event (a reassignment, a status change, a new comment) becomes
one Notification row per recipient:
- The database row is the durable record and is always written first
- A real-time push follows when a channel is attached; push failures are
  logged and never undo or block the stored notification
- Each recipient is written in its own savepoint, so one bad recipient does
  not stop the others; failed writes are reported once all were attempted
"""
import logging
from typing import TYPE_CHECKING, Iterable, Optional, Protocol
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from . import models
from .errors import NotificationDeliveryError

if TYPE_CHECKING:
    from .task_mutation import TaskChange

logger = logging.getLogger("taskboard-core.notifications")


class RealtimeChannel(Protocol):
    """Best-effort live delivery keyed by recipient id."""

    def push(self, user_id: UUID, payload: dict) -> None:
        ...


def notification_payload(notification: models.Notification) -> dict:
    """Event body pushed to connected clients."""
    return {
        "id": str(notification.id),
        "type": notification.type.value,
        "text": notification.text,
        "link": notification.link,
        "read": notification.is_read,
        "timestamp": notification.created_at.isoformat(),
    }


class NotificationService:
    """Persists notifications and pushes them to an optional real-time channel."""

    def __init__(self, realtime: Optional[RealtimeChannel] = None, link_prefix: str = "/projects"):
        self.realtime = realtime
        self.link_prefix = link_prefix.rstrip("/")

    def task_link(self, project_id: UUID, task_id: UUID) -> str:
        return f"{self.link_prefix}/{project_id}/tasks/{task_id}"

    def create_and_send(
        self,
        db: Session,
        user_id: UUID,
        type: models.NotificationType,
        text: str,
        link: Optional[str] = None,
    ) -> models.Notification:
        """
        Store a single notification and push it.

        Raises:
            NotificationDeliveryError: If the notification could not be stored
        """
        return self.deliver(db, [(user_id, type, text)], link)[0]

    def deliver(
        self,
        db: Session,
        deliveries: Iterable[tuple[UUID, models.NotificationType, str]],
        link: Optional[str] = None,
    ) -> list[models.Notification]:
        """
        Store and push one notification per (recipient, type, text) entry.

        Args:
            db: Database session
            deliveries: Recipient id, notification type and text for each record
            link: Deep link shared by all records

        Returns:
            Notifications that were stored

        Raises:
            NotificationDeliveryError: If any record could not be stored, after
                every other recipient has been handled
        """
        created: list[models.Notification] = []
        failed: list[UUID] = []

        for user_id, notification_type, text in deliveries:
            notification = models.Notification(
                user_id=user_id,
                type=notification_type,
                text=text,
                link=link,
                is_read=False,
            )
            try:
                with db.begin_nested():
                    db.add(notification)
            except SQLAlchemyError:
                logger.error(f"Failed to store {notification_type.value} notification for user {user_id}", exc_info=True)
                failed.append(user_id)
                continue
            created.append(notification)

        if created:
            try:
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error("Failed to commit notifications", exc_info=True)
                raise NotificationDeliveryError(
                    "Notifications could not be stored.",
                    recipient_ids=[n.user_id for n in created] + failed,
                ) from e

        for notification in created:
            self._push(notification)

        if failed:
            raise NotificationDeliveryError(
                f"Notifications could not be stored for {len(failed)} recipient(s).",
                recipient_ids=failed,
            )
        return created

    def _push(self, notification: models.Notification) -> None:
        if self.realtime is None:
            logger.debug(f"No real-time channel attached; notification {notification.id} stored only")
            return
        try:
            self.realtime.push(notification.user_id, notification_payload(notification))
        except Exception:
            # Live delivery is best effort; the stored record stays authoritative
            logger.warning(f"Real-time push to user {notification.user_id} failed", exc_info=True)

    def notify_task_change(
        self,
        db: Session,
        task: models.Task,
        project: models.Project,
        change: "TaskChange",
        actor_id: Optional[UUID],
    ) -> list[models.Notification]:
        """
        Fan a task change out to the affected users.

        Added and removed assignees get an assignment notification each. A
        status change goes to current assignees and project team leads, minus
        the actor.

        Returns:
            Notifications that were stored
        """
        deliveries: list[tuple[UUID, models.NotificationType, str]] = []

        for user_id in change.assignees_added:
            deliveries.append((
                user_id,
                models.NotificationType.ASSIGNMENT,
                f'You have been assigned to task "{task.title}" in project "{project.title}".',
            ))
        for user_id in change.assignees_removed:
            deliveries.append((
                user_id,
                models.NotificationType.ASSIGNMENT,
                f'You have been unassigned from task "{task.title}" in project "{project.title}".',
            ))

        if change.status_changed:
            text = (
                f'Task "{task.title}" status changed from "{change.old_status.value}" '
                f'to "{change.new_status.value}" in project "{project.title}".'
            )
            for user_id in followers(task, project, exclude=actor_id):
                deliveries.append((user_id, models.NotificationType.STATUS_CHANGE, text))

        if not deliveries:
            return []
        logger.info(f"Fanning out {len(deliveries)} notification(s) for task {task.id}")
        return self.deliver(db, deliveries, self.task_link(project.id, task.id))

    def notify_new_comment(
        self,
        db: Session,
        task: models.Task,
        project: models.Project,
        comment: models.Comment,
    ) -> list[models.Notification]:
        """Notify task assignees and project team leads of a comment, except its author."""
        author = comment.author
        author_name = (author.full_name or author.email) if author else "a former member"
        text = f'New comment on task "{task.title}" in project "{project.title}" by {author_name}.'

        recipients = followers(task, project, exclude=comment.author_id)
        if not recipients:
            return []
        return self.deliver(
            db,
            [(user_id, models.NotificationType.COMMENT, text) for user_id in recipients],
            self.task_link(project.id, task.id),
        )


def followers(task: models.Task, project: models.Project, exclude: Optional[UUID] = None) -> list[UUID]:
    """
    Users who follow a task: its assignees and its project's team leads.

    Args:
        task: Task being changed
        project: Task's project
        exclude: User to leave out, typically the actor

    Returns:
        Deduplicated user ids, assignees first, in a stable order
    """
    ordered = [u.id for u in task.assignees] + [u.id for u in project.team_leads]
    return [user_id for user_id in dict.fromkeys(ordered) if user_id != exclude]
