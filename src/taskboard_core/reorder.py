"""Bulk repositioning of a project's tasks."""
import logging
from collections import Counter
from uuid import UUID

from sqlalchemy.orm import Session

from . import crud, models
from .errors import ValidationError

logger = logging.getLogger("taskboard-core.reorder")


def reorder_tasks(
    db: Session,
    organization_id: UUID,
    project_id: UUID,
    task_ids: list[UUID],
) -> list[models.Task]:
    """
    Set display_order to each task's index in task_ids, all or nothing.

    Every id must belong to the project; the ids are checked against the
    project's current tasks before anything is written. Tasks left out of the
    list keep their previous display_order.

    Args:
        db: Database session
        organization_id: Organization the project must belong to
        project_id: Project whose tasks are reordered
        task_ids: Task ids in the desired display order

    Returns:
        The reordered tasks, in the requested order

    Raises:
        NotFoundError: If the project does not exist in this organization
        ValidationError: If the list is empty, has duplicates or names tasks
            outside the project
    """
    project = crud.get_project_in_org(db, organization_id, project_id)

    if not task_ids:
        raise ValidationError("task_ids must not be empty.", field="task_ids")
    duplicates = [tid for tid, count in Counter(task_ids).items() if count > 1]
    if duplicates:
        raise ValidationError(
            "task_ids contains duplicate entries.",
            field="task_ids",
            invalid_ids=sorted(duplicates, key=str),
        )

    tasks = (
        db.query(models.Task)
        .filter(
            models.Task.project_id == project.id,
            models.Task.id.in_(task_ids),
        )
        .all()
    )
    if len(tasks) != len(task_ids):
        found = {t.id for t in tasks}
        unknown = [tid for tid in task_ids if tid not in found]
        logger.warning(f"Rejected reorder of project {project.id}: {len(unknown)} unknown task id(s)")
        raise ValidationError(
            "One or more task IDs are invalid or do not belong to this project.",
            field="task_ids",
            invalid_ids=unknown,
        )

    by_id = {t.id: t for t in tasks}
    for index, task_id in enumerate(task_ids):
        by_id[task_id].display_order = index
    crud.commit_or_rollback(db, "reorder tasks")

    logger.info(f"Reordered {len(task_ids)} task(s) in project {project.id}")
    return [by_id[task_id] for task_id in task_ids]
