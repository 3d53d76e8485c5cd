"""Task API endpoints, nested under a project."""
import logging
from math import ceil
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from taskboard_core import crud, schemas, models
from taskboard_core.notifications import NotificationService
from taskboard_core.reorder import reorder_tasks
from taskboard_core.task_mutation import update_task as apply_task_update

from ...database import get_db
from ..dependencies import Actor, get_actor, get_notifier, require_project_manager, require_role

logger = logging.getLogger("taskboard-core.tasks")

router = APIRouter(tags=["tasks"])


def _task_to_response(task: models.Task) -> schemas.TaskResponse:
    """Convert Task model to TaskResponse schema."""
    return schemas.TaskResponse(
        id=task.id,
        project_id=task.project_id,
        title=task.title,
        description=task.description,
        status=task.status,
        start_date=task.start_date,
        end_date=task.end_date,
        display_order=task.display_order,
        expense=float(task.expense) if task.expense is not None else None,
        color=task.color,
        assignee_ids=sorted((u.id for u in task.assignees), key=str),
        comments=[schemas.CommentResponse.model_validate(c) for c in task.comments],
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


@router.get("/", response_model=schemas.TaskListResponse)
def list_tasks(
    project_id: UUID,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(25, ge=1, le=100, description="Items per page"),
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """
    List a project's tasks in display order.

    - **page**: Page number (starts at 1)
    - **page_size**: Number of items per page (1-100)
    """
    skip = (page - 1) * page_size
    tasks, total = crud.get_tasks_for_project(db, actor.organization_id, project_id, skip=skip, limit=page_size)

    return schemas.TaskListResponse(
        items=[_task_to_response(t) for t in tasks],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=ceil(total / page_size) if total > 0 else 0,
    )


@router.post("/", response_model=schemas.TaskResponse, status_code=201)
def create_task(
    project_id: UUID,
    task_data: schemas.TaskCreate,
    actor: Actor = Depends(require_role(models.MemberRole.TEAM_LEADER)),
    db: Session = Depends(get_db),
):
    """
    Create a task at the end of the project.

    - **title**, **color**, **start_date**, **end_date**: required
    - **assignee_ids**: organization members to assign (optional)
    - **description**, **expense**: optional
    """
    require_project_manager(db, actor, project_id)
    task = crud.create_task(db, actor.organization_id, project_id, task_data)
    return _task_to_response(task)


@router.patch("/reorder", response_model=list[schemas.TaskResponse])
def reorder_project_tasks(
    project_id: UUID,
    reorder: schemas.TaskReorder,
    actor: Actor = Depends(require_role(models.MemberRole.TEAM_LEADER)),
    db: Session = Depends(get_db),
):
    """
    Reposition the project's tasks.

    - **task_ids**: every task id of the project, in the new display order
    """
    require_project_manager(db, actor, project_id)
    tasks = reorder_tasks(db, actor.organization_id, project_id, reorder.task_ids)
    return [_task_to_response(t) for t in tasks]


@router.get("/{task_id}", response_model=schemas.TaskResponse)
def get_task(
    project_id: UUID,
    task_id: UUID,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Get a single task with its assignees and comments."""
    _, task = crud.get_task_in_project(db, actor.organization_id, project_id, task_id)
    return _task_to_response(task)


@router.put("/{task_id}", response_model=schemas.TaskResponse)
def update_task(
    project_id: UUID,
    task_id: UUID,
    task_update: schemas.TaskUpdate,
    actor: Actor = Depends(get_actor),
    notifier: NotificationService = Depends(get_notifier),
    db: Session = Depends(get_db),
):
    """
    Update a task.

    Admins and the project's team leads may change any field. Assignees may
    only change **status**. Only the fields present in the body are applied;
    **assignee_ids** replaces the whole assignee set.
    """
    result = apply_task_update(
        db,
        organization_id=actor.organization_id,
        project_id=project_id,
        task_id=task_id,
        actor_id=actor.user_id,
        actor_role=actor.role,
        changes=task_update.model_dump(exclude_unset=True),
        notifier=notifier,
    )
    return _task_to_response(result.task)


@router.delete("/{task_id}", status_code=204)
def delete_task(
    project_id: UUID,
    task_id: UUID,
    actor: Actor = Depends(require_role(models.MemberRole.TEAM_LEADER)),
    db: Session = Depends(get_db),
):
    """Delete a task with its comments and assignments."""
    require_project_manager(db, actor, project_id)
    crud.delete_task(db, actor.organization_id, project_id, task_id)
    return Response(status_code=204)


@router.post("/{task_id}/comments", response_model=schemas.CommentResponse, status_code=201)
def add_comment(
    project_id: UUID,
    task_id: UUID,
    comment: schemas.CommentCreate,
    actor: Actor = Depends(get_actor),
    notifier: NotificationService = Depends(get_notifier),
    db: Session = Depends(get_db),
):
    """
    Comment on a task.

    Assignees and project team leads other than the author are notified.
    """
    created = crud.add_comment(
        db,
        actor.organization_id,
        project_id,
        task_id,
        author_id=actor.user_id,
        content=comment.content,
        notifier=notifier,
    )
    return schemas.CommentResponse.model_validate(created)
