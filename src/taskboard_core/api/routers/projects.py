"""Projects API endpoints."""
import logging
from math import ceil
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from taskboard_core import crud, schemas, models
from taskboard_core.project_status import calculate_project_status

from ...database import get_db
from ..dependencies import Actor, get_actor, require_project_manager, require_role

logger = logging.getLogger("taskboard-core.projects")

router = APIRouter(tags=["projects"])


def _project_to_response(project: models.Project) -> schemas.ProjectResponse:
    """Convert Project model to ProjectResponse, deriving status from its tasks."""
    summary = calculate_project_status(t.status for t in project.tasks)
    return schemas.ProjectResponse(
        id=project.id,
        organization_id=project.organization_id,
        title=project.title,
        description=project.description,
        start_date=project.start_date,
        end_date=project.end_date,
        is_archived=project.is_archived,
        team_lead_ids=sorted(project.team_lead_ids, key=str),
        team_ids=sorted(project.team_ids, key=str),
        status=summary.status,
        completion_percentage=summary.completion_percentage,
        task_count=len(project.tasks),
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


@router.post("/", response_model=schemas.ProjectResponse, status_code=201)
def create_project(
    project: schemas.ProjectCreate,
    actor: Actor = Depends(require_role(models.MemberRole.ADMIN)),
    db: Session = Depends(get_db),
):
    """
    Create a new project in the actor's organization.

    - **title**: Project title
    - **description**: Optional description
    - **start_date** / **end_date**: Optional dates
    - **team_lead_ids**: Organization members leading the project
    - **team_ids**: Teams of the organization working on the project
    """
    result = crud.create_project(db, actor.organization_id, project, user_id=actor.user_id)
    return _project_to_response(result)


@router.get("/", response_model=schemas.ProjectListResponse)
def list_projects(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(25, ge=1, le=100, description="Items per page"),
    is_archived: bool = Query(False, description="List archived projects instead of active ones"),
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """
    List projects visible to the actor.

    Admins see every project; other roles see the projects they lead and
    the projects of their teams. Each project carries its derived status and
    completion percentage.
    """
    skip = (page - 1) * page_size
    projects, total = crud.get_projects(
        db=db,
        organization_id=actor.organization_id,
        user_id=actor.user_id,
        role=actor.role,
        skip=skip,
        limit=page_size,
        is_archived=is_archived,
    )

    return schemas.ProjectListResponse(
        items=[_project_to_response(p) for p in projects],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=ceil(total / page_size) if total > 0 else 0,
    )


@router.get("/{project_id}", response_model=schemas.ProjectResponse)
def get_project(
    project_id: UUID,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Get a specific project by ID."""
    project = crud.get_project_in_org(db, actor.organization_id, project_id)
    return _project_to_response(project)


@router.put("/{project_id}", response_model=schemas.ProjectResponse)
def update_project(
    project_id: UUID,
    project_update: schemas.ProjectUpdate,
    actor: Actor = Depends(require_role(models.MemberRole.TEAM_LEADER)),
    db: Session = Depends(get_db),
):
    """
    Update a project.

    - **title**, **description**, **start_date**, **end_date**: optional
    - **team_lead_ids**: replaces the team lead set when given
    - **team_ids**: replaces the team set when given
    """
    require_project_manager(db, actor, project_id)
    project = crud.update_project(db, actor.organization_id, project_id, project_update)
    return _project_to_response(project)


@router.patch("/{project_id}/archive", response_model=schemas.ProjectResponse)
def archive_project(
    project_id: UUID,
    archive: schemas.ProjectArchive,
    actor: Actor = Depends(require_role(models.MemberRole.TEAM_LEADER)),
    db: Session = Depends(get_db),
):
    """Archive or restore a project."""
    require_project_manager(db, actor, project_id)
    project = crud.archive_project(db, actor.organization_id, project_id, archive.is_archived)
    return _project_to_response(project)


@router.delete("/{project_id}", status_code=204)
def delete_project(
    project_id: UUID,
    actor: Actor = Depends(require_role(models.MemberRole.ADMIN)),
    db: Session = Depends(get_db),
):
    """Delete a project with all of its tasks."""
    crud.delete_project(db, actor.organization_id, project_id)
    return Response(status_code=204)
