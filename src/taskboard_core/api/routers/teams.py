"""Teams API endpoints."""
import logging
from math import ceil
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from taskboard_core import crud, schemas, models

from ...database import get_db
from ..dependencies import Actor, get_actor, require_role

logger = logging.getLogger("taskboard-core.teams")

router = APIRouter(tags=["teams"])


def _team_to_response(team: models.Team) -> schemas.TeamResponse:
    return schemas.TeamResponse(
        id=team.id,
        organization_id=team.organization_id,
        name=team.name,
        lead_ids=sorted(team.lead_ids, key=str),
        member_ids=sorted(team.member_ids, key=str),
        project_ids=sorted((p.id for p in team.projects), key=str),
        created_at=team.created_at,
        updated_at=team.updated_at,
    )


@router.get("/", response_model=schemas.TeamListResponse)
def list_teams(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(25, ge=1, le=100, description="Items per page"),
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """
    List teams visible to the actor.

    Admins see every team; other roles see the teams they lead or belong to.
    """
    teams, total = crud.get_teams(
        db,
        actor.organization_id,
        actor.user_id,
        actor.role,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return schemas.TeamListResponse(
        items=[_team_to_response(t) for t in teams],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=ceil(total / page_size) if total > 0 else 0,
    )


@router.post("/", response_model=schemas.TeamResponse, status_code=201)
def create_team(
    team: schemas.TeamCreate,
    actor: Actor = Depends(require_role(models.MemberRole.ADMIN)),
    db: Session = Depends(get_db),
):
    """
    Create a team in the actor's organization.

    - **name**: Team name
    - **lead_ids** / **member_ids**: Organization members
    """
    return _team_to_response(crud.create_team(db, actor.organization_id, team))


@router.put("/{team_id}", response_model=schemas.TeamResponse)
def update_team(
    team_id: UUID,
    team_update: schemas.TeamUpdate,
    actor: Actor = Depends(require_role(models.MemberRole.ADMIN)),
    db: Session = Depends(get_db),
):
    """Rename a team or replace its leads or members."""
    return _team_to_response(crud.update_team(db, actor.organization_id, team_id, team_update))


@router.delete("/{team_id}", status_code=204)
def delete_team(
    team_id: UUID,
    actor: Actor = Depends(require_role(models.MemberRole.ADMIN)),
    db: Session = Depends(get_db),
):
    """Delete a team. Its projects are kept."""
    crud.delete_team(db, actor.organization_id, team_id)
    return Response(status_code=204)
