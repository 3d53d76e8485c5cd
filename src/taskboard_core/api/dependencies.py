"""Request-scoped dependencies: the acting user, role gates and the notifier.

Authentication happens upstream; the gateway forwards the verified user id
and the selected organization in the X-User-Id and X-Organization-Id
headers. The role is looked up from the membership table on every request.
"""
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header, Request, WebSocket
from sqlalchemy.orm import Session

from .. import crud, models
from ..database import get_db
from ..errors import PermissionDeniedError
from ..notifications import NotificationService
from ..permissions import can_manage_project


@dataclass(frozen=True)
class Actor:
    """The user performing a request, within one organization."""

    user_id: UUID
    organization_id: UUID
    role: models.MemberRole


def get_actor(
    x_user_id: UUID = Header(..., description="Authenticated user id"),
    x_organization_id: UUID = Header(..., description="Organization the request acts in"),
    db: Session = Depends(get_db),
) -> Actor:
    """Resolve the acting user and their role in the requested organization."""
    role = crud.get_member_role(db, x_user_id, x_organization_id)
    if role is None:
        raise PermissionDeniedError("You are not a member of this organization.")
    return Actor(user_id=x_user_id, organization_id=x_organization_id, role=role)


def require_role(minimum: models.MemberRole):
    """Dependency factory rejecting actors below the given role."""

    def dependency(actor: Actor = Depends(get_actor)) -> Actor:
        if actor.role < minimum:
            raise PermissionDeniedError("You do not have permission to perform this action.")
        return actor

    return dependency


def require_project_manager(db: Session, actor: Actor, project_id: UUID) -> models.Project:
    """
    Load a project the actor may manage.

    Raises:
        NotFoundError: If the project is not in the actor's organization
        PermissionDeniedError: If the actor is neither an admin nor a team
            leader leading this project
    """
    project = crud.get_project_in_org(db, actor.organization_id, project_id)
    if not can_manage_project(actor.role, actor.user_id in project.team_lead_ids):
        raise PermissionDeniedError("Only admins and this project's team leads can do this.")
    return project


def get_notifier(request: Request) -> NotificationService:
    return request.app.state.notifier


def resolve_socket_user(websocket: WebSocket, db: Session) -> Optional[UUID]:
    """
    Identify the user opening a notification socket from the same headers
    get_actor reads.

    Returns:
        The user id, or None if a header is missing or malformed or the user
        is not a member of the named organization
    """
    try:
        user_id = UUID(websocket.headers["x-user-id"])
        organization_id = UUID(websocket.headers["x-organization-id"])
    except (KeyError, ValueError):
        return None
    if crud.get_member_role(db, user_id, organization_id) is None:
        return None
    return user_id
