"""Organizations and membership API endpoints."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Response
from sqlalchemy.orm import Session

from taskboard_core import crud, schemas, models
from taskboard_core.errors import NotFoundError, PermissionDeniedError

from ...database import get_db
from ..dependencies import Actor, get_actor, require_role

logger = logging.getLogger("taskboard-core.organizations")

router = APIRouter(tags=["organizations"])


def _check_same_org(actor: Actor, organization_id: UUID) -> None:
    if actor.organization_id != organization_id:
        raise NotFoundError("Organization not found.")


@router.post("/", response_model=schemas.OrganizationResponse, status_code=201)
def create_organization(
    organization: schemas.OrganizationCreate,
    x_user_id: UUID = Header(..., description="Authenticated user id"),
    db: Session = Depends(get_db),
):
    """
    Create a new organization. The creating user becomes its super admin.

    - **name**: Organization name
    """
    if not crud.get_user(db, x_user_id):
        raise NotFoundError("User not found.")

    result = crud.create_organization(db, name=organization.name)
    crud.add_organization_member(db, result.id, x_user_id, models.MemberRole.SUPER_ADMIN)
    return result


@router.get("/{organization_id}", response_model=schemas.OrganizationResponse)
def get_organization(
    organization_id: UUID,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Get the actor's organization."""
    _check_same_org(actor, organization_id)
    return crud.get_organization(db, organization_id)


@router.get("/{organization_id}/members", response_model=list[schemas.OrganizationMemberResponse])
def list_members(
    organization_id: UUID,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """List members of the organization with their roles."""
    _check_same_org(actor, organization_id)
    return crud.get_organization_members(db, organization_id)


@router.post("/{organization_id}/members", response_model=schemas.OrganizationMemberResponse, status_code=201)
def add_member(
    organization_id: UUID,
    member: schemas.OrganizationMemberCreate,
    actor: Actor = Depends(require_role(models.MemberRole.ADMIN)),
    db: Session = Depends(get_db),
):
    """
    Add a user to the organization.

    - **user_id**: User to add
    - **role**: Role in the organization (cannot exceed the actor's own role)
    """
    _check_same_org(actor, organization_id)
    if member.role > actor.role:
        raise PermissionDeniedError("You cannot grant a role above your own.")
    return crud.add_organization_member(db, organization_id, member.user_id, member.role)


@router.patch("/{organization_id}/members/{user_id}", response_model=schemas.OrganizationMemberResponse)
def update_member_role(
    organization_id: UUID,
    user_id: UUID,
    update: schemas.OrganizationMemberUpdate,
    actor: Actor = Depends(require_role(models.MemberRole.ADMIN)),
    db: Session = Depends(get_db),
):
    """
    Change a member's role.

    The actor must outrank both the member's current role and the new role,
    and cannot change their own role.
    """
    _check_same_org(actor, organization_id)
    if user_id == actor.user_id:
        raise PermissionDeniedError("You cannot update your own role using this endpoint.")
    target = crud._get_membership(db, organization_id, user_id)
    if actor.role <= target.role or actor.role <= update.role:
        logger.warning(f"User {actor.user_id} ({actor.role.value}) denied role change of {user_id}")
        raise PermissionDeniedError("You do not have sufficient permissions to modify this user's role.")
    return crud.update_organization_member_role(db, organization_id, user_id, update.role)


@router.delete("/{organization_id}/members/{user_id}", status_code=204)
def remove_member(
    organization_id: UUID,
    user_id: UUID,
    actor: Actor = Depends(require_role(models.MemberRole.ADMIN)),
    db: Session = Depends(get_db),
):
    """Remove a user with a lower role from the organization."""
    _check_same_org(actor, organization_id)
    if user_id == actor.user_id:
        raise PermissionDeniedError("You cannot remove yourself from the organization.")
    target = crud._get_membership(db, organization_id, user_id)
    if actor.role <= target.role:
        logger.warning(f"User {actor.user_id} ({actor.role.value}) denied removal of {user_id}")
        raise PermissionDeniedError(
            "You do not have sufficient permissions to remove a user with an equal or higher role."
        )
    crud.remove_organization_member(db, organization_id, user_id)
    return Response(status_code=204)
