"""User record endpoints. Credentials live with the external identity provider."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskboard_core import crud, schemas
from taskboard_core.errors import NotFoundError

from ...database import get_db

logger = logging.getLogger("taskboard-core.users")

router = APIRouter(tags=["users"])


@router.post("/", response_model=schemas.UserResponse, status_code=201)
def create_user(
    user: schemas.UserCreate,
    db: Session = Depends(get_db),
):
    """
    Register a user record.

    - **email**: Unique email address
    - **full_name**: Display name (optional)
    """
    return crud.create_user(db, email=user.email, full_name=user.full_name)


@router.get("/{user_id}", response_model=schemas.UserResponse)
def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
):
    """Get a user by ID."""
    user = crud.get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found.")
    return user
