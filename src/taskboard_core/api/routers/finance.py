"""Finance API endpoints. Admins and super admins only."""
import logging
from math import ceil
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from taskboard_core import crud, schemas, models

from ...database import get_db
from ..dependencies import Actor, require_role

logger = logging.getLogger("taskboard-core.finance")

router = APIRouter(tags=["finance"])

require_admin = require_role(models.MemberRole.ADMIN)


def _entry_to_response(entry: models.FinanceEntry) -> schemas.FinanceEntryResponse:
    return schemas.FinanceEntryResponse(
        id=entry.id,
        organization_id=entry.organization_id,
        project_id=entry.project_id,
        project_title=entry.project.title if entry.project else None,
        task_id=entry.task_id,
        type=entry.type,
        amount=entry.amount,
        description=entry.description,
        date=entry.date,
        created_at=entry.created_at,
    )


@router.get("/summary", response_model=schemas.FinanceSummaryResponse)
def get_summary(
    project_id: Optional[UUID] = Query(None, description="Only count entries of this project"),
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Total income, total expenses and balance."""
    return crud.get_finance_summary(db, actor.organization_id, project_id)


@router.get("/entries", response_model=schemas.FinanceEntryListResponse)
def list_entries(
    project_id: Optional[UUID] = Query(None, description="Only list entries of this project"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(25, ge=1, le=100, description="Items per page"),
    sort_by: Literal["date", "amount", "created_at"] = Query("date"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """List finance entries, newest first by default."""
    entries, total = crud.get_finance_entries(
        db,
        actor.organization_id,
        project_id=project_id,
        skip=(page - 1) * page_size,
        limit=page_size,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return schemas.FinanceEntryListResponse(
        items=[_entry_to_response(e) for e in entries],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=ceil(total / page_size) if total > 0 else 0,
    )


@router.post("/entries", response_model=schemas.FinanceEntryResponse, status_code=201)
def create_entry(
    entry: schemas.FinanceEntryCreate,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Book an income or expense entry.

    - **type**: income or expense
    - **amount**: Positive amount
    - **date**: Booking date (YYYY-MM-DD)
    - **project_id** / **task_id**: Optional; a task must belong to the project
    """
    result = crud.create_finance_entry(db, actor.organization_id, entry)
    logger.debug(f"User {actor.user_id} booked finance entry {result.id}")
    return _entry_to_response(result)
