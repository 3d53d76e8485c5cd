"""Notification inbox and live notification socket."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from taskboard_core import crud, schemas

from ...database import get_db
from ..dependencies import Actor, get_actor, resolve_socket_user

logger = logging.getLogger("taskboard-core.notifications")

router = APIRouter(tags=["notifications"])


@router.get("/", response_model=list[schemas.NotificationResponse])
def list_notifications(
    unread_only: bool = Query(False, description="Only return unread notifications"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of notifications"),
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """List the actor's notifications, newest first."""
    items, _ = crud.get_notifications(db, actor.user_id, unread_only=unread_only, limit=limit)
    return items


@router.patch("/{notification_id}/read", response_model=schemas.NotificationResponse)
def mark_read(
    notification_id: UUID,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Mark one of the actor's notifications as read."""
    return crud.mark_notification_read(db, notification_id, actor.user_id)


@router.websocket("/ws")
async def notification_socket(websocket: WebSocket, db: Session = Depends(get_db)):
    """
    Receive new_notification events for the connecting user as they are created.

    The user is identified by the X-User-Id and X-Organization-Id headers and
    must be a member of that organization; otherwise the socket is closed
    with a policy violation before it is accepted.
    """
    user_id = await run_in_threadpool(resolve_socket_user, websocket, db)
    if user_id is None:
        logger.warning("Rejected notification socket without a valid organization membership")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    hub = websocket.app.state.realtime
    await hub.connect(user_id, websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        hub.disconnect(user_id, websocket)
