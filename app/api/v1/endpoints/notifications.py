import logging

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import SessionLocal, get_db
from app.schemas.common import Page, StatusResponse
from app.schemas.notification import NotificationOut
from app.services.auth import Actor, get_actor, resolve_api_key
from app.services.notifications import delete_notification, list_notifications, mark_all_read, mark_read
from app.services.pagination import PageParams, page_params
from app.services.presence import presence

log = logging.getLogger(__name__)

router = APIRouter()


@router.get("/notifications", response_model=Page[NotificationOut])
async def get_notifications(
    role: str | None = Query(default=None),
    unread_only: bool = Query(default=False),
    actor: Actor = Depends(get_actor),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
) -> Page[NotificationOut]:
    page = await list_notifications(db, user_id=actor.user_id, params=params, role=role, unread_only=unread_only)
    return Page[NotificationOut](**page.envelope([NotificationOut.model_validate(n) for n in page.items]))


@router.patch("/notifications/read-all", response_model=StatusResponse)
async def read_all_notifications(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> StatusResponse:
    await mark_all_read(db, user_id=actor.user_id)
    await db.commit()
    return StatusResponse(status="ok")


@router.patch("/notifications/{notification_id}/read", response_model=NotificationOut)
async def read_notification(
    notification_id: str,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> NotificationOut:
    row = await mark_read(db, user_id=actor.user_id, notification_id=notification_id)
    out = NotificationOut.model_validate(row)
    await db.commit()
    return out


@router.delete("/notifications/{notification_id}", response_model=StatusResponse)
async def remove_notification(
    notification_id: str,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> StatusResponse:
    await delete_notification(db, user_id=actor.user_id, notification_id=notification_id)
    await db.commit()
    return StatusResponse(status="deleted")


@router.websocket("/notifications/ws")
async def notifications_socket(websocket: WebSocket, api_key: str | None = Query(default=None)):
    actor = None
    if api_key:
        async with SessionLocal() as db:
            actor = await resolve_api_key(db, api_key)
    if actor is None:
        await websocket.close(code=4401)
        return

    await websocket.accept()
    presence.connect(actor.user_id, websocket)
    log.info("user %s connected for live notifications", actor.user_id)
    try:
        # inbound frames are ignored; the socket is push-only
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        log.info("user %s disconnected", actor.user_id)
    finally:
        presence.disconnect(actor.user_id, websocket)
