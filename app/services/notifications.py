from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Protocol, runtime_checkable

from fastapi import Depends
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.core.errors import NotFound
from app.core.ids import utcnow
from app.models.notification import Notification
from app.schemas.notification import NotificationOut
from app.services.pagination import PageParams, PageResult, fetch_page
from app.services.presence import PresenceRegistry, presence

log = logging.getLogger(__name__)


@runtime_checkable
class NotificationSink(Protocol):
    """
    Fire-and-forget delivery. Implementations must not raise: a failed
    notification never fails the request that triggered it.
    """

    async def notify(self, *, user_id: str, role: str, message: str, meta: dict[str, Any] | None = None) -> None:
        ...


class StoredNotificationSink:
    """Persists the notification, then pushes it to the user's live connections."""

    def __init__(self, db: AsyncSession, registry: PresenceRegistry):
        self.db = db
        self.registry = registry

    async def notify(self, *, user_id: str, role: str, message: str, meta: dict[str, Any] | None = None) -> None:
        try:
            row = Notification(
                user_id=user_id,
                role=role,
                message=message,
                meta=meta or {},
                is_read=False,
                expires_at=utcnow() + timedelta(days=settings.notification_ttl_days),
            )
            self.db.add(row)
            await self.db.commit()

            await self.registry.send(
                user_id,
                "notification.created",
                NotificationOut.model_validate(row).model_dump(
                    mode="json", include={"id", "role", "message", "meta", "created_at"}
                ),
            )
        except Exception:
            log.exception("notification for user %s failed", user_id)
            await self.db.rollback()


def get_notifier(db: AsyncSession = Depends(get_db)) -> NotificationSink:
    return StoredNotificationSink(db, presence)


def _visible(user_id: str, now: datetime):
    return (Notification.user_id == user_id, Notification.expires_at > now)


async def list_notifications(
    db: AsyncSession,
    *,
    user_id: str,
    params: PageParams,
    role: str | None = None,
    unread_only: bool = False,
) -> PageResult:
    stmt = select(Notification).where(*_visible(user_id, utcnow()))
    if role:
        stmt = stmt.where(Notification.role == role)
    if unread_only:
        stmt = stmt.where(Notification.is_read.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id)
    return await fetch_page(db, stmt, params)


async def mark_read(db: AsyncSession, *, user_id: str, notification_id: str) -> Notification:
    row = (
        await db.execute(
            select(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
        )
    ).scalar_one_or_none()
    if not row:
        raise NotFound("Notification not found")
    row.is_read = True
    await db.flush()
    return row


async def mark_all_read(db: AsyncSession, *, user_id: str) -> int:
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    return result.rowcount or 0


async def delete_notification(db: AsyncSession, *, user_id: str, notification_id: str) -> None:
    result = await db.execute(
        delete(Notification)
        .where(Notification.id == notification_id, Notification.user_id == user_id)
        .execution_options(synchronize_session="fetch")
    )
    if not result.rowcount:
        raise NotFound("Notification not found")
