"""
Repair jobs for denormalized state.

The per-user index can fall behind the listing table (a listing created by
a path that never appended its entry, or rows restored from backup). The
sweep back-fills entries using the listing's creation time as posted_at.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.ids import utcnow
from app.models.listing import Listing
from app.models.notification import Notification
from app.models.user_listing import UserListingEntry

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileReport:
    inserted: int
    pruned: int


async def reconcile_user_listing_index(db: AsyncSession, *, prune_stale: bool = False) -> ReconcileReport:
    missing = (
        await db.execute(
            select(Listing.id, Listing.owner_id, Listing.created_at)
            .outerjoin(UserListingEntry, UserListingEntry.listing_id == Listing.id)
            .where(UserListingEntry.id.is_(None))
        )
    ).all()

    for listing_id, owner_id, created_at in missing:
        db.add(UserListingEntry(user_id=owner_id, listing_id=listing_id, posted_at=created_at))

    pruned = 0
    if prune_stale:
        stale = (
            select(UserListingEntry.id)
            .outerjoin(Listing, Listing.id == UserListingEntry.listing_id)
            .where(Listing.id.is_(None))
        )
        result = await db.execute(
            delete(UserListingEntry)
            .where(UserListingEntry.id.in_(stale))
            .execution_options(synchronize_session=False)
        )
        pruned = result.rowcount or 0

    await db.flush()
    log.info("index reconcile: inserted=%d pruned=%d", len(missing), pruned)
    return ReconcileReport(inserted=len(missing), pruned=pruned)


async def purge_expired_notifications(db: AsyncSession, *, now: datetime | None = None) -> int:
    result = await db.execute(
        delete(Notification)
        .where(Notification.expires_at <= (now or utcnow()))
        .execution_options(synchronize_session=False)
    )
    purged = result.rowcount or 0
    log.info("notifications purge: removed=%d", purged)
    return purged
