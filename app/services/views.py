from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import NotFound
from app.core.ids import utcnow
from app.models.listing import Listing
from app.models.view_log import ViewLog


@dataclass(frozen=True)
class ViewResult:
    recorded: bool
    views: int


async def _current_views(db: AsyncSession, listing_id: str) -> int | None:
    return (await db.execute(select(Listing.views).where(Listing.id == listing_id))).scalar_one_or_none()


async def record_view(
    db: AsyncSession,
    *,
    listing_id: str,
    viewer_id: str | None,
    viewer_address: str,
    now: datetime | None = None,
) -> ViewResult:
    """
    Count a view unless this viewer was already counted for the listing
    within the dedup window.

    A viewer matches a previous view by identity OR address, so a signed-in
    user who changes address is still recognised; anonymous viewers match
    by address alone. Everyone behind a shared address is counted once per
    window.
    """
    now = now or utcnow()
    views = await _current_views(db, listing_id)
    if views is None:
        raise NotFound("Listing not found")

    same_viewer = [ViewLog.viewer_address == viewer_address]
    if viewer_id:
        same_viewer.append(ViewLog.viewer_id == viewer_id)

    window_start = now - timedelta(hours=settings.view_dedup_window_hours)
    seen = (
        await db.execute(
            select(ViewLog.id)
            .where(
                ViewLog.listing_id == listing_id,
                ViewLog.created_at >= window_start,
                or_(*same_viewer),
            )
            .limit(1)
        )
    ).scalar_one_or_none()
    if seen:
        return ViewResult(recorded=False, views=views)

    # single atomic increment; a counter bump is not an edit, keep updated_at
    await db.execute(
        update(Listing)
        .where(Listing.id == listing_id)
        .values(views=Listing.views + 1, updated_at=Listing.updated_at)
    )
    db.add(ViewLog(listing_id=listing_id, viewer_id=viewer_id, viewer_address=viewer_address, created_at=now))
    await db.flush()

    return ViewResult(recorded=True, views=await _current_views(db, listing_id) or 0)
