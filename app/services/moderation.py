from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit_log import AuditLog
from app.models.listing import Listing
from app.models.report import ListingReport
from app.services.pagination import PageParams, PageResult, fetch_page

RECENT_LISTINGS = 5


@dataclass(frozen=True)
class ModerationStats:
    available_listings: int
    deactivated_listings: int
    pending_reports: int
    recent_listings: list[Listing]


async def moderation_stats(db: AsyncSession) -> ModerationStats:
    by_state = dict(
        (await db.execute(select(Listing.is_available, func.count()).group_by(Listing.is_available))).all()
    )
    pending = (
        await db.execute(select(func.count()).select_from(ListingReport).where(ListingReport.status == "pending"))
    ).scalar_one()
    recent = (
        await db.execute(select(Listing).order_by(Listing.created_at.desc(), Listing.id).limit(RECENT_LISTINGS))
    ).scalars().all()

    return ModerationStats(
        available_listings=by_state.get(True, 0),
        deactivated_listings=by_state.get(False, 0),
        pending_reports=pending,
        recent_listings=list(recent),
    )


async def list_audit_logs(db: AsyncSession, params: PageParams, *, action: str | None = None) -> PageResult:
    stmt = select(AuditLog)
    if action:
        stmt = stmt.where(AuditLog.action == action)
    stmt = stmt.order_by(AuditLog.created_at.desc(), AuditLog.id)
    return await fetch_page(db, stmt, params)
