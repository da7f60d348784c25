"""
Report/moderation ledger.

Filing a report bumps the listing's report_count; resolving one takes it
back down by exactly one. A resolved report cannot be resolved again, so
the counter is never decremented twice for the same report.
"""
from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AlreadyInState, AlreadyReported, NotFound
from app.core.ids import utcnow
from app.models.listing import Listing
from app.models.report import ListingReport
from app.services.audit import audit
from app.services.auth import Actor
from app.services.pagination import PageParams, PageResult, fetch_page

log = logging.getLogger(__name__)


async def file_report(db: AsyncSession, *, actor: Actor, listing_id: str, reason: str) -> tuple[ListingReport, Listing]:
    listing = (await db.execute(select(Listing).where(Listing.id == listing_id))).scalar_one_or_none()
    if not listing:
        raise NotFound("Listing not found")

    existing = (
        await db.execute(
            select(ListingReport.id).where(
                ListingReport.listing_id == listing_id,
                ListingReport.reported_by == actor.user_id,
            )
        )
    ).scalar_one_or_none()
    if existing:
        raise AlreadyReported("You have already reported this listing")

    report = ListingReport(listing_id=listing_id, reported_by=actor.user_id, reason=reason.strip(), status="pending")
    db.add(report)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise AlreadyReported("You have already reported this listing")

    await db.execute(
        update(Listing)
        .where(Listing.id == listing_id)
        .values(report_count=Listing.report_count + 1, updated_at=Listing.updated_at)
    )
    await db.flush()
    return report, listing


async def get_report(db: AsyncSession, report_id: str) -> ListingReport:
    report = (await db.execute(select(ListingReport).where(ListingReport.id == report_id))).scalar_one_or_none()
    if not report:
        raise NotFound("Report not found")
    return report


async def list_reports(db: AsyncSession, params: PageParams, *, status: str | None = None) -> PageResult:
    stmt = select(ListingReport)
    if status:
        stmt = stmt.where(ListingReport.status == status)
    stmt = stmt.order_by(ListingReport.created_at.desc(), ListingReport.id)
    return await fetch_page(db, stmt, params)


async def mark_reviewed(db: AsyncSession, *, actor: Actor, report_id: str) -> ListingReport:
    report = await get_report(db, report_id)
    if report.status != "pending":
        raise AlreadyInState(f"Report is already {report.status}")

    report.status = "reviewed"
    report.reviewed_at = utcnow()
    await audit(db, actor=actor, action="report.reviewed", target_type="report", target_id=report.id)
    await db.flush()
    return report


async def resolve_report(
    db: AsyncSession,
    *,
    actor: Actor,
    report_id: str,
    ip_address: str | None = None,
) -> ListingReport:
    report = await get_report(db, report_id)
    if report.status == "resolved":
        raise AlreadyInState("Report is already resolved")

    # conditional on the current status so two concurrent resolutions decrement once
    result = await db.execute(
        update(ListingReport)
        .where(ListingReport.id == report_id, ListingReport.status != "resolved")
        .values(status="resolved", resolved_at=utcnow())
    )
    if not result.rowcount:
        raise AlreadyInState("Report is already resolved")

    await db.execute(
        update(Listing)
        .where(Listing.id == report.listing_id, Listing.report_count > 0)
        .values(report_count=Listing.report_count - 1, updated_at=Listing.updated_at)
    )
    await audit(
        db,
        actor=actor,
        action="report.resolved",
        target_type="report",
        target_id=report.id,
        ip_address=ip_address,
        detail={"listing_id": report.listing_id},
    )
    await db.flush()
    log.info("admin %s resolved report %s on listing %s", actor.user_id, report_id, report.listing_id)
    return report
