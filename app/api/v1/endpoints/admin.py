from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.admin import AdminStatsOut, AuditLogOut
from app.schemas.common import Page, StatusResponse
from app.schemas.listing import ListingOut
from app.schemas.report import ReportOut, ReportStatus
from app.services.auth import Actor, client_address, require_admin, require_superadmin
from app.services.listings import admin_delete_listing, set_verified
from app.services.moderation import list_audit_logs, moderation_stats
from app.services.notifications import NotificationSink, get_notifier
from app.services.pagination import PageParams, page_params
from app.services.reports import list_reports, mark_reviewed, resolve_report

router = APIRouter()


class VerifyIn(BaseModel):
    verified: bool = True


@router.delete("/admin/apartments/{listing_id}", response_model=StatusResponse)
async def delete_apartment(
    listing_id: str,
    request: Request,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> StatusResponse:
    await admin_delete_listing(db, actor=actor, listing_id=listing_id, ip_address=client_address(request))
    await db.commit()
    return StatusResponse(status="deleted")


@router.post("/admin/apartments/{listing_id}/verify", response_model=ListingOut)
async def verify_apartment(
    listing_id: str,
    request: Request,
    payload: VerifyIn | None = None,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    verified = payload.verified if payload else True
    listing = await set_verified(
        db, actor=actor, listing_id=listing_id, verified=verified, ip_address=client_address(request)
    )
    out = ListingOut.model_validate(listing)
    await db.commit()
    return out


@router.get("/admin/reports", response_model=Page[ReportOut])
async def get_reports(
    status: ReportStatus | None = Query(default=None),
    actor: Actor = Depends(require_admin),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
) -> Page[ReportOut]:
    page = await list_reports(db, params, status=status)
    return Page[ReportOut](**page.envelope([ReportOut.model_validate(r) for r in page.items]))


@router.post("/admin/reports/{report_id}/review", response_model=ReportOut)
async def review_report(
    report_id: str,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ReportOut:
    report = await mark_reviewed(db, actor=actor, report_id=report_id)
    out = ReportOut.model_validate(report)
    await db.commit()
    return out


@router.post("/admin/reports/{report_id}/resolve", response_model=ReportOut)
async def resolve(
    report_id: str,
    request: Request,
    actor: Actor = Depends(require_admin),
    notifier: NotificationSink = Depends(get_notifier),
    db: AsyncSession = Depends(get_db),
) -> ReportOut:
    report = await resolve_report(db, actor=actor, report_id=report_id, ip_address=client_address(request))
    await db.commit()
    await db.refresh(report)
    out = ReportOut.model_validate(report)

    await notifier.notify(
        user_id=report.reported_by,
        role="tenant",
        message="Your report has been reviewed and resolved. Thank you for keeping listings accurate.",
        meta={"report_id": report.id, "listing_id": report.listing_id},
    )
    return out


@router.get("/admin/stats", response_model=AdminStatsOut)
async def get_stats(
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> AdminStatsOut:
    stats = await moderation_stats(db)
    return AdminStatsOut(
        available_listings=stats.available_listings,
        deactivated_listings=stats.deactivated_listings,
        pending_reports=stats.pending_reports,
        recent_listings=[ListingOut.model_validate(r) for r in stats.recent_listings],
    )


@router.get("/admin/audit-logs", response_model=Page[AuditLogOut])
async def get_audit_logs(
    action: str | None = Query(default=None),
    actor: Actor = Depends(require_superadmin),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
) -> Page[AuditLogOut]:
    page = await list_audit_logs(db, params, action=action)
    return Page[AuditLogOut](**page.envelope([AuditLogOut.model_validate(r) for r in page.items]))
