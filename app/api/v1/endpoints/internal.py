from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.api_key import ApiKeyIssue, ApiKeyIssuedOut
from app.schemas.common import StatusResponse
from app.services.api_keys import issue_api_key, revoke_api_key
from app.services.internal_admin import require_internal_admin
from app.services.reconciliation import purge_expired_notifications, reconcile_user_listing_index

router = APIRouter()

@router.post(
    "/internal/api-keys",
    response_model=ApiKeyIssuedOut,
    status_code=201,
    dependencies=[Depends(require_internal_admin)],
)
async def internal_issue_api_key(payload: ApiKeyIssue, db: AsyncSession = Depends(get_db)) -> ApiKeyIssuedOut:
    row, plain = await issue_api_key(db, user_id=payload.user_id, role=payload.role)
    await db.commit()
    return ApiKeyIssuedOut(api_key_id=row.id, user_id=row.user_id, role=row.role, plain_key=plain)


@router.post(
    "/internal/api-keys/{api_key_id}/revoke",
    response_model=StatusResponse,
    dependencies=[Depends(require_internal_admin)],
)
async def internal_revoke_api_key(api_key_id: str, db: AsyncSession = Depends(get_db)) -> StatusResponse:
    await revoke_api_key(db, api_key_id=api_key_id)
    await db.commit()
    return StatusResponse(status="revoked")


@router.post("/internal/maintenance/reconcile-index", dependencies=[Depends(require_internal_admin)])
async def internal_reconcile_index(
    prune_stale: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
) -> dict:
    report = await reconcile_user_listing_index(db, prune_stale=prune_stale)
    await db.commit()
    return {"inserted": report.inserted, "pruned": report.pruned}


@router.post("/internal/maintenance/purge-notifications", dependencies=[Depends(require_internal_admin)])
async def internal_purge_notifications(db: AsyncSession = Depends(get_db)) -> dict:
    purged = await purge_expired_notifications(db)
    await db.commit()
    return {"purged": purged}
