from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AlreadyInState, NotFound
from app.core.ids import utcnow
from app.core.security import generate_api_key
from app.models.api_key import ApiKey

log = logging.getLogger(__name__)


async def issue_api_key(db: AsyncSession, *, user_id: str, role: str) -> tuple[ApiKey, str]:
    """Returns the stored row and the plain key, which is never persisted."""
    parts = generate_api_key()
    row = ApiKey(user_id=user_id, role=role, key_prefix=parts.prefix, key_hash=parts.hashed, is_active=True)
    db.add(row)
    await db.flush()
    log.info("issued %s key %s for user %s", role, row.id, user_id)
    return row, parts.plain


async def revoke_api_key(db: AsyncSession, *, api_key_id: str) -> ApiKey:
    row = (await db.execute(select(ApiKey).where(ApiKey.id == api_key_id))).scalar_one_or_none()
    if not row:
        raise NotFound("API key not found")
    if not row.is_active:
        raise AlreadyInState("API key is already revoked")
    row.is_active = False
    row.revoked_at = utcnow()
    await db.flush()
    log.info("revoked key %s for user %s", row.id, row.user_id)
    return row
