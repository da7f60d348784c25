from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit_log import AuditLog
from app.services.auth import Actor


async def audit(
    db: AsyncSession,
    *,
    actor: Actor | None,
    action: str,
    target_type: str | None = None,
    target_id: str | None = None,
    ip_address: str | None = None,
    detail: dict[str, Any] | None = None,
) -> AuditLog:
    """Append a moderation trail entry; it commits with the action it describes."""
    entry = AuditLog(action=action, target_type=target_type, target_id=target_id, ip_address=ip_address)
    entry.detail = dict(detail or {})
    if actor is not None:
        entry.actor_id, entry.actor_role = actor.user_id, actor.role
    db.add(entry)
    return entry
