from dataclasses import dataclass
from fastapi import Depends, HTTPException, Request, Security
from fastapi.security.api_key import APIKeyHeader
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.errors import Forbidden
from app.core.security import hash_api_key
from app.models.api_key import ApiKey

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

POSTER_ROLES = ("landlord", "agent")
ADMIN_ROLES = ("admin", "superadmin")


@dataclass(frozen=True)
class Actor:
    api_key_id: str
    user_id: str
    role: str  # "tenant" | "landlord" | "agent" | "admin" | "superadmin"

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


async def resolve_api_key(db: AsyncSession, api_key: str) -> Actor | None:
    hashed = hash_api_key(api_key)
    stmt = select(ApiKey).where(ApiKey.key_hash == hashed, ApiKey.is_active.is_(True))
    row = (await db.execute(stmt)).scalar_one_or_none()
    if not row:
        return None
    return Actor(api_key_id=row.id, user_id=row.user_id, role=row.role)


async def get_actor(
    api_key: str | None = Security(api_key_header),
    db: AsyncSession = Depends(get_db),
) -> Actor:
    if not api_key:
        raise HTTPException(status_code=401, detail="Missing X-API-Key")

    actor = await resolve_api_key(db, api_key)
    if not actor:
        raise HTTPException(status_code=401, detail="Invalid API key")
    return actor


async def get_optional_actor(
    api_key: str | None = Security(api_key_header),
    db: AsyncSession = Depends(get_db),
) -> Actor | None:
    # Anonymous callers are allowed; a bad key is still rejected
    if not api_key:
        return None
    actor = await resolve_api_key(db, api_key)
    if not actor:
        raise HTTPException(status_code=401, detail="Invalid API key")
    return actor


def require_poster(actor: Actor = Depends(get_actor)) -> Actor:
    if actor.role not in POSTER_ROLES:
        raise Forbidden("Landlord or agent role required")
    return actor


def require_tenant(actor: Actor = Depends(get_actor)) -> Actor:
    if actor.role != "tenant":
        raise Forbidden("Tenant role required")
    return actor


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_admin:
        raise Forbidden("Administrator role required")
    return actor


def require_superadmin(actor: Actor = Depends(get_actor)) -> Actor:
    if actor.role != "superadmin":
        raise Forbidden("Superadmin role required")
    return actor


def client_address(request: Request) -> str:
    # first hop of X-Forwarded-For when behind a proxy, else the socket peer
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
