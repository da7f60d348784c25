"""
Per-user posting index.

Each posted listing leaves a UserListingEntry(user_id, listing_id, posted_at).
Readers join the entries against listings, so references to hard-deleted
listings drop out silently, and order by posted_at descending.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound
from app.models.listing import Listing
from app.models.user_listing import UserListingEntry
from app.services.discovery import SearchFilters, resolve_filters, search_conditions, search_ordering
from app.services.pagination import PageParams, PageResult, fetch_page


@dataclass(frozen=True)
class Dashboard:
    total_listings: int
    active_listings: int
    deactivated_listings: int


async def append_entry(
    db: AsyncSession,
    *,
    user_id: str,
    listing_id: str,
    posted_at: datetime | None = None,
) -> UserListingEntry:
    entry = UserListingEntry(user_id=user_id, listing_id=listing_id)
    if posted_at is not None:
        entry.posted_at = posted_at
    db.add(entry)
    await db.flush()
    return entry


def _scoped(user_id: str, *, available: bool):
    return (
        select(Listing, UserListingEntry.posted_at)
        .join(UserListingEntry, UserListingEntry.listing_id == Listing.id)
        .where(
            UserListingEntry.user_id == user_id,
            Listing.is_available.is_(available),
        )
    )


async def list_entries(db: AsyncSession, user_id: str, params: PageParams, *, available: bool) -> PageResult:
    """Rows are (Listing, posted_at)."""
    stmt = _scoped(user_id, available=available).order_by(UserListingEntry.posted_at.desc(), Listing.id)
    return await fetch_page(db, stmt, params, scalars=False)


async def list_active(db: AsyncSession, user_id: str, params: PageParams) -> PageResult:
    return await list_entries(db, user_id, params, available=True)


async def list_deactivated(db: AsyncSession, user_id: str, params: PageParams) -> PageResult:
    return await list_entries(db, user_id, params, available=False)


async def search_entries(
    db: AsyncSession,
    user_id: str,
    filters: SearchFilters,
    params: PageParams,
    *,
    available: bool = True,
) -> PageResult:
    resolved = resolve_filters(filters)
    stmt = (
        _scoped(user_id, available=available)
        .where(*search_conditions(resolved))
        .order_by(*search_ordering(resolved, recency=UserListingEntry.posted_at))
    )
    return await fetch_page(db, stmt, params, scalars=False)


async def get_active_entry(db: AsyncSession, user_id: str, listing_id: str) -> tuple[Listing, datetime]:
    stmt = _scoped(user_id, available=True).where(Listing.id == listing_id).limit(1)
    row = (await db.execute(stmt)).first()
    if row is None:
        raise NotFound("Listing not found or not available")
    return row[0], row[1]


async def dashboard(db: AsyncSession, user_id: str) -> Dashboard:
    # history includes entries whose listing has since been deleted
    total = (
        await db.execute(select(func.count()).select_from(UserListingEntry).where(UserListingEntry.user_id == user_id))
    ).scalar_one()

    counts = dict(
        (
            await db.execute(
                select(Listing.is_available, func.count())
                .where(Listing.owner_id == user_id)
                .group_by(Listing.is_available)
            )
        ).all()
    )
    return Dashboard(
        total_listings=total,
        active_listings=counts.get(True, 0),
        deactivated_listings=counts.get(False, 0),
    )
