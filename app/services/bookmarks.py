"""
Tenant bookmarks.

Uniqueness of (tenant, listing) is enforced by the uq_bookmark_tenant_listing
constraint. The pre-insert lookup only serves the common case; two racing
adds both reaching the insert end with one AlreadyBookmarked.
"""
from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AlreadyBookmarked, NotFound
from app.models.bookmark import Bookmark
from app.models.listing import Listing
from app.services.discovery import SearchFilters, resolve_filters, search_conditions
from app.services.pagination import PageParams, PageResult, fetch_page


async def add_bookmark(db: AsyncSession, *, tenant_id: str, listing_id: str) -> tuple[Bookmark, Listing]:
    listing = (await db.execute(select(Listing).where(Listing.id == listing_id))).scalar_one_or_none()
    if not listing:
        raise NotFound("Listing not found")

    existing = (
        await db.execute(
            select(Bookmark.id).where(Bookmark.tenant_id == tenant_id, Bookmark.listing_id == listing_id)
        )
    ).scalar_one_or_none()
    if existing:
        raise AlreadyBookmarked("You have already bookmarked this listing")

    bookmark = Bookmark(tenant_id=tenant_id, listing_id=listing_id)
    db.add(bookmark)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise AlreadyBookmarked("You have already bookmarked this listing")
    return bookmark, listing


async def remove_bookmark(db: AsyncSession, *, tenant_id: str, listing_id: str) -> bool:
    result = await db.execute(
        delete(Bookmark)
        .where(Bookmark.tenant_id == tenant_id, Bookmark.listing_id == listing_id)
        .execution_options(synchronize_session="fetch")
    )
    return bool(result.rowcount)


async def clear_bookmarks(db: AsyncSession, *, tenant_id: str) -> int:
    result = await db.execute(
        delete(Bookmark)
        .where(Bookmark.tenant_id == tenant_id)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount or 0


async def list_bookmarks(db: AsyncSession, *, tenant_id: str, params: PageParams) -> PageResult:
    """
    Stored order, most recent first. Rows are (Bookmark, Listing | None);
    the listing is None when it was deleted after being bookmarked.
    """
    stmt = (
        select(Bookmark, Listing)
        .outerjoin(Listing, Listing.id == Bookmark.listing_id)
        .where(Bookmark.tenant_id == tenant_id)
        .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
    )
    return await fetch_page(db, stmt, params, scalars=False)


async def search_bookmarks(
    db: AsyncSession,
    *,
    tenant_id: str,
    filters: SearchFilters,
    params: PageParams,
) -> PageResult:
    """
    Bookmarked listings that still exist, newest listing first, narrowed by
    the discovery filters. Rows are (Listing, bookmarked_at).
    """
    resolved = resolve_filters(filters)
    stmt = (
        select(Listing, Bookmark.created_at)
        .join(Bookmark, Bookmark.listing_id == Listing.id)
        .where(Bookmark.tenant_id == tenant_id, *search_conditions(resolved))
        .order_by(Listing.created_at.desc(), Listing.id)
    )
    return await fetch_page(db, stmt, params, scalars=False)
