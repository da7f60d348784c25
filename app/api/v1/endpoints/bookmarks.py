from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.bookmark import BookmarkCreate, BookmarkOut
from app.schemas.common import Page, StatusResponse
from app.schemas.listing import ListingOut
from app.services.auth import Actor, require_tenant
from app.services.bookmarks import (
    add_bookmark,
    clear_bookmarks,
    list_bookmarks,
    remove_bookmark,
    search_bookmarks,
)
from app.services.discovery import SearchFilters, search_filters
from app.services.pagination import PageParams, page_params

router = APIRouter()


@router.post("/bookmarks", response_model=BookmarkOut, status_code=201)
async def create_bookmark(
    payload: BookmarkCreate,
    actor: Actor = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
) -> BookmarkOut:
    bookmark, listing = await add_bookmark(db, tenant_id=actor.user_id, listing_id=payload.listing_id)
    out = BookmarkOut(
        listing_id=bookmark.listing_id,
        created_at=bookmark.created_at,
        listing=ListingOut.model_validate(listing),
    )
    await db.commit()
    return out


@router.get("/bookmarks", response_model=Page[BookmarkOut])
async def get_bookmarks(
    actor: Actor = Depends(require_tenant),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
) -> Page[BookmarkOut]:
    page = await list_bookmarks(db, tenant_id=actor.user_id, params=params)
    results = [
        BookmarkOut(
            listing_id=bookmark.listing_id,
            created_at=bookmark.created_at,
            listing=ListingOut.model_validate(listing) if listing is not None else None,
        )
        for bookmark, listing in page.items
    ]
    return Page[BookmarkOut](**page.envelope(results))


@router.get("/bookmarks/search", response_model=Page[BookmarkOut])
async def search_my_bookmarks(
    actor: Actor = Depends(require_tenant),
    filters: SearchFilters = Depends(search_filters),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
) -> Page[BookmarkOut]:
    page = await search_bookmarks(db, tenant_id=actor.user_id, filters=filters, params=params)
    results = [
        BookmarkOut(listing_id=listing.id, created_at=bookmarked_at, listing=ListingOut.model_validate(listing))
        for listing, bookmarked_at in page.items
    ]
    return Page[BookmarkOut](**page.envelope(results))


@router.delete("/bookmarks/{listing_id}", response_model=StatusResponse)
async def delete_bookmark(
    listing_id: str,
    actor: Actor = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
) -> StatusResponse:
    removed = await remove_bookmark(db, tenant_id=actor.user_id, listing_id=listing_id)
    await db.commit()
    return StatusResponse(status="removed" if removed else "not_bookmarked")


@router.delete("/bookmarks", response_model=StatusResponse)
async def delete_all_bookmarks(
    actor: Actor = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
) -> StatusResponse:
    await clear_bookmarks(db, tenant_id=actor.user_id)
    await db.commit()
    return StatusResponse(status="cleared")
