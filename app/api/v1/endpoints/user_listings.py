from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.errors import Forbidden
from app.models.listing import Listing
from app.schemas.common import Page
from app.schemas.listing import DashboardOut, ListingOut, PostedListingOut
from app.services.auth import Actor, get_actor
from app.services.discovery import SearchFilters, search_filters
from app.services.pagination import PageParams, PageResult, page_params
from app.services.user_listings import (
    dashboard,
    get_active_entry,
    list_active,
    list_deactivated,
    search_entries,
)

router = APIRouter()


def same_user(user_id: str, actor: Actor = Depends(get_actor)) -> Actor:
    if actor.user_id != user_id:
        raise Forbidden("You can only view your own listings")
    return actor


def _posted(listing: Listing, posted_at: datetime) -> PostedListingOut:
    return PostedListingOut(**ListingOut.model_validate(listing).model_dump(), posted_at=posted_at)


def _page(result: PageResult) -> Page[PostedListingOut]:
    return Page[PostedListingOut](**result.envelope([_posted(listing, at) for listing, at in result.items]))


@router.get("/user-listings/{user_id}", response_model=Page[PostedListingOut])
async def list_active_listings(
    user_id: str,
    actor: Actor = Depends(same_user),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
) -> Page[PostedListingOut]:
    return _page(await list_active(db, user_id, params))


@router.get("/user-listings/{user_id}/deactivated", response_model=Page[PostedListingOut])
async def list_deactivated_listings(
    user_id: str,
    actor: Actor = Depends(same_user),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
) -> Page[PostedListingOut]:
    return _page(await list_deactivated(db, user_id, params))


@router.get("/user-listings/{user_id}/search", response_model=Page[PostedListingOut])
async def search_user_listings(
    user_id: str,
    status: Literal["active", "deactivated"] = Query(default="active"),
    actor: Actor = Depends(same_user),
    filters: SearchFilters = Depends(search_filters),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
) -> Page[PostedListingOut]:
    result = await search_entries(db, user_id, filters, params, available=status == "active")
    return _page(result)


@router.get("/user-listings/{user_id}/apartments/{listing_id}", response_model=PostedListingOut)
async def get_user_listing(
    user_id: str,
    listing_id: str,
    actor: Actor = Depends(same_user),
    db: AsyncSession = Depends(get_db),
) -> PostedListingOut:
    listing, posted_at = await get_active_entry(db, user_id, listing_id)
    return _posted(listing, posted_at)


@router.get("/user-listings/{user_id}/dashboard", response_model=DashboardOut)
async def get_dashboard(
    user_id: str,
    actor: Actor = Depends(same_user),
    db: AsyncSession = Depends(get_db),
) -> DashboardOut:
    counts = await dashboard(db, user_id)
    return DashboardOut(
        total_listings=counts.total_listings,
        active_listings=counts.active_listings,
        deactivated_listings=counts.deactivated_listings,
    )
