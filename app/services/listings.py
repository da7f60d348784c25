from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AlreadyInState, Forbidden, NotFound, ValidationFailed
from app.models.listing import Listing
from app.services.audit import audit
from app.services.auth import Actor
from app.services.user_listings import append_entry

log = logging.getLogger(__name__)

# Fields an owner may replace through a patch. Counters, flags and ownership
# change only through their dedicated operations.
PATCHABLE_FIELDS = frozenset({
    "title",
    "description",
    "apartment_type",
    "price",
    "payment_frequency",
    "duration",
    "location",
    "address",
    "nearest_landmark",
    "images",
    "contact_phone",
    "amenities",
    "bedrooms",
    "bathrooms",
    "size",
    "furnished",
    "service_charge",
})
CLEARABLE_FIELDS = frozenset({"description", "nearest_landmark", "size"})


async def create_listing(db: AsyncSession, *, actor: Actor, fields: dict[str, Any]) -> Listing:
    """
    Insert a listing and its per-user index entry.

    Both rows are written in the caller's transaction, so a commit makes
    the listing visible in browse and in the owner's own views together.
    """
    listing = Listing(
        owner_id=actor.user_id,
        owner_role=actor.role,
        is_available=True,
        views=0,
        report_count=0,
        **fields,
    )
    db.add(listing)
    await db.flush()

    await append_entry(db, user_id=actor.user_id, listing_id=listing.id, posted_at=listing.created_at)
    return listing


async def get_listing(db: AsyncSession, listing_id: str) -> Listing:
    listing = (await db.execute(select(Listing).where(Listing.id == listing_id))).scalar_one_or_none()
    if not listing:
        raise NotFound("Listing not found")
    return listing


async def _get_owned(db: AsyncSession, listing_id: str, owner_id: str) -> Listing:
    listing = await get_listing(db, listing_id)
    if listing.owner_id != owner_id:
        raise Forbidden("You can only modify your own listings")
    return listing


async def update_listing(db: AsyncSession, *, listing_id: str, owner_id: str, patch: dict[str, Any]) -> Listing:
    listing = await _get_owned(db, listing_id, owner_id)

    cleared = sorted(k for k, v in patch.items() if v is None and k in PATCHABLE_FIELDS - CLEARABLE_FIELDS)
    if cleared:
        raise ValidationFailed("Required fields cannot be cleared", details=[{"field": k} for k in cleared])

    for key, value in patch.items():
        if key in PATCHABLE_FIELDS:
            setattr(listing, key, value)

    await db.flush()
    return listing


async def set_availability(db: AsyncSession, *, listing_id: str, owner_id: str, available: bool) -> Listing:
    listing = await _get_owned(db, listing_id, owner_id)
    if listing.is_available == available:
        state = "active" if available else "deactivated"
        raise AlreadyInState(f"Listing is already {state}")

    # availability is not an edit, keep updated_at
    await db.execute(
        update(Listing)
        .where(Listing.id == listing_id)
        .values(is_available=available, updated_at=Listing.updated_at)
    )
    await db.flush()
    return listing


async def deactivate_listing(db: AsyncSession, *, listing_id: str, owner_id: str) -> Listing:
    return await set_availability(db, listing_id=listing_id, owner_id=owner_id, available=False)


async def reactivate_listing(db: AsyncSession, *, listing_id: str, owner_id: str) -> Listing:
    return await set_availability(db, listing_id=listing_id, owner_id=owner_id, available=True)


async def admin_delete_listing(
    db: AsyncSession,
    *,
    actor: Actor,
    listing_id: str,
    ip_address: str | None = None,
) -> None:
    """
    Hard delete, regardless of owner. Index entries and bookmarks pointing
    at the listing are left in place and filtered out by their readers.
    """
    listing = await get_listing(db, listing_id)

    await audit(
        db,
        actor=actor,
        action="listing.deleted",
        target_type="listing",
        target_id=listing.id,
        ip_address=ip_address,
        detail={"title": listing.title, "owner_id": listing.owner_id},
    )
    await db.delete(listing)
    await db.flush()
    log.info("admin %s deleted listing %s", actor.user_id, listing_id)


async def set_verified(
    db: AsyncSession,
    *,
    actor: Actor,
    listing_id: str,
    verified: bool,
    ip_address: str | None = None,
) -> Listing:
    listing = await get_listing(db, listing_id)
    listing.verified = verified
    await audit(
        db,
        actor=actor,
        action="listing.verified" if verified else "listing.unverified",
        target_type="listing",
        target_id=listing.id,
        ip_address=ip_address,
    )
    await db.flush()
    return listing
