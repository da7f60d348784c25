from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.db import get_db
from app.core.errors import ValidationFailed
from app.schemas.common import Page
from app.schemas.listing import (
    BrowseOut,
    BrowseSort,
    ImageUploadOut,
    ListingCreate,
    ListingOut,
    ListingUpdate,
    ViewRecordedOut,
)
from app.schemas.report import ReportCreate, ReportOut
from app.services.auth import Actor, client_address, get_optional_actor, require_poster, require_tenant
from app.services.discovery import SearchFilters, browse, search, search_filters
from app.services.idempotency import (
    claim_idempotency_key,
    optional_idempotency_key,
    request_fingerprint,
    save_idempotent_response,
)
from app.services.listings import (
    create_listing,
    deactivate_listing,
    get_listing,
    reactivate_listing,
    update_listing,
)
from app.services.notifications import NotificationSink, get_notifier
from app.services.pagination import PageParams, page_params
from app.services.reports import file_report
from app.services.storage import IMAGE_EXTENSIONS, ObjectStore, get_object_store, image_key
from app.services.views import record_view

router = APIRouter()


@router.post("/apartments", response_model=ListingOut, status_code=201)
async def create_apartment(
    payload: ListingCreate,
    request: Request,
    actor: Actor = Depends(require_poster),
    idempotency_key: str | None = Depends(optional_idempotency_key),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    body = payload.model_dump()

    if idempotency_key:
        stored = await claim_idempotency_key(
            db,
            actor=actor,
            key=idempotency_key,
            fingerprint=request_fingerprint(request.url.path, body),
        )
        if stored:
            return ListingOut(**stored)

    listing = await create_listing(db, actor=actor, fields=body)
    out = ListingOut.model_validate(listing)

    if idempotency_key:
        await save_idempotent_response(db, actor=actor, key=idempotency_key, response=out.model_dump(mode="json"))

    await db.commit()
    return out


@router.post("/apartments/images", response_model=ImageUploadOut)
async def upload_apartment_images(
    images: list[UploadFile] = File(...),
    actor: Actor = Depends(require_poster),
    store: ObjectStore = Depends(get_object_store),
) -> ImageUploadOut:
    if len(images) > settings.max_listing_images:
        raise ValidationFailed(f"You can upload a maximum of {settings.max_listing_images} images")

    bad = [f.filename for f in images if f.content_type not in IMAGE_EXTENSIONS]
    if bad:
        raise ValidationFailed("Unsupported image type", details=[{"filename": name} for name in bad])

    # one byte past the cap is enough to spot an oversized file
    payloads = []
    for f in images:
        data = await f.read(settings.max_image_bytes + 1)
        if len(data) > settings.max_image_bytes:
            raise ValidationFailed(
                f"Each image must be at most {settings.max_image_bytes} bytes",
                details=[{"filename": f.filename}],
            )
        payloads.append((f.content_type, data))

    urls = []
    for content_type, data in payloads:
        key = image_key(actor.user_id, content_type)
        urls.append(await run_in_threadpool(store.put_bytes, key=key, data=data))
    return ImageUploadOut(uploaded_images=urls)


@router.get("/apartments", response_model=BrowseOut)
async def browse_apartments(
    params: PageParams = Depends(page_params),
    sort: BrowseSort = Query(default="recent"),
    db: AsyncSession = Depends(get_db),
) -> BrowseOut:
    result = await browse(db, params, sort=sort)
    return BrowseOut(
        listings=[ListingOut.model_validate(r) for r in result.listings],
        total=result.total,
        has_more=result.has_more,
    )


@router.get("/apartments/search", response_model=Page[ListingOut])
async def search_apartments(
    filters: SearchFilters = Depends(search_filters),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
) -> Page[ListingOut]:
    page = await search(db, filters, params)
    return Page[ListingOut](**page.envelope([ListingOut.model_validate(r) for r in page.items]))


@router.get("/apartments/{listing_id}", response_model=ListingOut)
async def get_apartment(listing_id: str, db: AsyncSession = Depends(get_db)) -> ListingOut:
    return ListingOut.model_validate(await get_listing(db, listing_id))


@router.patch("/apartments/{listing_id}", response_model=ListingOut)
async def update_apartment(
    listing_id: str,
    payload: ListingUpdate,
    actor: Actor = Depends(require_poster),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    listing = await update_listing(
        db,
        listing_id=listing_id,
        owner_id=actor.user_id,
        patch=payload.model_dump(exclude_unset=True),
    )
    out = ListingOut.model_validate(listing)
    await db.commit()
    return out


@router.post("/apartments/{listing_id}/deactivate", response_model=ListingOut)
async def deactivate_apartment(
    listing_id: str,
    actor: Actor = Depends(require_poster),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    listing = await deactivate_listing(db, listing_id=listing_id, owner_id=actor.user_id)
    out = ListingOut.model_validate(listing)
    await db.commit()
    return out


@router.post("/apartments/{listing_id}/reactivate", response_model=ListingOut)
async def reactivate_apartment(
    listing_id: str,
    actor: Actor = Depends(require_poster),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    listing = await reactivate_listing(db, listing_id=listing_id, owner_id=actor.user_id)
    out = ListingOut.model_validate(listing)
    await db.commit()
    return out


@router.post("/apartments/{listing_id}/views", response_model=ViewRecordedOut)
async def record_apartment_view(
    listing_id: str,
    request: Request,
    actor: Actor | None = Depends(get_optional_actor),
    db: AsyncSession = Depends(get_db),
) -> ViewRecordedOut:
    result = await record_view(
        db,
        listing_id=listing_id,
        viewer_id=actor.user_id if actor else None,
        viewer_address=client_address(request),
    )
    await db.commit()
    return ViewRecordedOut(recorded=result.recorded, views=result.views)


@router.post("/apartments/{listing_id}/reports", response_model=ReportOut, status_code=201)
async def report_apartment(
    listing_id: str,
    payload: ReportCreate,
    actor: Actor = Depends(require_tenant),
    notifier: NotificationSink = Depends(get_notifier),
    db: AsyncSession = Depends(get_db),
) -> ReportOut:
    report, listing = await file_report(db, actor=actor, listing_id=listing_id, reason=payload.reason)
    out = ReportOut.model_validate(report)
    owner_id, owner_role, title, location = listing.owner_id, listing.owner_role, listing.title, listing.location
    await db.commit()

    await notifier.notify(
        user_id=owner_id,
        role=owner_role,
        message=f"Your listing '{title}' has been reported and is under review.",
        meta={"listing_id": listing_id, "title": title, "location": location},
    )
    return out
