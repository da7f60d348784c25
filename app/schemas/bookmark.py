from pydantic import BaseModel, ConfigDict

from app.schemas.common import UtcDatetime
from app.schemas.listing import ListingOut


class BookmarkCreate(BaseModel):
    listing_id: str


class BookmarkOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    listing_id: str
    created_at: UtcDatetime
    # None when the listing was hard-deleted after being bookmarked
    listing: ListingOut | None = None
