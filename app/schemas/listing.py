from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.config import settings
from app.schemas.common import UtcDatetime

ApartmentType = Literal[
    "studio",
    "mini-flat",
    "self-contained",
    "1-bedroom",
    "2-bedroom",
    "3-bedroom",
    "duplex",
    "penthouse",
    "bungalow",
    "flat",
    "apartment",
    "shared-apartment",
]
PaymentFrequency = Literal["monthly", "quarterly", "yearly"]
BrowseSort = Literal["recent", "random", "popular"]

MAX_ROOMS = 100
MAX_PRICE = 1_000_000_000_000


def _check_image_count(images: list[str] | None) -> list[str] | None:
    if images is not None and len(images) > settings.max_listing_images:
        raise ValueError(f"a listing can carry at most {settings.max_listing_images} images")
    return images


class ListingCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    apartment_type: ApartmentType
    price: float = Field(ge=0, le=MAX_PRICE)
    payment_frequency: PaymentFrequency
    duration: str = Field(min_length=1, max_length=60)
    location: str = Field(min_length=1, max_length=200)
    address: str = Field(min_length=1, max_length=300)
    nearest_landmark: str | None = Field(default=None, max_length=200)
    images: list[str] = Field(default_factory=list)
    contact_phone: str = Field(min_length=1, max_length=40)
    amenities: list[str] = Field(default_factory=list)
    bedrooms: int = Field(ge=0, le=MAX_ROOMS)
    bathrooms: int = Field(ge=0, le=MAX_ROOMS)
    size: str | None = Field(default=None, max_length=60)
    furnished: bool = False
    service_charge: float = Field(default=0, ge=0, le=MAX_PRICE)

    @field_validator("images")
    @classmethod
    def check_image_count(cls, images):
        return _check_image_count(images)


class ListingUpdate(BaseModel):
    """Shallow patch: only fields present in the request body are replaced."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    apartment_type: ApartmentType | None = None
    price: float | None = Field(default=None, ge=0, le=MAX_PRICE)
    payment_frequency: PaymentFrequency | None = None
    duration: str | None = Field(default=None, min_length=1, max_length=60)
    location: str | None = Field(default=None, min_length=1, max_length=200)
    address: str | None = Field(default=None, min_length=1, max_length=300)
    nearest_landmark: str | None = Field(default=None, max_length=200)
    images: list[str] | None = None
    contact_phone: str | None = Field(default=None, min_length=1, max_length=40)
    amenities: list[str] | None = None
    bedrooms: int | None = Field(default=None, ge=0, le=MAX_ROOMS)
    bathrooms: int | None = Field(default=None, ge=0, le=MAX_ROOMS)
    size: str | None = Field(default=None, max_length=60)
    furnished: bool | None = None
    service_charge: float | None = Field(default=None, ge=0, le=MAX_PRICE)

    @field_validator("images")
    @classmethod
    def check_image_count(cls, images):
        return _check_image_count(images)


class ListingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    owner_role: str
    title: str
    description: str | None
    apartment_type: str
    price: float
    payment_frequency: str
    duration: str
    location: str
    address: str
    nearest_landmark: str | None
    images: list[str]
    contact_phone: str
    amenities: list[str]
    bedrooms: int
    bathrooms: int
    size: str | None
    furnished: bool
    service_charge: float
    is_available: bool
    verified: bool
    views: int
    report_count: int
    created_at: UtcDatetime
    updated_at: UtcDatetime


class PostedListingOut(ListingOut):
    posted_at: UtcDatetime


class BrowseOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    listings: list[ListingOut]
    total: int
    has_more: bool = Field(alias="hasMore")


class ImageUploadOut(BaseModel):
    uploaded_images: list[str]


class ViewRecordedOut(BaseModel):
    recorded: bool
    views: int


class DashboardOut(BaseModel):
    total_listings: int
    active_listings: int
    deactivated_listings: int
