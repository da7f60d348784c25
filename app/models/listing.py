from sqlalchemy import Boolean, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.ids import gen_id

from app.models.base import Base, JSONType, TimestampMixin


class Listing(TimestampMixin, Base):
    __tablename__ = "listings"
    __table_args__ = (
        Index("ix_listings_available_created", "is_available", "created_at"),
        Index("ix_listings_available_location", "is_available", "location"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id("apt"))

    # Identity collaborator's user id; no local users table
    owner_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    # "landlord" | "agent"
    owner_role: Mapped[str] = mapped_column(String(30), nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    apartment_type: Mapped[str] = mapped_column(String(40), nullable=False)

    price: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), nullable=False)
    # "monthly" | "quarterly" | "yearly"
    payment_frequency: Mapped[str] = mapped_column(String(20), nullable=False)
    duration: Mapped[str] = mapped_column(String(60), nullable=False)

    location: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[str] = mapped_column(String(300), nullable=False)
    nearest_landmark: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # URLs returned by object storage, never raw bytes
    images: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    contact_phone: Mapped[str] = mapped_column(String(40), nullable=False)
    amenities: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False)
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False)
    size: Mapped[str | None] = mapped_column(String(60), nullable=True)
    furnished: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    service_charge: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)

    # soft-delete marker; false hides the listing from browse/search
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # denormalized counters, only ever changed with single UPDATE statements
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    report_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
