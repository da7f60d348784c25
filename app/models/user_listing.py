from datetime import datetime

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import DateTime

from app.core.ids import gen_id, utcnow

from app.models.base import Base


class UserListingEntry(Base):
    """
    Per-user posting history. One row per posted listing.

    listing_id deliberately has no foreign key: an admin hard delete leaves
    the entry behind and readers drop it by joining against listings.
    """

    __tablename__ = "user_listing_entries"
    __table_args__ = (
        Index("ix_user_listing_entries_user_posted", "user_id", "posted_at"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id("uli"))
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    listing_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    posted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
