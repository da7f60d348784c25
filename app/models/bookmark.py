from datetime import datetime

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import DateTime

from app.core.ids import gen_id, utcnow

from app.models.base import Base


class Bookmark(Base):
    __tablename__ = "bookmarks"
    __table_args__ = (
        # a tenant bookmarks a listing at most once
        UniqueConstraint("tenant_id", "listing_id", name="uq_bookmark_tenant_listing"),
        Index("ix_bookmarks_tenant_created", "tenant_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id("bmk"))
    tenant_id: Mapped[str] = mapped_column(String, nullable=False)
    # no FK: stale bookmarks survive a hard delete and are dropped at read time
    listing_id: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
