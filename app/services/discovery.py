"""
Discovery engine: which available listings a viewer sees, and in what order.

Two entry points share this module:

- browse: the public feed with three sort strategies (recent, random, popular)
- search: structured filters plus a free-text keyword that may itself carry
  a bedroom count and apartment type (see app.services.search_terms)

The filter and ordering builders are also used by the scoped searches over
a user's own postings and a tenant's bookmarks.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import Query
from sqlalchemy import ColumnElement, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ValidationFailed
from app.models.listing import Listing
from app.schemas.listing import MAX_PRICE, MAX_ROOMS
from app.services.pagination import PageParams, PageResult, fetch_page
from app.services.search_terms import parse_search_terms

TEXT_COLUMNS = (Listing.title, Listing.description, Listing.location)


@dataclass(frozen=True)
class SearchFilters:
    location: str | None = None
    apartment_type: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    bedrooms: int | None = None
    keyword: str | None = None


@dataclass(frozen=True)
class ResolvedSearch:
    """Filters after keyword extraction; explicit parameters always win."""

    location: str | None
    apartment_type: str | None
    min_price: float | None
    max_price: float | None
    bedrooms: int | None
    has_keyword: bool
    text: str
    words: list[str]


@dataclass(frozen=True)
class BrowseResult:
    listings: list[Listing]
    total: int
    has_more: bool


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def resolve_filters(filters: SearchFilters) -> ResolvedSearch:
    if (
        filters.min_price is not None
        and filters.max_price is not None
        and filters.min_price > filters.max_price
    ):
        raise ValidationFailed(
            "min_price cannot exceed max_price",
            details=[{"min_price": filters.min_price, "max_price": filters.max_price}],
        )

    keyword = _clean(filters.keyword)
    parsed = parse_search_terms(keyword) if keyword else None

    bedrooms = filters.bedrooms
    if bedrooms is None and parsed is not None:
        bedrooms = parsed.bedrooms

    apartment_type = _clean(filters.apartment_type)
    if apartment_type is None and parsed is not None:
        apartment_type = parsed.apartment_type

    return ResolvedSearch(
        location=_clean(filters.location),
        apartment_type=apartment_type,
        min_price=filters.min_price,
        max_price=filters.max_price,
        bedrooms=bedrooms,
        has_keyword=keyword is not None,
        text=parsed.text if parsed else "",
        words=list(parsed.words) if parsed else [],
    )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains(column: Any, term: str) -> ColumnElement[bool]:
    """Case-insensitive substring match."""
    return column.ilike(f"%{_escape_like(term)}%", escape="\\")


def search_conditions(resolved: ResolvedSearch) -> list[ColumnElement[bool]]:
    conds: list[ColumnElement[bool]] = []

    if resolved.location:
        conds.append(contains(Listing.location, resolved.location))
    if resolved.apartment_type:
        conds.append(contains(Listing.apartment_type, resolved.apartment_type))
    if resolved.bedrooms is not None:
        conds.append(Listing.bedrooms == resolved.bedrooms)
    if resolved.min_price is not None:
        conds.append(Listing.price >= resolved.min_price)
    if resolved.max_price is not None:
        conds.append(Listing.price <= resolved.max_price)

    if resolved.text:
        # the full phrase, or any single word of it, in any text column
        terms = [resolved.text, *resolved.words]
        conds.append(or_(*[contains(col, term) for term in terms for col in TEXT_COLUMNS]))

    return conds


def search_ordering(resolved: ResolvedSearch, *, recency: Any = Listing.created_at) -> list[Any]:
    newest_first = [recency.desc(), Listing.id]

    if resolved.has_keyword:
        return newest_first
    if resolved.min_price is not None:
        return [Listing.price.asc(), *newest_first]
    if resolved.max_price is not None:
        return [Listing.price.desc(), *newest_first]
    if resolved.bedrooms is not None:
        return [Listing.bedrooms.asc(), *newest_first]
    return newest_first


def last_activity():
    """Later of created_at and updated_at."""
    return case(
        (Listing.updated_at > Listing.created_at, Listing.updated_at),
        else_=Listing.created_at,
    )


def _available():
    return Listing.is_available.is_(True)


async def browse(db: AsyncSession, params: PageParams, *, sort: str = "recent") -> BrowseResult:
    stmt = select(Listing).where(_available())

    if sort == "random":
        # Fresh random key per request: pages are a best-effort sample and may
        # repeat or skip listings across calls.
        stmt = stmt.order_by(func.random())
    elif sort == "popular":
        location_freq = (
            select(Listing.location.label("location"), func.count().label("freq"))
            .where(_available())
            .group_by(Listing.location)
            .subquery()
        )
        stmt = (
            stmt.join(location_freq, location_freq.c.location == Listing.location)
            .order_by(location_freq.c.freq.desc(), Listing.location)
        )
    else:
        stmt = stmt.order_by(last_activity().desc(), Listing.id)

    page = await fetch_page(db, stmt, params)
    return BrowseResult(
        listings=page.items,
        total=page.total,
        has_more=params.offset + len(page.items) < page.total,
    )


async def search(db: AsyncSession, filters: SearchFilters, params: PageParams) -> PageResult:
    resolved = resolve_filters(filters)
    stmt = (
        select(Listing)
        .where(_available(), *search_conditions(resolved))
        .order_by(*search_ordering(resolved))
    )
    return await fetch_page(db, stmt, params)


def search_filters(
    location: str | None = Query(default=None, max_length=200),
    apartment_type: str | None = Query(default=None, max_length=40),
    min_price: float | None = Query(default=None, ge=0, le=MAX_PRICE),
    max_price: float | None = Query(default=None, ge=0, le=MAX_PRICE),
    bedrooms: int | None = Query(default=None, ge=0, le=MAX_ROOMS),
    keyword: str | None = Query(default=None, max_length=200),
    q: str | None = Query(default=None, max_length=200),
) -> SearchFilters:
    # `q` is an alias of `keyword`; keyword wins when both are sent
    return SearchFilters(
        location=location,
        apartment_type=apartment_type,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        keyword=keyword or q,
    )
