from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from fastapi import Query
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings

# keeps OFFSET within a 64-bit integer
MAX_PAGE = 100_000


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
) -> PageParams:
    return PageParams(page=page, limit=limit)


@dataclass(frozen=True)
class PageResult:
    items: list[Any]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1

    def envelope(self, results: list[Any]) -> dict:
        return {
            "results": results,
            "total": self.total,
            "page": self.page,
            "total_pages": self.total_pages,
            "has_next_page": self.has_next_page,
            "has_prev_page": self.has_prev_page,
        }


async def count_rows(db: AsyncSession, stmt: Select) -> int:
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    return (await db.execute(count_stmt)).scalar_one()


async def fetch_page(db: AsyncSession, stmt: Select, params: PageParams, *, scalars: bool = True) -> PageResult:
    """
    Count the full result of `stmt`, then fetch one offset/limit window of it.
    `stmt` must already carry its ORDER BY.
    """
    total = await count_rows(db, stmt)
    if total == 0:
        return PageResult(items=[], total=0, page=params.page, limit=params.limit)

    window = stmt.offset(params.offset).limit(params.limit)
    result = await db.execute(window)
    items = list(result.scalars().all()) if scalars else list(result.all())
    return PageResult(items=items, total=total, page=params.page, limit=params.limit)
