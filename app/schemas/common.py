from datetime import datetime, timezone
from typing import Annotated, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def _as_utc(value: datetime) -> datetime:
    # sqlite hands back naive values; every stored timestamp is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class StatusResponse(BaseModel):
    status: str


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: list[dict] = Field(default_factory=list)


class Page(BaseModel, Generic[T]):
    """
    Paged envelope shared by search and per-scope list endpoints.
    Serialized with camelCase keys (totalPages, hasNextPage, ...).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    results: list[T]
    total: int
    page: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
