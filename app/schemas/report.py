from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import UtcDatetime

ReportStatus = Literal["pending", "reviewed", "resolved"]


class ReportCreate(BaseModel):
    reason: str = Field(min_length=1, max_length=2000)


class ReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    listing_id: str
    reported_by: str
    reason: str
    status: ReportStatus
    created_at: UtcDatetime
    reviewed_at: UtcDatetime | None
    resolved_at: UtcDatetime | None
