from pydantic import BaseModel, ConfigDict

from app.schemas.common import UtcDatetime
from app.schemas.listing import ListingOut


class AuditLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    actor_id: str | None
    actor_role: str | None
    action: str
    target_type: str | None
    target_id: str | None
    ip_address: str | None
    detail: dict
    created_at: UtcDatetime


class AdminStatsOut(BaseModel):
    available_listings: int
    deactivated_listings: int
    pending_reports: int
    recent_listings: list[ListingOut]
