from pydantic import BaseModel, ConfigDict

from app.schemas.common import UtcDatetime


class NotificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    role: str
    message: str
    meta: dict
    is_read: bool
    created_at: UtcDatetime
    expires_at: UtcDatetime
