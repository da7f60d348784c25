from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["tenant", "landlord", "agent", "admin", "superadmin"]


class ApiKeyIssue(BaseModel):
    user_id: str = Field(min_length=1, max_length=120)
    role: Role


class ApiKeyIssuedOut(BaseModel):
    api_key_id: str
    user_id: str
    role: str
    plain_key: str


class MeOut(BaseModel):
    api_key_id: str
    user_id: str
    role: str
