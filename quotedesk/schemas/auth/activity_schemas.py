# quotedesk/schemas/auth/activity_schemas.py

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class UserActivityFilters(BaseModel):
    user_id: Optional[int] = None
    username: Optional[str] = None
    code: Optional[str] = None

    page: int = 1
    page_size: int = 20

    sort_by: str = "created_at"
    sort_order: str = "desc"


class UserActivityOut(BaseModel):
    id: int
    user_id: Optional[int]
    username_snapshot: str
    code: str
    message: str
    created_at: datetime

    class Config:
        from_attributes = True
