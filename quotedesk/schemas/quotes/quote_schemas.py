from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from quotedesk.models.enums.quote_status import QuoteStatus, QuoteAction


# =========================
# PUBLIC SUBMISSION
# =========================
class QuoteSubmission(BaseModel):
    # Raw form values; sanitized and validated by the intake service
    name: Optional[str] = None
    email: Optional[str] = None
    service: Optional[str] = None
    notes: Optional[str] = None
    form_token: Optional[str] = None


class FormTokenOut(BaseModel):
    form_token: str
    expires_in: int


# =========================
# EDIT
# =========================
class QuoteUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


# =========================
# LIST FILTERS
# =========================
class QuoteListFilters(BaseModel):
    status: Optional[str] = None
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    page: int = Field(1, ge=1)
    per_page: int = Field(10, ge=1)


# =========================
# LIFECYCLE ACTIONS
# =========================
class ActionTokenRequest(BaseModel):
    action: QuoteAction
    ids: list[int] = Field(min_length=1)


class ActionTokenOut(BaseModel):
    token: str
    expires_in: int


class QuoteActionRequest(BaseModel):
    action: QuoteAction
    ids: list[int] = Field(min_length=1)
    token: Optional[str] = None
    view: Optional[str] = None


class QuoteRestoreRequest(BaseModel):
    token: Optional[str] = None


class QuoteActionResult(BaseModel):
    action: QuoteAction
    processed: list[int]
    skipped: list[int]
    redirect_status: Optional[str]


# =========================
# RESPONSE SCHEMAS
# =========================
class QuoteOut(BaseModel):
    id: int
    title: str
    content: str
    email: str
    service: str
    status: QuoteStatus
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class QuoteCounts(BaseModel):
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    trashed: int = 0
    all: int = 0


class QuoteListData(BaseModel):
    items: list[QuoteOut]
    total_count: int
    total_pages: int
    page: int
    per_page: int
    view: str
    counts: QuoteCounts
    bulk_actions: list[QuoteAction]
