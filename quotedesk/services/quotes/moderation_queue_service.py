import math

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, asc, desc

from quotedesk.core.exceptions import AppException, QuoteNotFound
from quotedesk.constants.error_codes import ErrorCode
from quotedesk.constants.activity_codes import ActivityCode
from quotedesk.models.quotes.quote_models import Quote
from quotedesk.models.enums.quote_status import QuoteStatus, QuoteAction
from quotedesk.services.notifications.quote_mailer import NO_NOTES_PLACEHOLDER
from quotedesk.schemas.quotes.quote_schemas import (
    QuoteCounts,
    QuoteListData,
    QuoteListFilters,
    QuoteOut,
    QuoteUpdate,
)
from quotedesk.utils.activity_helpers import emit_activity
from quotedesk.utils.sanitize import sanitize_text_field, sanitize_textarea_field
from quotedesk.utils.logger import get_logger

logger = get_logger(__name__)

ALL_VIEW = "all"

ALLOWED_SORT_FIELDS = {
    "title": Quote.title,
    "date": Quote.created_at,
}

TRASH_BULK_ACTIONS = [QuoteAction.RESTORE, QuoteAction.PURGE]
DEFAULT_BULK_ACTIONS = [QuoteAction.APPROVE, QuoteAction.REJECT, QuoteAction.TRASH]


# =====================================================
# HELPERS
# =====================================================

def _detect_changes(model, updates: dict) -> list[str]:
    changes: list[str] = []
    for field, new_value in updates.items():
        old_value = getattr(model, field)
        if old_value != new_value:
            changes.append(f"{field}: {old_value} → {new_value}")
    return changes


def resolve_view(status: str | None) -> QuoteStatus | None:
    """A recognised status filters to exactly that status; anything else means the default view."""
    return QuoteStatus.parse(status)


def bulk_actions_for_view(view: QuoteStatus | None) -> list[QuoteAction]:
    if view == QuoteStatus.TRASHED:
        return list(TRASH_BULK_ACTIONS)
    return list(DEFAULT_BULK_ACTIONS)


def _ordering(sort_by: str | None, sort_order: str | None):
    sort_column = ALLOWED_SORT_FIELDS.get((sort_by or "").lower(), Quote.created_at)
    order_fn = asc if (sort_order or "").lower() == "asc" else desc
    return order_fn(sort_column), order_fn(Quote.id)


# =====================================================
# COUNTS
# =====================================================
async def counts_by_status(db: AsyncSession) -> QuoteCounts:
    result = await db.execute(
        select(Quote.status, func.count(Quote.id)).group_by(Quote.status)
    )
    counts = {status.value: 0 for status in QuoteStatus}
    for status, count in result.all():
        counts[QuoteStatus(status).value] = count

    return QuoteCounts(
        **counts,
        all=sum(counts[s.value] for s in QuoteStatus.active()),
    )


# =====================================================
# LIST
# =====================================================
async def list_quotes(
    db: AsyncSession,
    filters: QuoteListFilters,
) -> QuoteListData:

    view = resolve_view(filters.status)

    base = select(Quote)
    if view is not None:
        base = base.where(Quote.status == view)
    else:
        base = base.where(Quote.status.in_(QuoteStatus.active()))

    search = (filters.search or "").strip()
    if search:
        # autoescape keeps % and _ literal
        base = base.where(
            or_(
                Quote.title.icontains(search, autoescape=True),
                Quote.content.icontains(search, autoescape=True),
            )
        )

    total = await db.scalar(
        select(func.count()).select_from(base.subquery())
    ) or 0

    result = await db.execute(
        base.order_by(*_ordering(filters.sort_by, filters.sort_order))
        .offset((filters.page - 1) * filters.per_page)
        .limit(filters.per_page)
    )
    quotes = result.scalars().all()

    logger.info(
        "Quotes fetched",
        extra={
            "view": view.value if view else ALL_VIEW,
            "total": total,
            "page": filters.page,
            "per_page": filters.per_page,
        },
    )

    return QuoteListData(
        items=[QuoteOut.model_validate(q) for q in quotes],
        total_count=total,
        total_pages=math.ceil(total / filters.per_page),
        page=filters.page,
        per_page=filters.per_page,
        view=view.value if view else ALL_VIEW,
        counts=await counts_by_status(db),
        bulk_actions=bulk_actions_for_view(view),
    )


# =====================================================
# GET BY ID
# =====================================================
async def get_quote(db: AsyncSession, quote_id: int) -> Quote:
    quote = await db.get(Quote, quote_id)
    if not quote:
        raise QuoteNotFound(quote_id)
    return quote


# =====================================================
# UPDATE CONTENT
# =====================================================
async def update_quote(
    db: AsyncSession,
    quote_id: int,
    payload: QuoteUpdate,
    current_user,
) -> Quote:
    """Edit title and notes. Status is never touched here."""

    quote = await get_quote(db, quote_id)

    updates = {}
    if payload.title is not None:
        title = sanitize_text_field(payload.title)
        if not title:
            raise AppException(422, "Title cannot be empty", ErrorCode.VALIDATION_ERROR)
        updates["title"] = title
    if payload.content is not None:
        updates["content"] = sanitize_textarea_field(payload.content) or NO_NOTES_PLACEHOLDER

    if not updates:
        raise AppException(400, "No changes provided", ErrorCode.NO_CHANGES)

    changes = _detect_changes(quote, updates)
    if not changes:
        raise AppException(400, "No actual changes detected", ErrorCode.NO_CHANGES)

    for k, v in updates.items():
        setattr(quote, k, v)

    quote.updated_by_id = current_user.id

    await emit_activity(
        db=db,
        user_id=current_user.id,
        username=current_user.username,
        code=ActivityCode.UPDATE_QUOTE,
        actor_role=current_user.role.capitalize(),
        actor_email=current_user.username,
        target_id=quote.id,
        changes=", ".join(changes),
    )

    await db.commit()
    await db.refresh(quote)

    return quote
