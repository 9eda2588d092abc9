from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quotedesk.core.config import FORM_TOKEN_EXPIRE_MINUTES, QUOTES_PER_PAGE
from quotedesk.core.db import get_db
from quotedesk.core.security import create_form_token
from quotedesk.models.enums.quote_status import QuoteAction, QuoteStatus
from quotedesk.schemas.quotes.quote_schemas import (
    ActionTokenRequest,
    FormTokenOut,
    QuoteActionRequest,
    QuoteListFilters,
    QuoteOut,
    QuoteRestoreRequest,
    QuoteSubmission,
    QuoteUpdate,
)
from quotedesk.services.quotes.intake_service import submit_quote
from quotedesk.services.quotes.lifecycle_service import apply_action, issue_action_token
from quotedesk.services.quotes.moderation_queue_service import (
    counts_by_status,
    get_quote,
    list_quotes,
    update_quote,
)
from quotedesk.utils.check_roles import QUOTES_MANAGE, require_permission
from quotedesk.utils.response import APIResponse, success_response
from quotedesk.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/quotes", tags=["Quotes"])


# =====================================================
# PUBLIC
# =====================================================
@router.get("/form-token", response_model=APIResponse)
async def form_token_api():
    return success_response(
        "Form token issued",
        FormTokenOut(
            form_token=create_form_token(),
            expires_in=FORM_TOKEN_EXPIRE_MINUTES * 60,
        ),
    )


@router.post("/submit", response_model=APIResponse)
async def submit_quote_api(
    payload: QuoteSubmission,
    db: AsyncSession = Depends(get_db),
):
    quote = await submit_quote(db, payload)

    return success_response(
        "Thank you! Your quote has been submitted.",
        {"id": quote.id},
    )


# =====================================================
# MODERATION QUEUE
# =====================================================
@router.get("/", response_model=APIResponse)
async def list_quotes_api(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_permission(QUOTES_MANAGE)),

    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None),
    sort_order: Optional[str] = Query(None),

    page: int = Query(1, ge=1),
    per_page: int = Query(QUOTES_PER_PAGE, ge=1, le=999),
):
    filters = QuoteListFilters(
        status=status,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        per_page=per_page,
    )

    return success_response(
        "Quotes retrieved successfully",
        await list_quotes(db, filters),
    )


@router.get("/counts", response_model=APIResponse)
async def quote_counts_api(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_permission(QUOTES_MANAGE)),
):
    return success_response(
        "Quote counts retrieved successfully",
        await counts_by_status(db),
    )


# =====================================================
# LIFECYCLE
# =====================================================
@router.post("/action-token", response_model=APIResponse)
async def action_token_api(
    payload: ActionTokenRequest,
    current_user=Depends(require_permission(QUOTES_MANAGE)),
):
    return success_response(
        "Action token issued",
        issue_action_token(payload.action, payload.ids, current_user),
    )


@router.post("/bulk-action", response_model=APIResponse)
async def bulk_action_api(
    payload: QuoteActionRequest,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_permission(QUOTES_MANAGE)),
):
    result = await apply_action(
        db,
        payload.action,
        payload.ids,
        payload.token,
        current_user,
        view=payload.view,
    )

    return success_response(
        f"{len(result.processed)} quote(s) updated",
        result,
    )


@router.post("/{quote_id}/restore", response_model=APIResponse)
async def restore_quote_api(
    quote_id: int,
    payload: QuoteRestoreRequest,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_permission(QUOTES_MANAGE)),
):
    result = await apply_action(
        db,
        QuoteAction.RESTORE,
        [quote_id],
        payload.token,
        current_user,
    )
    # Single-row restore always lands on the pending view
    result.redirect_status = QuoteStatus.PENDING.value

    return success_response(
        "Quote restored" if result.processed else "Quote was not restored",
        result,
    )


# =====================================================
# SINGLE QUOTE
# =====================================================
@router.get("/{quote_id}", response_model=APIResponse)
async def get_quote_api(
    quote_id: int,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_permission(QUOTES_MANAGE)),
):
    quote = await get_quote(db, quote_id)

    return success_response(
        "Quote retrieved successfully",
        QuoteOut.model_validate(quote),
    )


@router.patch("/{quote_id}", response_model=APIResponse)
async def update_quote_api(
    quote_id: int,
    payload: QuoteUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_permission(QUOTES_MANAGE)),
):
    quote = await update_quote(db, quote_id, payload, current_user)

    return success_response(
        "Quote updated successfully",
        QuoteOut.model_validate(quote),
    )
