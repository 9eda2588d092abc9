from sqlalchemy.ext.asyncio import AsyncSession

from quotedesk.core import config
from quotedesk.core.exceptions import PermissionDenied, SecurityCheckFailed
from quotedesk.core.security import (
    create_action_token,
    verify_action_token,
)
from quotedesk.constants.activity_codes import ActivityCode
from quotedesk.models.quotes.quote_models import Quote
from quotedesk.models.enums.quote_status import QuoteStatus, QuoteAction
from quotedesk.schemas.quotes.quote_schemas import (
    ActionTokenOut,
    QuoteActionResult,
)
from quotedesk.utils.activity_helpers import emit_activity, format_target_ids
from quotedesk.utils.check_roles import QUOTES_MANAGE, has_permission
from quotedesk.utils.logger import get_logger

logger = get_logger(__name__)


# =====================================================
# STATE MACHINE
# =====================================================

# action -> {current status -> new status}
ALLOWED_TRANSITIONS = {
    QuoteAction.APPROVE: {
        QuoteStatus.PENDING: QuoteStatus.APPROVED,
        QuoteStatus.REJECTED: QuoteStatus.APPROVED,
        QuoteStatus.APPROVED: QuoteStatus.APPROVED,
    },
    QuoteAction.REJECT: {
        QuoteStatus.PENDING: QuoteStatus.REJECTED,
        QuoteStatus.APPROVED: QuoteStatus.REJECTED,
        QuoteStatus.REJECTED: QuoteStatus.REJECTED,
    },
    QuoteAction.TRASH: {
        QuoteStatus.PENDING: QuoteStatus.TRASHED,
        QuoteStatus.APPROVED: QuoteStatus.TRASHED,
        QuoteStatus.REJECTED: QuoteStatus.TRASHED,
    },
    # Restore never brings back the pre-trash status
    QuoteAction.RESTORE: {
        QuoteStatus.TRASHED: QuoteStatus.PENDING,
    },
}

ACTIVITY_CODES = {
    QuoteAction.APPROVE: ActivityCode.APPROVE_QUOTES,
    QuoteAction.REJECT: ActivityCode.REJECT_QUOTES,
    QuoteAction.TRASH: ActivityCode.TRASH_QUOTES,
    QuoteAction.RESTORE: ActivityCode.RESTORE_QUOTES,
    QuoteAction.PURGE: ActivityCode.PURGE_QUOTES,
}


def resolve_transition(action: QuoteAction, current: QuoteStatus) -> QuoteStatus | None:
    """
    Status a record moves to when `action` is applied, or None when the
    transition is not allowed. Not used for purge, which removes the record.
    """
    return ALLOWED_TRANSITIONS.get(action, {}).get(current)


def can_purge(current: QuoteStatus) -> bool:
    if config.PURGE_REQUIRES_TRASH:
        return current == QuoteStatus.TRASHED
    return True


def _dedupe(ids: list[int]) -> list[int]:
    seen = set()
    ordered = []
    for quote_id in ids:
        if quote_id not in seen:
            seen.add(quote_id)
            ordered.append(quote_id)
    return ordered


def _ensure_can_moderate(current_user):
    if not has_permission(current_user, QUOTES_MANAGE):
        logger.warning("Moderation denied", extra={"user_id": current_user.id})
        raise PermissionDenied()


# =====================================================
# ACTION TOKEN
# =====================================================
def issue_action_token(
    action: QuoteAction,
    ids: list[int],
    current_user,
) -> ActionTokenOut:
    _ensure_can_moderate(current_user)

    return ActionTokenOut(
        token=create_action_token(current_user.username, action.value, ids),
        expires_in=config.ACTION_TOKEN_EXPIRE_MINUTES * 60,
    )


# =====================================================
# APPLY ACTION (single or bulk)
# =====================================================
async def apply_action(
    db: AsyncSession,
    action: QuoteAction,
    ids: list[int],
    token: str | None,
    current_user,
    view: str | None = None,
) -> QuoteActionResult:
    """
    Apply a moderation action to a batch of quotes.

    Permission and token checks run before anything is touched and abort the
    whole batch. After that the batch is best effort: unknown ids and
    disallowed transitions are skipped, and every record commits on its own.
    """

    _ensure_can_moderate(current_user)

    if not verify_action_token(token, current_user.username, action.value, ids):
        logger.warning(
            "Action token rejected",
            extra={"user_id": current_user.id, "action": action.value},
        )
        raise SecurityCheckFailed()

    processed: list[int] = []
    skipped: list[int] = []

    for quote_id in _dedupe(ids):
        quote = await db.get(Quote, quote_id)
        if quote is None:
            skipped.append(quote_id)
            continue

        if action == QuoteAction.PURGE:
            if not can_purge(quote.status):
                skipped.append(quote_id)
                continue
            await db.delete(quote)
        else:
            new_status = resolve_transition(action, quote.status)
            if new_status is None:
                skipped.append(quote_id)
                continue
            quote.status = new_status
            quote.updated_by_id = current_user.id

        await db.commit()
        processed.append(quote_id)

    if processed:
        await emit_activity(
            db=db,
            user_id=current_user.id,
            username=current_user.username,
            code=ACTIVITY_CODES[action],
            actor_role=current_user.role.capitalize(),
            actor_email=current_user.username,
            count=len(processed),
            target_ids=format_target_ids(processed),
        )
        await db.commit()

    logger.info(
        "Quote action applied",
        extra={
            "action": action.value,
            "processed": processed,
            "skipped": skipped,
            "user_id": current_user.id,
        },
    )

    redirect_status = QuoteStatus.TRASHED.value if action == QuoteAction.PURGE else view

    return QuoteActionResult(
        action=action,
        processed=processed,
        skipped=skipped,
        redirect_status=redirect_status,
    )
