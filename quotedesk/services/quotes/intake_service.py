from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from quotedesk.core.exceptions import AppException, SecurityCheckFailed
from quotedesk.core.security import verify_form_token
from quotedesk.constants.error_codes import ErrorCode
from quotedesk.constants.activity_codes import ActivityCode
from quotedesk.models.quotes.quote_models import Quote
from quotedesk.models.enums.quote_status import QuoteStatus
from quotedesk.schemas.quotes.quote_schemas import QuoteSubmission
from quotedesk.services.notifications.quote_mailer import (
    NO_NOTES_PLACEHOLDER,
    send_admin_notification,
)
from quotedesk.utils.activity_helpers import emit_activity
from quotedesk.utils.sanitize import (
    sanitize_email,
    sanitize_text_field,
    sanitize_textarea_field,
)
from quotedesk.utils.logger import get_logger

logger = get_logger(__name__)

PUBLIC_ACTOR = "public"


# =====================================================
# SUBMIT
# =====================================================
async def submit_quote(
    db: AsyncSession,
    payload: QuoteSubmission,
) -> Quote:
    """
    Accept a public quote request.
    Enforces:
    - valid form token (no record created otherwise)
    - name, email and service present after sanitizing
    The admin notification is best effort and never fails the submission.
    """

    if not verify_form_token(payload.form_token):
        logger.warning("Quote submission with invalid form token")
        raise SecurityCheckFailed()

    name = sanitize_text_field(payload.name)
    email = sanitize_email(payload.email)
    service = sanitize_text_field(payload.service)
    notes = sanitize_textarea_field(payload.notes) or NO_NOTES_PLACEHOLDER

    missing = [
        field
        for field, value in (("name", name), ("email", email), ("service", service))
        if not value
    ]
    if missing:
        logger.info("Quote submission rejected", extra={"missing": missing})
        raise AppException(
            422,
            "Please fill in all required fields.",
            ErrorCode.VALIDATION_ERROR,
            details={"fields": missing},
        )

    quote = Quote(
        title=name,
        content=notes,
        email=email,
        service=service,
        status=QuoteStatus.PENDING,
    )

    db.add(quote)
    await db.flush()  # ensure quote.id is available

    await emit_activity(
        db=db,
        user_id=None,
        username=PUBLIC_ACTOR,
        code=ActivityCode.QUOTE_SUBMITTED,
        requester_name=name,
        requester_email=email,
        service=service,
        target_id=quote.id,
    )

    await db.commit()
    await db.refresh(quote)

    logger.info("Quote submitted", extra={"quote_id": quote.id, "service": service})

    sent = await run_in_threadpool(send_admin_notification, name, email, service, notes)
    if not sent:
        logger.warning("Quote notification failed", extra={"quote_id": quote.id})

    return quote
