from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from quotedesk.models.support.activity_models import UserActivity
from quotedesk.constants.activity_templates import ACTIVITY_TEMPLATES
from quotedesk.constants.activity_codes import ActivityCode
from quotedesk.utils.logger import get_logger

logger = get_logger(__name__)


def format_target_ids(ids: Iterable[int]) -> str:
    return ", ".join(f"#{i}" for i in ids)


async def emit_activity(
    db: AsyncSession,
    *,
    user_id: int | None,
    username: str,
    code: ActivityCode,
    **context,
):
    """
    Render the template for `code` and stage it on the session.
    The caller commits, so the entry lands with the change it describes.
    """
    template = ACTIVITY_TEMPLATES.get(code)
    if not template:
        raise ValueError(f"No activity template for code {code}")

    try:
        message = template.format(**context)
    except KeyError as e:
        raise ValueError(
            f"Missing activity context key: {e.args[0]} for {code}"
        )

    db.add(
        UserActivity(
            user_id=user_id,
            username_snapshot=username,
            code=code.value,
            message=message,
        )
    )
    logger.debug("Activity staged", extra={"code": code.value, "user_id": user_id})
