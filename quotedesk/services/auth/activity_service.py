# quotedesk/services/auth/activity_service.py

import math

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, desc, asc

from quotedesk.models.support.activity_models import UserActivity
from quotedesk.schemas.auth.activity_schemas import (
    UserActivityOut,
    UserActivityFilters,
)
from quotedesk.core.exceptions import AppException
from quotedesk.constants.activity_codes import ActivityCode
from quotedesk.constants.error_codes import ErrorCode
from quotedesk.utils.logger import get_logger

logger = get_logger(__name__)

ALLOWED_SORT_FIELDS = {
    "created_at": UserActivity.created_at,
    "username": UserActivity.username_snapshot,
    "code": UserActivity.code,
}


async def list_user_activities(
    *,
    db: AsyncSession,
    filters: UserActivityFilters,
):
    """Audit feed, newest first by default. Filters combine with AND."""

    conditions = []

    if filters.user_id:
        conditions.append(UserActivity.user_id == filters.user_id)

    if filters.username:
        conditions.append(
            UserActivity.username_snapshot.ilike(f"%{filters.username}%")
        )

    if filters.code:
        try:
            code = ActivityCode(filters.code.strip().upper())
        except ValueError:
            raise AppException(
                400,
                "Invalid activity code",
                ErrorCode.VALIDATION_ERROR,
                details={"allowed": [c.value for c in ActivityCode]},
            )
        conditions.append(UserActivity.code == code.value)

    sort_column = ALLOWED_SORT_FIELDS.get(filters.sort_by)
    if sort_column is None:
        raise AppException(
            400,
            "Invalid sort field",
            ErrorCode.VALIDATION_ERROR,
        )

    order_fn = desc if filters.sort_order == "desc" else asc

    total = await db.scalar(
        select(func.count(UserActivity.id)).where(*conditions)
    ) or 0

    result = await db.execute(
        select(UserActivity)
        .where(*conditions)
        .order_by(order_fn(sort_column), order_fn(UserActivity.id))
        .limit(filters.page_size)
        .offset((filters.page - 1) * filters.page_size)
    )
    activities = result.scalars().all()

    logger.info(
        "User activities fetched",
        extra={
            "total": total,
            "page": filters.page,
            "page_size": filters.page_size,
        },
    )

    return {
        "total": total,
        "total_pages": math.ceil(total / filters.page_size),
        "page": filters.page,
        "page_size": filters.page_size,
        "items": [UserActivityOut.model_validate(a) for a in activities],
    }
