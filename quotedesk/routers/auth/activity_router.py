# quotedesk/routers/auth/activity_router.py

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quotedesk.core.db import get_db
from quotedesk.schemas.auth.activity_schemas import UserActivityFilters
from quotedesk.services.auth.activity_service import list_user_activities
from quotedesk.utils.check_roles import require_role
from quotedesk.utils.response import APIResponse, success_response
from quotedesk.utils.logger import get_logger

router = APIRouter(prefix="/activities", tags=["User Activities"])
logger = get_logger(__name__)


@router.get("/", response_model=APIResponse)
async def list_user_activities_api(
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_role(["admin"])),

    user_id: Optional[int] = Query(None),
    username: Optional[str] = Query(None),
    code: Optional[str] = Query(None, description="Activity code, e.g. APPROVE_QUOTES"),

    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),

    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc"),
):
    filters = UserActivityFilters(
        user_id=user_id,
        username=username,
        code=code,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_order=sort_order,
    )

    logger.info(
        "List user activities requested",
        extra=filters.model_dump(exclude_none=True),
    )

    result = await list_user_activities(db=db, filters=filters)

    return success_response(
        "User activities fetched successfully",
        result,
    )
