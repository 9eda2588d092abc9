from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quotedesk.core.db import get_db
from quotedesk.schemas.auth.auth_schemas import LoginRequest
from quotedesk.services.auth.auth_service import login_user, logout_user
from quotedesk.utils.get_user import get_current_user
from quotedesk.utils.response import success_response
from quotedesk.utils.logger import get_logger

logger = get_logger("auth.router")

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login")
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Login attempt", extra={"email": payload.email})

    tokens = await login_user(db, payload.email, payload.password)

    return success_response("Login successful", tokens)


@router.post("/logout")
async def logout(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user),
):
    logger.info(
        "Logout request",
        extra={"user_id": current_user.id, "email": current_user.username},
    )

    await logout_user(db, current_user)

    return success_response("Logged out successfully")
