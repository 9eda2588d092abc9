from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quotedesk.core.config import ACCESS_TOKEN_EXPIRE_MINUTES
from quotedesk.core.exceptions import AppException
from quotedesk.core.security import verify_password, create_access_token
from quotedesk.constants.error_codes import ErrorCode
from quotedesk.constants.activity_codes import ActivityCode
from quotedesk.models.users.user_models import User
from quotedesk.utils.activity_helpers import emit_activity
from quotedesk.utils.logger import get_logger

logger = get_logger("auth.service")


# =====================================================
# LOGIN
# =====================================================
async def login_user(db: AsyncSession, email: str, password: str):
    logger.info("Authenticating user", extra={"email": email})

    result = await db.execute(
        select(User).where(User.username == email.lower())
    )
    user = result.scalars().first()

    if not user or not verify_password(password, user.password_hash):
        logger.warning("Invalid credentials", extra={"email": email})
        raise AppException(
            401,
            "Invalid credentials",
            ErrorCode.INVALID_CREDENTIALS,
        )

    if not user.is_active:
        logger.warning("Inactive user login blocked", extra={"email": email})
        raise AppException(
            403,
            "User account is inactive",
            ErrorCode.USER_INACTIVE,
        )

    user.last_login = datetime.now(timezone.utc)

    access_token = create_access_token(
        subject=user.username,
        token_version=user.token_version,
    )

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.username,
        code=ActivityCode.LOGIN,
        actor_role=user.role.capitalize(),
        actor_email=user.username,
    )

    await db.commit()

    logger.info("Login successful", extra={"user_id": user.id})

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        "user": {
            "id": user.id,
            "email": user.username,
            "role": user.role,
        },
    }


# =====================================================
# LOGOUT
# =====================================================
async def logout_user(db: AsyncSession, user: User):
    # Bumping the version revokes every access token issued so far
    user.token_version += 1

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.username,
        code=ActivityCode.LOGOUT,
        actor_role=user.role.capitalize(),
        actor_email=user.username,
    )

    await db.commit()

    logger.info("Logout successful", extra={"user_id": user.id})
