from fastapi import Depends

from quotedesk.core.exceptions import PermissionDenied
from quotedesk.utils.get_user import get_current_user
from quotedesk.models.users.user_models import User

QUOTES_MANAGE = "quotes.manage"

ROLE_PERMISSIONS = {
    "admin": {QUOTES_MANAGE},
    "editor": {QUOTES_MANAGE},
    "viewer": set(),
}

VALID_ROLES = set(ROLE_PERMISSIONS)


def has_permission(user: User, *permissions: str) -> bool:
    allowed = ROLE_PERMISSIONS.get((user.role or "").lower(), set())
    return set(permissions).issubset(allowed)


def require_role(roles: list[str]):
    async def role_checker(user: User = Depends(get_current_user)):
        if user.role.lower() not in [r.lower() for r in roles]:
            raise PermissionDenied("Permission denied")
        return user
    return role_checker


def require_permission(*permissions: str):
    async def permission_checker(user: User = Depends(get_current_user)):
        if not has_permission(user, *permissions):
            raise PermissionDenied()
        return user
    return permission_checker
