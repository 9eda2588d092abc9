# quotedesk/routers/__init__.py

from .auth.auth_router import router as auth_router
from .auth.activity_router import router as activity_router

from .quotes.quote_router import router as quote_router


__all__ = [
"auth_router",
"activity_router",

"quote_router",
]
