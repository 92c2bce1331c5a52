"""Access guard for seller and order pages."""
import logging
from typing import Awaitable, Callable, Iterable, Optional

from fastapi import Request
from fastapi_users_db_sqlalchemy import SQLAlchemyUserDatabase
from fastapi_users_db_sqlalchemy.access_token import SQLAlchemyAccessTokenDatabase
from sqlalchemy.ext.asyncio import async_sessionmaker
from starlette.middleware.base import BaseHTTPMiddleware

from suq.auth import build_strategy
from suq.config import Settings
from suq.errors import login_redirect
from suq.models.user import AccessToken, User
from suq.schemas.auth import UserResponse
from suq.services.user_manager import UserManager

logger = logging.getLogger(__name__)

SessionLookup = Callable[[Optional[str]], Awaitable[Optional[UserResponse]]]


def is_protected(path: str, prefixes: Iterable[str]) -> bool:
    """True for ``prefix`` itself and anything below ``prefix/``."""
    for prefix in prefixes:
        prefix = prefix.rstrip("/")
        if path == prefix or path.startswith(prefix + "/"):
            return True
    return False


def session_lookup(session_factory: async_sessionmaker, settings: Settings) -> SessionLookup:
    """Resolve a session token to its active user using a fresh database session."""

    async def lookup(token: Optional[str]) -> Optional[UserResponse]:
        async with session_factory() as session:
            strategy = build_strategy(SQLAlchemyAccessTokenDatabase(session, AccessToken), settings)
            user_manager = UserManager(SQLAlchemyUserDatabase(session, User), settings)
            user = await strategy.read_token(token, user_manager)
            if user is None or not user.is_active:
                return None
            return UserResponse.model_validate(user)

    return lookup


class AccessGuardMiddleware(BaseHTTPMiddleware):
    """
    Redirect unauthenticated requests for protected paths to the login page.

    Every matched request does exactly one session lookup; results are not
    cached between requests. An authenticated user is attached to
    ``request.state.user``.
    """

    def __init__(
        self,
        app,
        lookup: SessionLookup,
        protected_paths: Iterable[str],
        cookie_name: str,
        login_path: str = "/auth",
    ):
        super().__init__(app)
        self.lookup = lookup
        self.protected_paths = tuple(protected_paths)
        self.cookie_name = cookie_name
        self.login_path = login_path

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if not is_protected(path, self.protected_paths):
            return await call_next(request)

        token = request.cookies.get(self.cookie_name)
        user = await self.lookup(token)
        if user is None:
            logger.info(f"No session for protected path {path}, redirecting to login")
            return login_redirect(self.login_path, path)

        request.state.user = user
        return await call_next(request)
