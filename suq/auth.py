"""Authentication backend: session cookie plus server-side access tokens."""
from fastapi import Depends, Request, Response
from fastapi_users.authentication import (
    AuthenticationBackend,
    CookieTransport,
)
from fastapi_users.authentication.strategy import DatabaseStrategy
from fastapi_users_db_sqlalchemy.access_token import SQLAlchemyAccessTokenDatabase
from sqlalchemy.ext.asyncio import AsyncSession

from suq.config import Settings
from suq.database import get_async_session
from suq.models.user import AccessToken


def build_cookie_transport(settings: Settings) -> CookieTransport:
    return CookieTransport(
        cookie_name=settings.session_cookie_name,
        cookie_max_age=settings.session_ttl_seconds,
        cookie_secure=settings.secure_cookies,
        cookie_httponly=True,
        cookie_samesite="lax",
    )


def build_strategy(
    access_token_db: SQLAlchemyAccessTokenDatabase, settings: Settings
) -> DatabaseStrategy:
    """Tokens older than the session lifetime are no longer accepted."""
    return DatabaseStrategy(access_token_db, lifetime_seconds=settings.session_ttl_seconds)


async def get_access_token_db(session: AsyncSession = Depends(get_async_session)):
    yield SQLAlchemyAccessTokenDatabase(session, AccessToken)


def get_database_strategy(
    request: Request,
    access_token_db: SQLAlchemyAccessTokenDatabase = Depends(get_access_token_db),
) -> DatabaseStrategy:
    return build_strategy(access_token_db, request.app.state.settings)


def build_auth_backend(settings: Settings) -> AuthenticationBackend:
    return AuthenticationBackend(
        name="cookie",
        transport=build_cookie_transport(settings),
        get_strategy=get_database_strategy,
    )


def get_auth_backend(request: Request) -> AuthenticationBackend:
    return request.app.state.auth_backend


def set_session_cookie(response: Response, transport: CookieTransport, token: str) -> None:
    response.set_cookie(
        transport.cookie_name,
        token,
        max_age=transport.cookie_max_age,
        path=transport.cookie_path,
        domain=transport.cookie_domain,
        secure=transport.cookie_secure,
        httponly=transport.cookie_httponly,
        samesite=transport.cookie_samesite,
    )


def clear_session_cookie(response: Response, transport: CookieTransport) -> None:
    response.delete_cookie(
        transport.cookie_name,
        path=transport.cookie_path,
        domain=transport.cookie_domain,
        secure=transport.cookie_secure,
        httponly=transport.cookie_httponly,
        samesite=transport.cookie_samesite,
    )
