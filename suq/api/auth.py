"""Authentication API endpoints."""
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.security import OAuth2PasswordRequestForm
from fastapi_users.authentication import AuthenticationBackend
from fastapi_users.authentication.strategy import DatabaseStrategy
from fastapi_users_db_sqlalchemy.access_token import SQLAlchemyAccessTokenDatabase

from suq.auth import (
    clear_session_cookie,
    get_access_token_db,
    get_auth_backend,
    get_database_strategy,
    set_session_cookie,
)
from suq.errors import UnauthorizedError
from suq.models.user import User
from suq.schemas.auth import SessionResponse, SignInRequest, UserCreate, UserResponse
from suq.schemas.product import MessageResponse
from suq.services.user_manager import UserManager, get_user_manager

router = APIRouter(prefix="/api/auth", tags=["auth"])


async def _start_session(
    user: User,
    request: Request,
    response: Response,
    backend: AuthenticationBackend,
    strategy: DatabaseStrategy,
    user_manager: UserManager,
) -> SessionResponse:
    token = await strategy.write_token(user)
    set_session_cookie(response, backend.transport, token)
    await user_manager.on_after_login(user, request)
    return SessionResponse(
        user=UserResponse.model_validate(user),
        expires_at=datetime.now(timezone.utc) + timedelta(seconds=strategy.lifetime_seconds),
    )


@router.post("/sign-up/email", response_model=SessionResponse, status_code=201)
async def sign_up(
    payload: UserCreate,
    request: Request,
    response: Response,
    user_manager: UserManager = Depends(get_user_manager),
    backend: AuthenticationBackend = Depends(get_auth_backend),
    strategy: DatabaseStrategy = Depends(get_database_strategy),
):
    """
    Register with email and password.

    The new user is signed in straight away.
    """
    user = await user_manager.create(payload, safe=True, request=request)
    return await _start_session(user, request, response, backend, strategy, user_manager)


@router.post("/sign-in/email", response_model=SessionResponse)
async def sign_in(
    payload: SignInRequest,
    request: Request,
    response: Response,
    user_manager: UserManager = Depends(get_user_manager),
    backend: AuthenticationBackend = Depends(get_auth_backend),
    strategy: DatabaseStrategy = Depends(get_database_strategy),
):
    """Sign in with email and password."""
    credentials = OAuth2PasswordRequestForm(username=payload.email, password=payload.password)
    user = await user_manager.authenticate(credentials)
    if user is None or not user.is_active:
        raise UnauthorizedError("Invalid email or password")
    return await _start_session(user, request, response, backend, strategy, user_manager)


@router.post("/sign-out", response_model=MessageResponse)
async def sign_out(
    request: Request,
    response: Response,
    user_manager: UserManager = Depends(get_user_manager),
    backend: AuthenticationBackend = Depends(get_auth_backend),
    strategy: DatabaseStrategy = Depends(get_database_strategy),
):
    """End the current session. Safe to call without one."""
    token = request.cookies.get(backend.transport.cookie_name)
    user = await strategy.read_token(token, user_manager)
    if user is not None:
        await strategy.destroy_token(token, user)
    clear_session_cookie(response, backend.transport)
    return MessageResponse(message="Signed out successfully")


@router.get("/get-session", response_model=Optional[SessionResponse])
async def get_session(
    request: Request,
    user_manager: UserManager = Depends(get_user_manager),
    backend: AuthenticationBackend = Depends(get_auth_backend),
    strategy: DatabaseStrategy = Depends(get_database_strategy),
    access_token_db: SQLAlchemyAccessTokenDatabase = Depends(get_access_token_db),
):
    """Return the current session, or null when signed out."""
    token = request.cookies.get(backend.transport.cookie_name)
    user = await strategy.read_token(token, user_manager)
    if user is None or not user.is_active:
        return None

    access_token = await access_token_db.get_by_token(token)
    return SessionResponse(
        user=UserResponse.model_validate(user),
        expires_at=access_token.created_at + timedelta(seconds=strategy.lifetime_seconds),
    )
