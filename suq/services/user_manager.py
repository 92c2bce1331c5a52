"""User manager for registration, sign-in and password rules."""
import logging
from typing import Any, Optional, Union

from fastapi import Depends, Request
from fastapi_users import BaseUserManager, exceptions
from fastapi_users_db_sqlalchemy import SQLAlchemyUserDatabase
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from suq.config import Settings
from suq.database import get_async_session
from suq.models.product import is_object_id
from suq.models.user import User
from suq.schemas.auth import UserCreate

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 8


class ObjectIdIDMixin:
    """User ids are 24-hex strings, the same encoding as catalog ids."""

    def parse_id(self, value: Any) -> str:
        if not is_object_id(value):
            raise exceptions.InvalidID()
        return str(value)


class UserManager(ObjectIdIDMixin, BaseUserManager[User, str]):
    def __init__(self, user_db: SQLAlchemyUserDatabase, settings: Settings):
        super().__init__(user_db)
        self.reset_password_token_secret = settings.secret_key
        self.verification_token_secret = settings.secret_key

    async def validate_password(self, password: str, user: Union[UserCreate, User]) -> None:
        if len(password) < PASSWORD_MIN_LENGTH:
            raise exceptions.InvalidPasswordException(
                reason=f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
            )
        if not any(c.isupper() for c in password):
            raise exceptions.InvalidPasswordException(
                reason="Password must contain one uppercase letter"
            )
        if not any(c.isdigit() for c in password):
            raise exceptions.InvalidPasswordException(
                reason="Password must contain one number"
            )
        if password.isalnum():
            raise exceptions.InvalidPasswordException(
                reason="Password must contain one special character"
            )

    async def create(
        self,
        user_create: UserCreate,
        safe: bool = False,
        request: Optional[Request] = None,
    ) -> User:
        """
        Register a user.

        The email lookup and the insert are not atomic; when a concurrent
        sign-up wins the race the unique index rejects this one, which is
        reported the same way as a known duplicate.
        """
        try:
            return await super().create(user_create, safe=safe, request=request)
        except IntegrityError as exc:
            await self.user_db.session.rollback()
            logger.warning("Concurrent sign-up hit the unique email index")
            raise exceptions.UserAlreadyExists() from exc

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        logger.info(f"Registered user {user.id}")

    async def on_after_login(
        self, user: User, request: Optional[Request] = None, response=None
    ):
        logger.info(f"User {user.id} signed in")


async def get_user_db(session: AsyncSession = Depends(get_async_session)):
    """Get user database."""
    yield SQLAlchemyUserDatabase(session, User)


async def get_user_manager(request: Request, user_db=Depends(get_user_db)):
    yield UserManager(user_db, request.app.state.settings)
