"""User and session models for authentication."""
from datetime import datetime

from bson import ObjectId
from fastapi_users_db_sqlalchemy import SQLAlchemyBaseUserTable
from fastapi_users_db_sqlalchemy.access_token import SQLAlchemyBaseAccessTokenTable
from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from suq.database import Base


def new_user_id() -> str:
    # Same encoding as catalog ids so a user id can be used as a sellerId
    return str(ObjectId())


class User(SQLAlchemyBaseUserTable[str], Base):
    """Registered marketplace user."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_user_id)
    name: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self):
        return f"<User(id='{self.id}', email='{self.email}')>"


class AccessToken(SQLAlchemyBaseAccessTokenTable[str], Base):
    """Server-side session referenced by the session cookie."""

    __tablename__ = "sessions"

    @declared_attr
    def user_id(cls) -> Mapped[str]:
        return mapped_column(
            String(24), ForeignKey("users.id", ondelete="cascade"), nullable=False
        )
