# app/core/auth.py

import uuid
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from fastapi import Depends, Request
from fastapi_users import FastAPIUsers, BaseUserManager, UUIDIDMixin
from fastapi_users.authentication import (
    AuthenticationBackend,
    BearerTransport,
    JWTStrategy,
)
from fastapi_users.db import SQLAlchemyUserDatabase
from fastapi_users import schemas

from sqlalchemy import Column, String, Boolean, DateTime, Integer, Numeric, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.ext.asyncio import AsyncSession

from .database import Base, get_async_session
from .config import settings
# Register the mappers User relates to
from app.models.badge import user_badges
from app.models import challenge, challenge_config  # noqa: F401

logger = logging.getLogger(__name__)

JWT_AUDIENCE = ["fastapi-users:auth"]

# 1. User DB model
class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String(length=50), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_superuser = Column(Boolean, default=False, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)

    full_name = Column(String, nullable=True)

    # Aggregate fields, only mutated by challenge completion
    saved_amount = Column(Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    streak = Column(Integer, nullable=False, default=0)
    # Counts completions, not surviving rows; deleting a challenge leaves it alone
    completed_challenges = Column(Integer, nullable=False, default=0)
    streak_start = Column(DateTime(timezone=True), nullable=True)

    challenge_config = relationship(
        "ChallengeConfig",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    challenges = relationship(
        "Challenge",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    badges = relationship("Badge", secondary=user_badges, lazy="selectin")

    __table_args__ = (
        CheckConstraint("saved_amount >= 0", name="ck_users_saved_amount_non_negative"),
        CheckConstraint("streak >= 0", name="ck_users_streak_non_negative"),
        CheckConstraint("completed_challenges >= 0", name="ck_users_completed_challenges_non_negative"),
    )

# 2. Pydantic schemas
class UserRead(schemas.BaseUser[uuid.UUID]):
    username: str
    full_name: Optional[str] = None
    saved_amount: Decimal = Decimal("0.00")
    streak: int = 0
    completed_challenges: int = 0
    streak_start: Optional[datetime] = None

class UserCreate(schemas.BaseUserCreate):
    username: str
    full_name: Optional[str] = None

class UserUpdate(schemas.BaseUserUpdate):
    full_name: Optional[str] = None

# 3. User Manager
class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.SECRET_KEY
    verification_token_secret = settings.SECRET_KEY

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        logger.info(f"User {user.username} ({user.email}) has registered")

    async def on_after_forgot_password(self, user: User, token: str, request: Optional[Request] = None):
        logger.info(f"Password reset requested for user {user.username}")

    async def on_after_reset_password(self, user: User, request: Optional[Request] = None):
        logger.info(f"Password reset completed for user {user.username}")

# 4. User Database
async def get_user_db(session: AsyncSession = Depends(get_async_session)):
    yield SQLAlchemyUserDatabase(session, User)

# 5. User Manager dependency
async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)

# 6. Authentication
bearer_transport = BearerTransport(tokenUrl="/api/v1/auth/jwt/login")

def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(
        secret=settings.SECRET_KEY,
        lifetime_seconds=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        token_audience=JWT_AUDIENCE,
    )

auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

# 7. FastAPI Users instance
fastapi_users = FastAPIUsers[User, uuid.UUID](get_user_manager, [auth_backend])

# 8. Current user dependency
current_active_user = fastapi_users.current_user(active=True)

__all__ = [
    "fastapi_users",
    "auth_backend",
    "current_active_user",
    "get_user_db",
    "get_user_manager",
    "User",
    "UserRead",
    "UserCreate",
    "UserUpdate",
    "JWT_AUDIENCE",
]
