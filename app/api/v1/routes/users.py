# app/api/v1/routes/users.py
import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from app.core.auth import User, UserRead, UserUpdate
from app.core.database import get_async_session
from app.schemas.badge import BadgeRead
from app.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["User Management"])

# Only profile fields; saved_amount, streak and badges change through challenge completion
PROFILE_FIELDS = {"full_name"}

# 1) GET /users/me
@router.get("/me", response_model=UserRead)
async def read_own_profile(
    request: Request,
    user: User = Depends(get_current_user),
):
    """Current user's profile including saved_amount and streak"""
    return user

# 2) PATCH /users/me
@router.patch("/me", response_model=UserRead)
async def update_own_profile(
    user_update: UserUpdate,
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    update_dict = {
        field: value
        for field, value in user_update.model_dump(exclude_unset=True).items()
        if field in PROFILE_FIELDS
    }
    if not update_dict:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields provided for update"
        )

    user_id = uuid.UUID(str(user.id))
    try:
        await db.execute(
            update(User)
            .where(User.id == user_id)
            .values(**update_dict)
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Profile update failed for user {user.username}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database error occurred while updating profile"
        )

    result = await db.execute(
        select(User).where(User.id == user_id).execution_options(populate_existing=True)
    )
    return result.scalars().first()

# 3) GET /users/me/badges
@router.get("/me/badges", response_model=List[BadgeRead])
async def read_own_badges(
    request: Request,
    user: User = Depends(get_current_user),
):
    """Badges the current user has earned"""
    return list(user.badges)
