# app/api/v1/routes/badges.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.schemas.badge import BadgeRead
from app.crud.badge import get_badges
from app.core.database import get_async_session
from app.core.auth import User
from app.api.deps import get_current_user

router = APIRouter(prefix="/badges", tags=["badges"])

@router.get("", response_model=List[BadgeRead])
async def read_badges(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """The full badge catalog"""
    return await get_badges(db)
