# app/api/v1/routes/challenge_config.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.challenge_config import (
    ChallengeConfigCreate,
    ChallengeConfigRead,
    ChallengeConfigUpdate,
    ChallengeTypeConfigCreate,
    ChallengeTypeConfigRead,
    ChallengeTypeConfigUpdate,
)
from app.services import challenge_config as config_service
from app.core.database import get_async_session
from app.core.auth import User
from app.api.deps import get_current_user

router = APIRouter(prefix="/users/me/config/challenge", tags=["challenge config"])

@router.post("", response_model=ChallengeConfigRead, status_code=status.HTTP_201_CREATED)
async def create_config(
    config_in: ChallengeConfigCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Create the current user's challenge config. A user has at most one."""
    return await config_service.create_challenge_config(user.username, config_in, db)

@router.get("", response_model=ChallengeConfigRead)
async def read_config(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await config_service.get_challenge_config(user.username, db)

@router.put("", response_model=ChallengeConfigRead)
async def update_config(
    config_in: ChallengeConfigUpdate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    Replace motivation and the target range.

    - **challenge_types**: omitted or null keeps the existing type configs,
      a list (possibly empty) replaces them
    """
    return await config_service.update_challenge_config(user.username, config_in, db)

@router.post("/types", response_model=ChallengeTypeConfigRead, status_code=status.HTTP_201_CREATED)
async def add_type(
    type_in: ChallengeTypeConfigCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await config_service.add_challenge_type(user.username, type_in, db)

@router.put("/types/{challenge_type}", response_model=ChallengeTypeConfigRead)
async def update_type(
    challenge_type: str,
    type_in: ChallengeTypeConfigUpdate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await config_service.update_challenge_type(user.username, challenge_type, type_in, db)

@router.delete("/types/{challenge_type}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_type(
    challenge_type: str,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    await config_service.delete_challenge_type(user.username, challenge_type, db)
    return None
