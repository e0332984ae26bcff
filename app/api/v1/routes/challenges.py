# app/api/v1/routes/challenges.py
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging
import uuid

from app.schemas.challenge import ChallengeCreate, ChallengePage, ChallengeRead, ChallengeUpdate
from app.services import challenges as challenge_service
from app.core.config import settings
from app.core.database import get_async_session
from app.core.auth import User
from app.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/challenges", tags=["challenges"])

# Fixed paths are declared before /{challenge_id} so they are not parsed as ids

@router.get("", response_model=ChallengePage)
async def read_challenges(
    request: Request,
    page: int = Query(0, ge=0),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await challenge_service.list_challenges(user.username, db, page=page, size=size)

@router.get("/active", response_model=ChallengePage)
async def read_active_challenges(
    request: Request,
    page: int = Query(0, ge=0),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await challenge_service.list_active_challenges(user.username, db, page=page, size=size)

@router.get("/completed", response_model=ChallengePage)
async def read_completed_challenges(
    request: Request,
    page: int = Query(0, ge=0),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await challenge_service.list_completed_challenges(user.username, db, page=page, size=size)

@router.get("/generate", response_model=List[ChallengeCreate])
async def generate_challenges(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    Propose challenges from the current user's challenge config.

    Nothing is saved; POST one of the proposals to /challenges to accept it.
    """
    logger.info(f"Generating challenges for user {user.username}")
    return await challenge_service.get_generated_challenges(user.username, db)

@router.post("", response_model=ChallengeRead, status_code=status.HTTP_201_CREATED)
async def create_challenge(
    challenge_in: ChallengeCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await challenge_service.create_challenge(challenge_in, user.username, db)

@router.get("/{challenge_id}", response_model=ChallengeRead)
async def read_challenge(
    challenge_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await challenge_service.get_challenge(challenge_id, user.username, db)

@router.put("/{challenge_id}", response_model=ChallengeRead)
async def update_challenge(
    challenge_id: uuid.UUID,
    challenge_in: ChallengeUpdate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await challenge_service.update_challenge(challenge_id, challenge_in, user.username, db)

@router.put("/{challenge_id}/complete", response_model=ChallengeRead)
async def complete_challenge(
    challenge_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Mark a challenge completed and credit its saved amount to the user (once)."""
    return await challenge_service.complete_challenge(challenge_id, user.username, db)

@router.delete("/{challenge_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_challenge(
    challenge_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    await challenge_service.delete_challenge(challenge_id, user.username, db)
    return None
