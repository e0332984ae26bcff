# app/services/challenge_config.py
"""
Per-user challenge configuration: one config per user, created explicitly,
never deleted through this API.
"""
import logging
from typing import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    BadInputException,
    ChallengeConfigAlreadyExistsException,
    ChallengeConfigNotFoundException,
    ChallengeTypeConfigAlreadyExistsException,
    ChallengeTypeConfigNotFoundException,
)
from app.crud import challenge_config as crud_config
from app.models.challenge_config import ChallengeConfig, ChallengeTypeConfig
from app.schemas.challenge_config import (
    ChallengeConfigBase,
    ChallengeConfigCreate,
    ChallengeConfigUpdate,
    ChallengeTypeConfigCreate,
    ChallengeTypeConfigUpdate,
)
from app.services.users import resolve_user

logger = logging.getLogger(__name__)


def _validate_config(config_in: ChallengeConfigBase, type_names: Iterable[str]) -> None:
    if config_in.target_min > config_in.target_max:
        raise BadInputException("target_min must not exceed target_max")
    seen = set()
    for name in type_names:
        key = name.lower()
        if key in seen:
            raise BadInputException(f"challenge type '{name}' is listed more than once")
        seen.add(key)


async def _get_config(username: str, db: AsyncSession) -> ChallengeConfig:
    user = await resolve_user(username, db)
    config = await crud_config.get_config_for_user(user.id, db)
    if config is None:
        raise ChallengeConfigNotFoundException(username)
    return config


async def create_challenge_config(username: str, config_in: ChallengeConfigCreate, db: AsyncSession) -> ChallengeConfig:
    user = await resolve_user(username, db)
    _validate_config(config_in, (t.type for t in config_in.challenge_types))

    if await crud_config.get_config_for_user(user.id, db) is not None:
        logger.warning(f"Rejected second challenge config for user {username}")
        raise ChallengeConfigAlreadyExistsException(username)

    try:
        config = await crud_config.create_config_for_user(user.id, config_in, db)
    except IntegrityError:
        # Lost the race against a concurrent create for the same user
        await db.rollback()
        logger.warning(f"Concurrent challenge config create for user {username}")
        raise ChallengeConfigAlreadyExistsException(username)

    logger.info(f"Created challenge config for user {username}")
    return config


async def get_challenge_config(username: str, db: AsyncSession) -> ChallengeConfig:
    return await _get_config(username, db)


async def update_challenge_config(username: str, config_in: ChallengeConfigUpdate, db: AsyncSession) -> ChallengeConfig:
    config = await _get_config(username, db)
    _validate_config(config_in, (t.type for t in config_in.challenge_types or []))
    config = await crud_config.update_config(config, config_in, db)
    logger.info(f"Updated challenge config for user {username}")
    return config


async def add_challenge_type(username: str, type_in: ChallengeTypeConfigCreate, db: AsyncSession) -> ChallengeTypeConfig:
    config = await _get_config(username, db)
    if crud_config.find_type_config(config, type_in.type) is not None:
        raise ChallengeTypeConfigAlreadyExistsException(type_in.type)
    try:
        return await crud_config.add_type_config(config, type_in, db)
    except IntegrityError:
        await db.rollback()
        raise ChallengeTypeConfigAlreadyExistsException(type_in.type)


async def update_challenge_type(
    username: str,
    challenge_type: str,
    type_in: ChallengeTypeConfigUpdate,
    db: AsyncSession,
) -> ChallengeTypeConfig:
    config = await _get_config(username, db)
    type_config = crud_config.find_type_config(config, challenge_type)
    if type_config is None:
        raise ChallengeTypeConfigNotFoundException(challenge_type)
    if "specific_amount" in type_in.model_fields_set and type_in.specific_amount is None:
        raise BadInputException("specific_amount cannot be null")
    return await crud_config.update_type_config(type_config, type_in, db)


async def delete_challenge_type(username: str, challenge_type: str, db: AsyncSession) -> None:
    config = await _get_config(username, db)
    type_config = crud_config.find_type_config(config, challenge_type)
    if type_config is None:
        raise ChallengeTypeConfigNotFoundException(challenge_type)
    await crud_config.delete_type_config(config, type_config, db)
