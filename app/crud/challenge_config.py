# app/crud/challenge_config.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.challenge_config import ChallengeConfig, ChallengeTypeConfig
from app.schemas.challenge_config import (
    ChallengeConfigCreate,
    ChallengeConfigUpdate,
    ChallengeTypeConfigCreate,
    ChallengeTypeConfigUpdate,
)
from typing import Optional
import uuid

async def get_config_for_user(user_id: uuid.UUID, db: AsyncSession) -> Optional[ChallengeConfig]:
    result = await db.execute(select(ChallengeConfig).where(ChallengeConfig.user_id == user_id))
    return result.scalar_one_or_none()

async def create_config_for_user(user_id: uuid.UUID, config_in: ChallengeConfigCreate, db: AsyncSession) -> ChallengeConfig:
    """Insert a config; a concurrent insert for the same user fails on commit with IntegrityError."""
    config = ChallengeConfig(
        user_id=user_id,
        motivation=config_in.motivation,
        target_min=config_in.target_min,
        target_max=config_in.target_max,
        challenge_types=[ChallengeTypeConfig(**t.model_dump()) for t in config_in.challenge_types],
    )
    db.add(config)
    await db.commit()
    await db.refresh(config)
    return config

async def update_config(config: ChallengeConfig, config_in: ChallengeConfigUpdate, db: AsyncSession) -> ChallengeConfig:
    config.motivation = config_in.motivation
    config.target_min = config_in.target_min
    config.target_max = config_in.target_max
    if config_in.challenge_types is not None:
        # Deletes must hit the database before re-inserting a type with the same name
        config.challenge_types.clear()
        await db.flush()
        config.challenge_types.extend(ChallengeTypeConfig(**t.model_dump()) for t in config_in.challenge_types)
    db.add(config)
    await db.commit()
    await db.refresh(config)
    return config

def find_type_config(config: ChallengeConfig, challenge_type: str) -> Optional[ChallengeTypeConfig]:
    for type_config in config.challenge_types:
        if type_config.type.lower() == challenge_type.lower():
            return type_config
    return None

async def add_type_config(config: ChallengeConfig, type_in: ChallengeTypeConfigCreate, db: AsyncSession) -> ChallengeTypeConfig:
    type_config = ChallengeTypeConfig(**type_in.model_dump())
    config.challenge_types.append(type_config)
    await db.commit()
    await db.refresh(type_config)
    return type_config

async def update_type_config(type_config: ChallengeTypeConfig, type_in: ChallengeTypeConfigUpdate, db: AsyncSession) -> ChallengeTypeConfig:
    for field, value in type_in.model_dump(exclude_unset=True).items():
        setattr(type_config, field, value)
    db.add(type_config)
    await db.commit()
    await db.refresh(type_config)
    return type_config

async def delete_type_config(config: ChallengeConfig, type_config: ChallengeTypeConfig, db: AsyncSession) -> None:
    config.challenge_types.remove(type_config)
    await db.commit()
