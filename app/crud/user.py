# app/crud/user.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.core.auth import User
from typing import Optional
import uuid

async def get_user_by_username(username: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()

async def lock_user(user_id: uuid.UUID, db: AsyncSession) -> User:
    """
    Re-read the user row with a row lock held until the transaction ends.

    Serialises aggregate updates and active-challenge checks per user.
    SQLite ignores FOR UPDATE; its writes are serialised anyway.
    """
    result = await db.execute(
        select(User)
        .where(User.id == user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()
