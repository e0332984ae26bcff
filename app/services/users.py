# app/services/users.py
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import User
from app.core.exceptions import UserNotFoundException
from app.crud import user as crud_user


async def resolve_user(username: str, db: AsyncSession) -> User:
    """Map the authenticated username to its user record."""
    user = await crud_user.get_user_by_username(username, db)
    if user is None:
        raise UserNotFoundException(username)
    return user
