from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.orm import selectinload

from nutritrack.models.user import User, UserProfile, UserPreferences


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def exists_with_email_or_username(self, email: str, username: str) -> bool:
        result = await self.db.execute(
            select(User.id).where(or_(User.email == email, User.username == username)).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def get_with_profile(self, user_id: int) -> Optional[User]:
        """User with profile and preferences eagerly loaded."""
        result = await self.db.execute(
            select(User)
            .options(selectinload(User.profile), selectinload(User.preferences))
            .where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_current_weight(self, user_id: int) -> Optional[float]:
        result = await self.db.execute(
            select(UserProfile.current_weight).where(UserProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def create_user(
        self,
        user: User,
        profile: UserProfile,
        preferences: UserPreferences,
    ) -> User:
        """Stage the user with its default profile and preferences; the caller commits."""
        self.db.add(user)
        await self.db.flush()

        profile.user_id = user.id
        preferences.user_id = user.id
        self.db.add_all([profile, preferences])
        await self.db.flush()
        return user

    async def touch_last_login(self, user: User) -> None:
        user.last_login = datetime.utcnow()
        await self.db.flush()

    async def set_password_hash(self, user: User, password_hash: str) -> None:
        user.password_hash = password_hash
        await self.db.flush()
