"""
# @Time    : 2025/11/18 10:35
# @Author  : Pedro
# @File    : user_service.py
# @Software: PyCharm
"""
from typing import Any, Dict, List

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.api.v1.model.user import User
from app.core.db import transaction, utcnow
from app.core.exception import ValidationError, operation_boundary

PROFILE_FIELDS = ("first_name", "last_name_father", "last_name_mother", "email")


class UserService:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @operation_boundary("Error retrieving user")
    async def get_profile(self, user_id: int) -> User:
        async with self.session_factory() as session:
            return await User.get_or_404(session, user_id, "User not found")

    @operation_boundary("Error updating user")
    async def update_profile(self, user_id: int, fields: Dict[str, Any]) -> User:
        async with transaction(self.session_factory) as session:
            user = await User.get_or_404(session, user_id, "User not found")

            email = fields.get("email")
            if email and email != user.email:
                if await User.exists(session, User.email == email, User.id != user_id):
                    raise ValidationError("Email already in use")

            for name in PROFILE_FIELDS:
                value = fields.get(name)
                if value:
                    setattr(user, name, value)

            password = fields.get("password")
            if password:
                user.set_password(password)

            user.updated_at = utcnow()
            await session.flush()

        logger.info(f"👤 user {user_id} profile updated (password_changed={bool(password)})")
        return user

    @operation_boundary("Error deleting user")
    async def delete_user(self, user_id: int) -> None:
        async with transaction(self.session_factory) as session:
            await User.get_or_404(session, user_id, "User not found")
            await session.execute(
                delete(User).where(User.id == user_id).execution_options(synchronize_session=False)
            )
        logger.info(f"🗑️ user {user_id} deleted")

    @operation_boundary("Error retrieving users")
    async def list_users(self) -> List[User]:
        # 不分页
        async with self.session_factory() as session:
            result = await session.execute(select(User).order_by(User.id))
            return list(result.scalars().all())
