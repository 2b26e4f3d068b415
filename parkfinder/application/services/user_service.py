from typing import List
from loguru import logger

from parkfinder.application.repositories import AbstractUserRepository
from parkfinder.domain.entities import User
from parkfinder.domain.exceptions import NotFoundError, DuplicateUsernameError


class UserService:
    def __init__(self, user_repo: AbstractUserRepository):
        self.user_repo = user_repo

    async def list_users(self) -> List[User]:
        return await self.user_repo.get_all()

    async def get_user(self, user_id: int) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    async def get_by_username(self, username: str) -> User:
        user = await self.user_repo.get_by_username(username)
        if not user:
            raise NotFoundError("User", username)
        return user

    async def create_user(self, user: User) -> User:
        if await self.user_repo.get_by_username(user.username):
            raise DuplicateUsernameError(user.username)
        created = await self.user_repo.add(user)
        logger.info(f"Created user {created.id} ({created.username})")
        return created

    async def update_user(self, user_id: int, user: User) -> User:
        await self.get_user(user_id)
        holder = await self.user_repo.get_by_username(user.username)
        if holder and holder.id != user_id:
            raise DuplicateUsernameError(user.username)
        user.id = user_id
        return await self.user_repo.update(user)

    async def delete_user(self, user_id: int) -> None:
        """Remove a user along with their reservations, payments and favorites."""
        if not await self.user_repo.delete(user_id):
            raise NotFoundError("User", user_id)
        logger.info(f"User {user_id} deleted")
