"""CRUD over the user collection."""

import logging
from collections.abc import Callable
from typing import Any

from peakbook.database import RecordStore
from peakbook.models.user import User
from peakbook.services.errors import DuplicateUsernameError, NotFoundError

logger = logging.getLogger(__name__)


class UserStore:
    """Users persisted as a JSON list; every call reads the file afresh."""

    def __init__(self, records: RecordStore) -> None:
        self.records = records

    async def all(self) -> list[User]:
        return [User.model_validate(r) for r in await self.records.load()]

    async def find_by_username(self, username: str) -> User | None:
        for record in await self.records.load():
            if record.get("username") == username:
                return User.model_validate(record)
        return None

    async def find_by_id(self, user_id: str) -> User | None:
        for record in await self.records.load():
            if record.get("id") == user_id:
                return User.model_validate(record)
        return None

    async def insert(self, user: User) -> User:
        """Append a new user.

        Raises:
            DuplicateUsernameError: If the username is already taken.
        """
        async with self.records.transaction() as records:
            if any(r.get("username") == user.username for r in records):
                raise DuplicateUsernameError()
            records.append(user.to_record())
        logger.info("Created user %s", user.username)
        return user

    async def update(
        self,
        predicate: Callable[[User], bool],
        mutator: Callable[[User], Any],
    ) -> User:
        """Apply ``mutator`` to the first user matching ``predicate`` and persist it.

        The mutator runs on a freshly loaded record while the file is locked.
        Any exception it raises aborts the update without writing.

        Raises:
            NotFoundError: If no user matches.
        """
        async with self.records.transaction() as records:
            for index, record in enumerate(records):
                user = User.model_validate(record)
                if predicate(user):
                    mutator(user)
                    records[index] = user.to_record()
                    return user
            raise NotFoundError("User not found.")

    async def update_by_id(self, user_id: str, mutator: Callable[[User], Any]) -> User:
        return await self.update(lambda u: u.id == user_id, mutator)

    async def update_by_username(self, username: str, mutator: Callable[[User], Any]) -> User:
        return await self.update(lambda u: u.username == username, mutator)

    async def update_all(self, mutator: Callable[[User], Any]) -> None:
        """Apply ``mutator`` to every user in a single write."""
        async with self.records.transaction() as records:
            for index, record in enumerate(records):
                user = User.model_validate(record)
                mutator(user)
                records[index] = user.to_record()
