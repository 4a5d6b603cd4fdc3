"""
User repository over the user sheet.

Columns: id, username, name, email, password, role, team, status
"""

import logging
from typing import Optional, List

from pydantic import ValidationError

from ...integrations.sheets import SHEET_USERS
from ...models import User, UserCreate, UserStatus, avatar_url
from ..exceptions import ReferentialConflictError
from .base import SheetRepository, store_operation, split_ids

logger = logging.getLogger(__name__)


class UserRepository(SheetRepository):
    """Repository for user operations."""

    sheet_name = SHEET_USERS
    id_prefix = "USER"
    id_width = 3

    @staticmethod
    def _from_row(row: List[str]) -> Optional[User]:
        if not all(row[:4]):
            logger.warning(f"Skipping incomplete or malformed user row: {row}")
            return None

        try:
            return User(
                id=row[0],
                username=row[1],
                name=row[2],
                email=row[3],
                password=row[4] or None,
                role=row[5],
                team=row[6] or None,
                status=row[7] or UserStatus.ACTIVE,
            )
        except ValidationError as e:
            logger.warning(f"Could not process user row {row[0]}: {e}")
            return None

    @staticmethod
    def _to_row(user_id: str, user: UserCreate, password: str = "") -> List[str]:
        return [
            user_id,
            user.username,
            user.name,
            user.email,
            user.password or password,
            user.role.value,
            user.team.value if user.team else "",
            user.status.value,
        ]

    @store_operation("retrieve user data")
    async def list(self) -> List[User]:
        """Get all users, in sheet order."""
        users = []
        for row in await self._rows():
            user = self._from_row(row)
            if user:
                users.append(user)
        return users

    @store_operation("create user")
    async def create(self, data: UserCreate) -> User:
        """Append a new user and return it with its assigned id."""
        user_id = await self.next_id()
        await self.sheets.append_row(self.sheet_name, self._to_row(user_id, data))

        logger.info(f"Created user {user_id} ({data.username})")
        return User(id=user_id, **data.model_dump())

    @store_operation("update user")
    async def update(self, user: User) -> User:
        """
        Overwrite a user's row.

        A missing password keeps the stored one. The avatar is rebuilt from
        the (possibly new) name.
        """
        row_number = await self.find_row_number(user.id)
        current = await self.sheets.read_row(self.sheet_name, row_number)

        await self.sheets.update_row(
            self.sheet_name, row_number, self._to_row(user.id, user, password=current[4])
        )

        logger.info(f"Updated user {user.id}")
        return user.model_copy(update={"avatar": avatar_url(user.name)})

    @store_operation("delete user")
    async def delete(self, user_id: str) -> None:
        """
        Delete a user that no project references.

        Raises:
            ReferentialConflictError: if the user leads or belongs to a project
            EntityNotFoundError: if the user does not exist
        """
        for row in await self._project_rows():
            if row[4] == user_id or user_id in split_ids(row[5]):
                raise ReferentialConflictError(
                    "Cannot delete user. The user is currently assigned to one or more projects."
                )

        await self._delete_with_dependents(user_id, {})
