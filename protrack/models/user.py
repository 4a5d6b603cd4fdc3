"""User data model."""

from enum import Enum
from typing import Optional
from pydantic import model_validator

from .base import CamelModel


AVATAR_BASE_URL = "https://placehold.co/100x100.png"


class UserRole(str, Enum):
    """Roles, in decreasing order of visibility."""
    ADMIN = "Admin"
    SUPERVISOR = "Supervisor"
    SENIOR = "Senior"
    ASSOCIATE = "Associate"


class Team(str, Enum):
    TEAM_1 = "Team 1"
    TEAM_2 = "Team 2"
    TEAM_3 = "Team 3"


class UserStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


def avatar_url(name: str) -> str:
    """Placeholder avatar showing the first letter of the name."""
    return f"{AVATAR_BASE_URL}?text={name[:1] or 'U'}"


class UserCreate(CamelModel):
    """Fields accepted when creating a user."""
    username: str
    name: str
    email: str
    password: Optional[str] = None
    role: UserRole = UserRole.ASSOCIATE
    team: Optional[Team] = None
    status: UserStatus = UserStatus.ACTIVE


class User(UserCreate):
    """A person who can lead or join projects and log activities."""
    id: str
    avatar: str = ""

    @model_validator(mode="after")
    def _default_avatar(self) -> "User":
        if not self.avatar:
            self.avatar = avatar_url(self.name)
        return self

    def public_copy(self) -> "User":
        """Copy without the password, for anything leaving the process."""
        return self.model_copy(update={"password": None})
