"""Shared base model and entity kinds."""

from enum import Enum
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class EntityKind(str, Enum):
    """The five cached collections."""
    USER = "User"
    CLIENT = "Client"
    PROJECT = "Project"
    TASK = "Task"
    ACTIVITY = "Activity"


class CamelModel(BaseModel):
    """
    Base model for every entity.

    Python attributes are snake_case; JSON payloads use the camelCase names
    the sheets and the web client have always used (clientId, teamLeader...).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    def to_json_dict(self) -> dict:
        """Dump with camelCase keys and enums as their display values."""
        return self.model_dump(mode="json", by_alias=True)
