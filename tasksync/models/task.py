"""
Task model
"""

from typing import Annotated, Optional, Union
from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field
from tasksync.config.constants import (
    COMPLETED_FIELD,
    COMPLETED_FIELD_ALIAS,
    DELETED_FIELD,
    DELETED_FIELD_ALIAS,
    PROVISIONAL_ID_PREFIX,
)

TaskId = Union[int, str]


def _strip_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("name must not be empty")
    return value


TaskName = Annotated[str, AfterValidator(_strip_name)]


class Task(BaseModel):
    """Task record as held in the local collection"""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: TaskId
    name: TaskName
    completed: bool = Field(
        False,
        validation_alias=AliasChoices(COMPLETED_FIELD, COMPLETED_FIELD_ALIAS),
    )
    deleted: bool = Field(
        False,
        validation_alias=AliasChoices(DELETED_FIELD, DELETED_FIELD_ALIAS),
    )

    @property
    def is_provisional(self) -> bool:
        """True for a locally fabricated task awaiting its server record"""
        return isinstance(self.id, str) and self.id.startswith(PROVISIONAL_ID_PREFIX)


class TaskCreate(BaseModel):
    """Task creation payload"""

    name: TaskName


class TaskUpdate(BaseModel):
    """Task update payload (PATCH body)"""

    name: Optional[TaskName] = None
    completed: Optional[bool] = None

    def to_payload(self, completed_field: str = COMPLETED_FIELD) -> dict:
        """
        Only the fields being changed

        Args:
            completed_field: Wire name for the completed flag. Reads accept
                both spellings, so a legacy service needs "iscompleted" here
                or it will acknowledge the PATCH without applying it.
        """
        payload = self.model_dump(exclude_none=True)
        if COMPLETED_FIELD in payload and completed_field != COMPLETED_FIELD:
            payload[completed_field] = payload.pop(COMPLETED_FIELD)
        return payload
