"""
Task DTO: flat JSON shape of a Task on disk.

Field names match the persisted camelCase keys (``parentId``,
``createdAt``, ``updatedAt``); timestamps are RFC3339 strings.
"""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, Strict, StrictStr, TypeAdapter

from discovery_tree.core.exceptions import ValidationError
from discovery_tree.tasks.models import Task, TaskStatus, task_id_from_string

# RFC3339 only: epoch numbers and offset-less strings are rejected.
Timestamp = Annotated[AwareDatetime, Strict()]


class TaskDTO(BaseModel):
    """Data transfer object for JSON serialization of Task"""

    id: str = Field(default="", strict=True)
    description: str = Field(default="", strict=True)
    status: str = Field(default="", strict=True)
    parent_id: Optional[StrictStr] = Field(default=None, alias="parentId")
    position: int = Field(default=0, strict=True)
    created_at: Optional[Timestamp] = Field(default=None, alias="createdAt")
    updated_at: Optional[Timestamp] = Field(default=None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


TaskDTOList = TypeAdapter(List[TaskDTO])


def to_dto(task: Task) -> TaskDTO:
    """Convert a Task to its DTO; a missing parent becomes null"""
    return TaskDTO(
        id=str(task.id),
        description=task.description,
        status=task.status.value,
        parent_id=str(task.parent_id) if task.parent_id is not None else None,
        position=task.position,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


def from_dto(dto: TaskDTO) -> Task:
    """
    Rebuild a Task from persisted data with full validation.

    Raises ValidationError for an empty or malformed id/parentId, a blank
    description, a negative position, missing timestamps or an unknown
    status string.
    """
    if not dto.id.strip():
        raise ValidationError("id", "task ID cannot be empty")
    if not dto.description.strip():
        raise ValidationError("description", "description cannot be empty")
    if dto.position < 0:
        raise ValidationError("position", "position must be non-negative")
    if dto.created_at is None or dto.updated_at is None:
        raise ValidationError("timestamps", "timestamps cannot be zero")

    task_id = task_id_from_string(dto.id)
    status = TaskStatus.parse(dto.status)

    parent_id = None
    if dto.parent_id is not None:
        parent_id = task_id_from_string(dto.parent_id)

    return Task.reconstruct(
        id=task_id,
        description=dto.description,
        status=status,
        parent_id=parent_id,
        position=dto.position,
        created_at=dto.created_at,
        updated_at=dto.updated_at,
    )
