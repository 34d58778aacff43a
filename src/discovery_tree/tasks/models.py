"""
Task Models for Discovery Tree

Core Components:
- TaskID: UUID identity of a task (generated or parsed with validation)
- TaskStatus: Lifecycle status with the five persisted literal values
- Task: Work item in the tree (parent reference + position among siblings)
- ReadinessState: Derived ordering-readiness of a task

Tree-wide invariants (single root, dense sibling positions) are not enforced
here; they are maintained by TaskService across repository calls.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Optional, Tuple
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from discovery_tree.core.exceptions import ValidationError

TaskID = UUID


def new_task_id() -> TaskID:
    """Generate a new unique TaskID"""
    return uuid4()


def task_id_from_string(value: str) -> TaskID:
    """Parse a TaskID, rejecting empty or non-UUID input"""
    if not value:
        raise ValidationError("taskID", "task ID cannot be empty")
    try:
        return UUID(value)
    except (ValueError, TypeError, AttributeError):
        raise ValidationError("taskID", "task ID must be a valid UUID") from None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskStatus(str, Enum):
    """Task lifecycle status; values are the persisted literals"""
    TODO = "TODO"
    IN_PROGRESS = "In Progress"
    DONE = "DONE"
    BLOCKED = "Blocked"
    ROOT_WORK_ITEM = "Root Work Item"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "TaskStatus":
        """Create a TaskStatus from its string value with validation"""
        try:
            return cls(value)
        except ValueError:
            raise ValidationError("status", f"invalid status value: {value}") from None

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        try:
            cls(value)
        except ValueError:
            return False
        return True


class Task(BaseModel):
    """
    Work item in the discovery tree.

    Instances handed out by a repository are shared references: mutations
    made through ``change_status``/``update_description``/``move`` only
    become durable once the task is saved again.
    """

    id: UUID = Field(default_factory=new_task_id, description="Unique task identifier")
    description: str = Field(..., min_length=1, description="Non-blank task description")
    status: TaskStatus = Field(..., description="Current task status")
    parent_id: Optional[UUID] = Field(None, description="Parent task ID, None for the root")
    position: int = Field(default=0, ge=0, description="0-indexed position among siblings")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")

    model_config = ConfigDict(validate_assignment=False)

    @classmethod
    def new(
        cls,
        description: str,
        parent_id: Optional[TaskID] = None,
        position: int = 0,
    ) -> "Task":
        """
        Create a new task with validation.

        Parentless tasks start as ROOT_WORK_ITEM, child tasks as TODO.
        """
        _validate_description(description)
        _validate_position(position)

        now = utcnow()
        return cls(
            id=new_task_id(),
            description=description,
            status=TaskStatus.TODO if parent_id is not None else TaskStatus.ROOT_WORK_ITEM,
            parent_id=parent_id,
            position=position,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def reconstruct(
        cls,
        id: TaskID,
        description: str,
        status: TaskStatus,
        parent_id: Optional[TaskID],
        position: int,
        created_at: datetime,
        updated_at: datetime,
    ) -> "Task":
        """Rebuild a task from persisted data, keeping every field as stored"""
        return cls(
            id=id,
            description=description,
            status=status,
            parent_id=parent_id,
            position=position,
            created_at=created_at,
            updated_at=updated_at,
        )

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def change_status(self, new_status: TaskStatus) -> None:
        """Set a new status, rejecting values outside the enumeration"""
        if not TaskStatus.is_valid(new_status):
            raise ValidationError("status", "invalid status value")
        self.status = TaskStatus(new_status)
        self.updated_at = utcnow()

    def update_description(self, description: str) -> None:
        """Replace the description; whitespace around it is kept as given"""
        _validate_description(description)
        self.description = description
        self.updated_at = utcnow()

    def move(self, new_parent_id: Optional[TaskID], new_position: int) -> None:
        """Re-point this task at a new parent and position"""
        _validate_position(new_position)
        self.parent_id = new_parent_id
        self.position = new_position
        self.updated_at = utcnow()


def _validate_description(description: str) -> None:
    if not isinstance(description, str) or not description.strip():
        raise ValidationError("description", "description cannot be empty")


def _validate_position(position: int) -> None:
    if position < 0:
        raise ValidationError("position", "position must be non-negative")


class ReadinessState(BaseModel):
    """
    Whether a task can be worked on given its ordering constraints.

    Ready means the left sibling is DONE (or absent) and every direct child
    is DONE (or there are none). ``reasons`` lists each failing check.
    """

    is_ready: bool
    left_sibling_complete: bool
    all_children_complete: bool
    reasons: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    @classmethod
    def create(
        cls,
        left_sibling_complete: bool,
        all_children_complete: bool,
        reasons: Iterable[str] = (),
    ) -> "ReadinessState":
        return cls(
            is_ready=left_sibling_complete and all_children_complete,
            left_sibling_complete=left_sibling_complete,
            all_children_complete=all_children_complete,
            reasons=tuple(reasons),
        )
