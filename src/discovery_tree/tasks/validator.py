"""
Task Validation

Business rules that need tree-wide knowledge:
- bottom-to-top completion (direct children only)
- single root
- cycle prevention on reparenting (ancestor walk)
- position range for the target parent
"""

from typing import Optional, Set

from discovery_tree.core.exceptions import (
    ConstraintViolationError,
    NotFoundError,
    ValidationError,
)
from discovery_tree.tasks.models import Task, TaskID, TaskStatus
from discovery_tree.tasks.repository import TaskRepository


class TaskValidator:
    """Validates operations spanning multiple tasks"""

    def __init__(self, repository: TaskRepository):
        self.repository = repository

    def validate_status_change(self, task: Task, new_status: TaskStatus) -> None:
        """
        Only DONE is constrained: every direct child must already be DONE.

        Grandchildren are not inspected; they were checked when their own
        parent was completed.
        """
        if new_status != TaskStatus.DONE:
            return

        for child in self.repository.find_by_parent_id(task.id):
            if child.status != TaskStatus.DONE:
                raise ConstraintViolationError(
                    "bottom-to-top-completion",
                    "cannot mark task as DONE when children are not all DONE",
                )

    def validate_move(
        self,
        task_id: TaskID,
        new_parent_id: Optional[TaskID],
        new_position: int,
    ) -> None:
        """Reject moves that would create a cycle, a second root or a gap"""
        if new_position < 0:
            raise ValidationError("position", "position must be non-negative")

        task = self.repository.find_by_id(task_id)

        if new_parent_id is None:
            if not task.is_root:
                try:
                    self.repository.find_root()
                except NotFoundError:
                    pass
                else:
                    raise ConstraintViolationError(
                        "single-root",
                        "cannot move task to root: a root task already exists",
                    )
            self._validate_position_range(task, None, new_position)
            return

        self.repository.find_by_id(new_parent_id)

        if task_id == new_parent_id:
            raise ConstraintViolationError("cycle-prevention", "cannot move task to itself")

        if self.is_descendant(task_id, new_parent_id):
            raise ConstraintViolationError(
                "cycle-prevention",
                "cannot move task to its own descendant",
            )

        self._validate_position_range(task, new_parent_id, new_position)

    def validate_delete(self, task_id: TaskID) -> None:
        """Deletion carries no constraints beyond the task existing"""
        return None

    def is_descendant(self, ancestor: TaskID, candidate: TaskID) -> bool:
        """Walk parent links upward from ``candidate`` looking for ``ancestor``"""
        current = candidate
        visited: Set[TaskID] = set()

        while current not in visited:
            visited.add(current)
            try:
                task = self.repository.find_by_id(current)
            except NotFoundError:
                return False

            if task.parent_id is None:
                return False
            if task.parent_id == ancestor:
                return True
            current = task.parent_id

        return False

    def _validate_position_range(
        self,
        task: Task,
        new_parent_id: Optional[TaskID],
        new_position: int,
    ) -> None:
        # Reordering under the same parent: the task already holds one slot.
        siblings = self.repository.find_by_parent_id(new_parent_id)
        max_position = len(siblings)
        if task.parent_id == new_parent_id:
            max_position = len(siblings) - 1

        if new_position > max_position:
            raise ValidationError("position", "position exceeds valid range")
