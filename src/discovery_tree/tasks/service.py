"""
Task Management Service Layer

Orchestrates create / status change / move / delete on top of a
TaskRepository, consulting the TaskValidator before committing.

Sibling renumbering during move and delete is not transactional: each
affected sibling is saved individually and a failure part-way through is
raised as-is, with earlier saves already committed.
"""

from typing import Optional

from discovery_tree.core.exceptions import ConstraintViolationError, NotFoundError
from discovery_tree.core.logging import get_logger
from discovery_tree.tasks.models import Task, TaskID, TaskStatus
from discovery_tree.tasks.repository import TaskRepository
from discovery_tree.tasks.validator import TaskValidator

logger = get_logger("task_service")


class TaskService:
    """Domain operations that keep the tree consistent across repository calls"""

    def __init__(
        self,
        repository: TaskRepository,
        validator: Optional[TaskValidator] = None,
    ):
        self.repository = repository
        self.validator = validator or TaskValidator(repository)

    # ============================================================================
    # CREATION
    # ============================================================================

    def create_root_task(self, description: str) -> Task:
        """Create the single parentless task of the tree"""
        try:
            self.repository.find_root()
        except NotFoundError:
            pass
        else:
            raise ConstraintViolationError("single_root", "root task already exists")

        task = Task.new(description, None, 0)
        self.repository.save(task)

        logger.info("Root task created", task_id=str(task.id))
        return task

    def create_child_task(self, description: str, parent_id: TaskID) -> Task:
        """Append a new child after the parent's existing children"""
        self.repository.find_by_id(parent_id)

        next_position = len(self.repository.find_by_parent_id(parent_id))

        task = Task.new(description, parent_id, next_position)
        self.repository.save(task)

        logger.info(
            "Child task created",
            task_id=str(task.id),
            parent_id=str(parent_id),
            position=next_position,
        )
        return task

    # ============================================================================
    # UPDATES
    # ============================================================================

    def change_task_status(self, task_id: TaskID, new_status: TaskStatus) -> None:
        """Change status, enforcing bottom-to-top completion for DONE"""
        task = self.repository.find_by_id(task_id)

        self.validator.validate_status_change(task, new_status)
        task.change_status(new_status)
        self.repository.save(task)

        logger.info("Task status changed", task_id=str(task_id), status=str(task.status))

    def update_task_description(self, task_id: TaskID, description: str) -> Task:
        task = self.repository.find_by_id(task_id)

        task.update_description(description)
        self.repository.save(task)

        logger.info("Task description updated", task_id=str(task_id))
        return task

    # ============================================================================
    # MOVE
    # ============================================================================

    def move_task(
        self,
        task_id: TaskID,
        new_parent_id: Optional[TaskID],
        new_position: int,
    ) -> None:
        """
        Reparent and/or reorder a task, keeping sibling positions dense.

        Descendants reference the moved task by ID only, so reparenting the
        subtree root carries the whole subtree along.
        """
        task = self.repository.find_by_id(task_id)

        self.validator.validate_move(task_id, new_parent_id, new_position)

        old_parent_id = task.parent_id
        old_position = task.position

        if old_parent_id == new_parent_id:
            if old_position == new_position:
                return
            self._reorder_siblings(task, old_position, new_position)
        else:
            self._close_gap(old_parent_id, old_position, exclude=task.id)
            self._open_slot(new_parent_id, new_position, exclude=task.id)

        task.move(new_parent_id, new_position)
        self.repository.save(task)

        logger.info(
            "Task moved",
            task_id=str(task_id),
            old_parent_id=str(old_parent_id) if old_parent_id else None,
            new_parent_id=str(new_parent_id) if new_parent_id else None,
            old_position=old_position,
            new_position=new_position,
        )

    def _reorder_siblings(self, task: Task, old_position: int, new_position: int) -> None:
        for sibling in self.repository.find_by_parent_id(task.parent_id):
            if sibling.id == task.id:
                continue
            if new_position > old_position and old_position < sibling.position <= new_position:
                self._shift(sibling, -1)
            elif new_position < old_position and new_position <= sibling.position < old_position:
                self._shift(sibling, 1)

    def _close_gap(self, parent_id: Optional[TaskID], position: int, exclude: TaskID) -> None:
        for sibling in self.repository.find_by_parent_id(parent_id):
            if sibling.id != exclude and sibling.position > position:
                self._shift(sibling, -1)

    def _open_slot(self, parent_id: Optional[TaskID], position: int, exclude: TaskID) -> None:
        for sibling in self.repository.find_by_parent_id(parent_id):
            if sibling.id != exclude and sibling.position >= position:
                self._shift(sibling, 1)

    def _shift(self, task: Task, delta: int) -> None:
        task.move(task.parent_id, task.position + delta)
        self.repository.save(task)

    # ============================================================================
    # DELETE
    # ============================================================================

    def delete_task(self, task_id: TaskID) -> None:
        """
        Delete a task.

        Deleting the root clears the whole tree. Any other task is removed
        together with its descendants and its former right-hand siblings
        shift left by one.
        """
        task = self.repository.find_by_id(task_id)

        self.validator.validate_delete(task_id)

        if task.is_root:
            self.repository.delete_subtree(task_id)
            logger.info("Tree deleted", root_id=str(task_id))
            return

        parent_id = task.parent_id
        position = task.position

        if self.repository.find_by_parent_id(task_id):
            self.repository.delete_subtree(task_id)
        else:
            self.repository.delete(task_id)

        self._close_gap(parent_id, position, exclude=task_id)

        logger.info("Task deleted", task_id=str(task_id), parent_id=str(parent_id))
