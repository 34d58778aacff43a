"""
Task Repository Layer

Persistence contract for Task aggregates plus an in-memory implementation
used as a test double. The file-backed production store lives in
``discovery_tree.storage.file_repository``.

Both implementations keep tasks flat, keyed by ID string, with the parent
expressed only as an ID reference.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from discovery_tree.core.exceptions import NotFoundError, ValidationError
from discovery_tree.core.locking import ReadWriteLock
from discovery_tree.tasks.models import Task, TaskID


class TaskRepository(ABC):
    """Persistence operations for Task aggregates"""

    @abstractmethod
    def save(self, task: Task) -> None:
        """Persist a task (create or update)"""

    @abstractmethod
    def find_by_id(self, task_id: TaskID) -> Task:
        """Retrieve a task by ID, raising NotFoundError if absent"""

    @abstractmethod
    def find_by_parent_id(self, parent_id: Optional[TaskID]) -> List[Task]:
        """Retrieve all tasks with the given parent, ordered by position"""

    @abstractmethod
    def find_root(self) -> Task:
        """Retrieve the parentless task, raising NotFoundError if none exists"""

    @abstractmethod
    def find_all(self) -> List[Task]:
        """Retrieve all tasks"""

    @abstractmethod
    def delete(self, task_id: TaskID) -> None:
        """Remove a single task row (intended for leaves)"""

    @abstractmethod
    def delete_subtree(self, task_id: TaskID) -> None:
        """Remove a task and all its descendants"""


# ============================================================================
# SHARED SCAN HELPERS
# ============================================================================

def select_children(tasks: Iterable[Task], parent_id: Optional[TaskID]) -> List[Task]:
    """Full scan for tasks under ``parent_id``, sorted by position"""
    result = [task for task in tasks if task.parent_id == parent_id]
    result.sort(key=lambda t: t.position)
    return result


def select_root(tasks: Iterable[Task]) -> Task:
    for task in tasks:
        if task.parent_id is None:
            return task
    raise NotFoundError("Root Task", "root")


def collect_descendant_ids(tasks: Dict[str, Task], parent_id: TaskID) -> List[str]:
    """Recursively scan ``tasks`` for every descendant of ``parent_id``"""
    descendants: List[str] = []
    for key, task in tasks.items():
        if task.parent_id is not None and task.parent_id == parent_id:
            descendants.append(key)
            descendants.extend(collect_descendant_ids(tasks, task.id))
    return descendants


class InMemoryTaskRepository(TaskRepository):
    """In-memory TaskRepository for tests and ephemeral trees"""

    def __init__(self) -> None:
        self._tasks: Dict[str, Task] = {}
        self._lock = ReadWriteLock()

    def save(self, task: Task) -> None:
        if task is None:
            raise ValidationError("task", "task cannot be nil")
        with self._lock.write_lock():
            self._tasks[str(task.id)] = task

    def find_by_id(self, task_id: TaskID) -> Task:
        with self._lock.read_lock():
            task = self._tasks.get(str(task_id))
        if task is None:
            raise NotFoundError("Task", str(task_id))
        return task

    def find_by_parent_id(self, parent_id: Optional[TaskID]) -> List[Task]:
        with self._lock.read_lock():
            return select_children(self._tasks.values(), parent_id)

    def find_root(self) -> Task:
        with self._lock.read_lock():
            return select_root(self._tasks.values())

    def find_all(self) -> List[Task]:
        with self._lock.read_lock():
            return list(self._tasks.values())

    def delete(self, task_id: TaskID) -> None:
        key = str(task_id)
        with self._lock.write_lock():
            if key not in self._tasks:
                raise NotFoundError("Task", key)
            del self._tasks[key]

    def delete_subtree(self, task_id: TaskID) -> None:
        key = str(task_id)
        with self._lock.write_lock():
            if key not in self._tasks:
                raise NotFoundError("Task", key)
            for descendant in collect_descendant_ids(self._tasks, task_id):
                self._tasks.pop(descendant, None)
            del self._tasks[key]
