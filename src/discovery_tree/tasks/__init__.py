"""
Discovery Tree Task Management

A single-rooted, strictly ordered tree of work items.

Key Components:
- Task: Work item with status, parent reference and sibling position
- TaskRepository: Persistence contract (InMemoryTaskRepository for tests)
- TreeNavigator: Read-only traversal
- TaskValidator: Tree-wide business rules
- ReadinessEvaluator: Derived ordering-readiness
- TaskService: Create / status change / move / delete orchestration
"""

from .models import (
    ReadinessState,
    Task,
    TaskID,
    TaskStatus,
    new_task_id,
    task_id_from_string,
)

from .repository import (
    InMemoryTaskRepository,
    TaskRepository,
)

from .navigator import TreeNavigator
from .validator import TaskValidator
from .readiness import ReadinessEvaluator
from .service import TaskService

__all__ = [
    # Models
    "Task",
    "TaskID",
    "TaskStatus",
    "ReadinessState",
    "new_task_id",
    "task_id_from_string",

    # Repository
    "TaskRepository",
    "InMemoryTaskRepository",

    # Services
    "TreeNavigator",
    "TaskValidator",
    "ReadinessEvaluator",
    "TaskService",
]
