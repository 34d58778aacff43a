"""
Tree Navigation

Read-only traversal over a TaskRepository. Children and siblings are
returned left-to-right (ascending position).
"""

from typing import List, Optional

from discovery_tree.tasks.models import Task, TaskID
from discovery_tree.tasks.repository import TaskRepository


class TreeNavigator:
    """Navigation operations across the tree structure"""

    def __init__(self, repository: TaskRepository):
        self.repository = repository

    def get_parent(self, task_id: TaskID) -> Optional[Task]:
        """Return the parent task, or None if the task is the root"""
        task = self.repository.find_by_id(task_id)
        if task.parent_id is None:
            return None
        return self.repository.find_by_id(task.parent_id)

    def get_children(self, task_id: TaskID) -> List[Task]:
        """Return the direct children of an existing task"""
        self.repository.find_by_id(task_id)
        return self.repository.find_by_parent_id(task_id)

    def get_siblings(self, task_id: TaskID) -> List[Task]:
        """Return every task sharing the task's parent, the task included"""
        task = self.repository.find_by_id(task_id)
        return self.repository.find_by_parent_id(task.parent_id)

    def get_left_sibling(self, task_id: TaskID) -> Optional[Task]:
        task = self.repository.find_by_id(task_id)
        if task.position == 0:
            return None
        return self._sibling_at(task, task.position - 1)

    def get_right_sibling(self, task_id: TaskID) -> Optional[Task]:
        task = self.repository.find_by_id(task_id)
        return self._sibling_at(task, task.position + 1)

    def get_root(self) -> Task:
        return self.repository.find_root()

    def get_tree(self) -> List[Task]:
        """Return the root followed by all its descendants"""
        root = self.repository.find_root()
        return self.get_subtree(root.id)

    def get_subtree(self, task_id: TaskID) -> List[Task]:
        """
        Return the task and all its descendants, depth-first.

        Each node is emitted before its children, children in position order.
        """
        task = self.repository.find_by_id(task_id)
        result = [task]
        self._collect_descendants(task_id, result)
        return result

    def _collect_descendants(self, parent_id: TaskID, result: List[Task]) -> None:
        for child in self.repository.find_by_parent_id(parent_id):
            result.append(child)
            self._collect_descendants(child.id, result)

    def _sibling_at(self, task: Task, position: int) -> Optional[Task]:
        for sibling in self.repository.find_by_parent_id(task.parent_id):
            if sibling.position == position:
                return sibling
        return None
