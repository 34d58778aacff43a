"""Readiness evaluation: can a task be worked on given sibling and child order."""

from typing import List

from discovery_tree.tasks.models import ReadinessState, TaskID, TaskStatus
from discovery_tree.tasks.navigator import TreeNavigator
from discovery_tree.tasks.repository import TaskRepository

LEFT_SIBLING_INCOMPLETE = "left sibling is not complete"
CHILDREN_INCOMPLETE = "not all children are complete"


class ReadinessEvaluator:
    """Derives a ReadinessState from the left sibling and direct children"""

    def __init__(self, repository: TaskRepository, navigator: TreeNavigator):
        self.repository = repository
        self.navigator = navigator

    def evaluate_readiness(self, task_id: TaskID) -> ReadinessState:
        self.repository.find_by_id(task_id)

        reasons: List[str] = []

        left_sibling = self.navigator.get_left_sibling(task_id)
        left_sibling_complete = left_sibling is None or left_sibling.status == TaskStatus.DONE
        if not left_sibling_complete:
            reasons.append(LEFT_SIBLING_INCOMPLETE)

        children = self.navigator.get_children(task_id)
        all_children_complete = all(child.status == TaskStatus.DONE for child in children)
        if not all_children_complete:
            reasons.append(CHILDREN_INCOMPLETE)

        return ReadinessState.create(left_sibling_complete, all_children_complete, reasons)
