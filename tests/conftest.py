"""Shared fixtures for the Discovery Tree test suite."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from discovery_tree.tasks import (
    InMemoryTaskRepository,
    ReadinessEvaluator,
    Task,
    TaskService,
    TaskStatus,
    TaskValidator,
    TreeNavigator,
)


@pytest.fixture
def repository():
    return InMemoryTaskRepository()


@pytest.fixture
def service(repository):
    return TaskService(repository)


@pytest.fixture
def validator(repository):
    return TaskValidator(repository)


@pytest.fixture
def navigator(repository):
    return TreeNavigator(repository)


@pytest.fixture
def evaluator(repository, navigator):
    return ReadinessEvaluator(repository, navigator)


@pytest.fixture
def data_file(tmp_path) -> Path:
    return tmp_path / "data" / "tasks.json"


@dataclass
class SampleTree:
    """
    root
    ├── a
    │   ├── a1
    │   └── a2
    │       └── a2x
    ├── b
    └── c
    """

    root: Task
    a: Task
    a1: Task
    a2: Task
    a2x: Task
    b: Task
    c: Task


@pytest.fixture
def tree(service) -> SampleTree:
    root = service.create_root_task("Root")
    a = service.create_child_task("A", root.id)
    b = service.create_child_task("B", root.id)
    c = service.create_child_task("C", root.id)
    a1 = service.create_child_task("A1", a.id)
    a2 = service.create_child_task("A2", a.id)
    a2x = service.create_child_task("A2x", a2.id)
    return SampleTree(root=root, a=a, a1=a1, a2=a2, a2x=a2x, b=b, c=c)


def layout(tasks):
    """Descriptions of ``tasks`` paired with their positions"""
    return [(t.description, t.position) for t in tasks]


@pytest.fixture
def positions():
    return layout


@pytest.fixture
def mark_done(repository):
    """Force tasks to DONE without going through the completion rule"""

    def _mark_done(*tasks):
        for task in tasks:
            task.change_status(TaskStatus.DONE)
            repository.save(task)

    return _mark_done
