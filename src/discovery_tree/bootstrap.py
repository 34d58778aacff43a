"""
Application initialization: build the file-backed repository and the
services that share it.

The repository's lock only guards callers that share the same instance,
so everything returned here is wired to one repository object.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from discovery_tree.core.config import DiscoveryTreeConfig
from discovery_tree.core.logging import get_logger
from discovery_tree.storage.file_repository import FileTaskRepository
from discovery_tree.tasks.navigator import TreeNavigator
from discovery_tree.tasks.readiness import ReadinessEvaluator
from discovery_tree.tasks.service import TaskService
from discovery_tree.tasks.validator import TaskValidator

logger = get_logger("bootstrap")


@dataclass
class TaskTree:
    """Services bound to a single repository instance"""

    repository: FileTaskRepository
    service: TaskService
    navigator: TreeNavigator
    validator: TaskValidator
    readiness: ReadinessEvaluator


def initialize_application(
    data_path: Optional[Union[str, Path]] = None,
    config: Optional[DiscoveryTreeConfig] = None,
) -> TaskTree:
    """
    Create the repository and services.

    ``data_path`` wins over ``config.storage.data_path``; with neither the
    repository falls back to its default path. Load failures propagate.
    """
    if data_path is None and config is not None:
        data_path = config.storage.data_path

    repository = FileTaskRepository(data_path)
    validator = TaskValidator(repository)
    navigator = TreeNavigator(repository)

    logger.info("Task tree initialized", path=str(repository.file_path))

    return TaskTree(
        repository=repository,
        service=TaskService(repository, validator),
        navigator=navigator,
        validator=validator,
        readiness=ReadinessEvaluator(repository, navigator),
    )
