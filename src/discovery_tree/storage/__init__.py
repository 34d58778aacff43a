"""
Storage module: JSON file persistence for the task tree.
"""

from discovery_tree.storage.dto import TaskDTO, from_dto, to_dto
from discovery_tree.storage.file_repository import FileTaskRepository

__all__ = [
    "TaskDTO",
    "to_dto",
    "from_dto",
    "FileTaskRepository",
]
