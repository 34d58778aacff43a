"""
File-backed Task Repository

JSON file persistence with an in-memory cache guarded by a reader/writer
lock. Every mutating call rewrites the whole file (write-through) using a
temporary sibling file and an atomic rename.

Only one instance should own a given file: the lock is in-process and
there is no cross-process file locking.
"""

import json
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from discovery_tree.core.config import DEFAULT_DATA_PATH
from discovery_tree.core.exceptions import FileSystemError, NotFoundError, ValidationError
from discovery_tree.core.locking import ReadWriteLock
from discovery_tree.core.logging import get_logger
from discovery_tree.storage.dto import TaskDTOList, from_dto, to_dto
from discovery_tree.tasks.models import Task, TaskID
from discovery_tree.tasks.repository import (
    TaskRepository,
    collect_descendant_ids,
    select_children,
    select_root,
)

logger = get_logger("file_repository")


class FileTaskRepository(TaskRepository):
    """
    TaskRepository persisted as a JSON array of task DTOs.

    Construction resolves an empty path to ``./data/tasks.json``, creates
    the containing directory and loads the file. A missing or zero-length
    file yields an empty store; any parse or row validation failure aborts
    construction.
    """

    def __init__(self, file_path: Optional[Union[str, Path]] = None):
        if not file_path:
            file_path = DEFAULT_DATA_PATH
        self.file_path = Path(file_path)
        self._tasks: Dict[str, Task] = {}
        self._lock = ReadWriteLock()

        directory = self.file_path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileSystemError("create directory", str(directory), e) from e

        self._load()

    # ============================================================================
    # LOAD / PERSIST
    # ============================================================================

    def _load(self) -> None:
        if not self.file_path.exists():
            logger.info("Task file not found, starting empty", path=str(self.file_path))
            return

        try:
            data = self.file_path.read_bytes()
        except OSError as e:
            raise FileSystemError("read", str(self.file_path), e) from e

        if not data:
            return

        try:
            dtos = TaskDTOList.validate_json(data)
        except PydanticValidationError as e:
            raise FileSystemError("parse JSON", str(self.file_path), e) from e

        tasks: Dict[str, Task] = {}
        for dto in dtos:
            task = from_dto(dto)
            tasks[str(task.id)] = task
        self._tasks = tasks

        logger.info("Tasks loaded", path=str(self.file_path), task_count=len(tasks))

    def _persist(self) -> None:
        """Write the whole map to disk; caller must hold the write lock"""
        try:
            payload = json.dumps(
                [to_dto(task).to_json_dict() for task in self._tasks.values()],
                indent=2,
                ensure_ascii=False,
            )
        except (TypeError, ValueError) as e:
            raise FileSystemError("marshal JSON", str(self.file_path), e) from e

        tmp_path = self.file_path.with_name(self.file_path.name + ".tmp")
        try:
            tmp_path.write_text(payload, encoding="utf-8")
        except OSError as e:
            _discard(tmp_path)
            logger.error("Task file write failed", path=str(tmp_path), error=str(e))
            raise FileSystemError("write temporary file", str(tmp_path), e) from e

        try:
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            _discard(tmp_path)
            logger.error("Task file rename failed", path=str(self.file_path), error=str(e))
            raise FileSystemError("atomic rename", str(self.file_path), e) from e

        logger.debug("Tasks persisted", path=str(self.file_path), task_count=len(self._tasks))

    # ============================================================================
    # WRITES
    # ============================================================================

    def save(self, task: Task) -> None:
        if task is None:
            raise ValidationError("task", "task cannot be nil")
        with self._lock.write_lock():
            self._tasks[str(task.id)] = task
            self._persist()

    def delete(self, task_id: TaskID) -> None:
        key = str(task_id)
        with self._lock.write_lock():
            if key not in self._tasks:
                raise NotFoundError("Task", key)
            del self._tasks[key]
            self._persist()

    def delete_subtree(self, task_id: TaskID) -> None:
        key = str(task_id)
        with self._lock.write_lock():
            if key not in self._tasks:
                raise NotFoundError("Task", key)
            for descendant in collect_descendant_ids(self._tasks, task_id):
                self._tasks.pop(descendant, None)
            del self._tasks[key]
            self._persist()

    # ============================================================================
    # READS
    # ============================================================================

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


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Temporary file cleanup failed", path=str(path), error=str(e))
