"""Unit tests for FileTaskRepository."""

import json
import os
import threading
from pathlib import Path

import pytest

from discovery_tree.core.exceptions import FileSystemError, NotFoundError, ValidationError
from discovery_tree.storage import FileTaskRepository, to_dto
from discovery_tree.tasks import Task, TaskStatus, new_task_id


@pytest.fixture
def file_repository(data_file):
    return FileTaskRepository(data_file)


def read_rows(path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestConstruction:
    """Test cases for opening a task file."""

    def test_missing_file_creates_directory_and_empty_store(self, data_file):
        repo = FileTaskRepository(data_file)

        assert data_file.parent.is_dir()
        assert not data_file.exists()
        assert repo.find_all() == []
        assert repo.file_path == data_file

    def test_empty_file_is_empty_store(self, data_file):
        data_file.parent.mkdir(parents=True)
        data_file.write_bytes(b"")

        assert FileTaskRepository(data_file).find_all() == []

    def test_string_path_accepted(self, data_file):
        repo = FileTaskRepository(str(data_file))
        assert repo.file_path == data_file

    def test_empty_path_uses_default(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        repo = FileTaskRepository("")

        assert repo.file_path.as_posix() == "data/tasks.json"
        assert (tmp_path / "data").is_dir()

    def test_malformed_json(self, data_file):
        data_file.parent.mkdir(parents=True)
        data_file.write_text("{not json", encoding="utf-8")

        with pytest.raises(FileSystemError) as exc_info:
            FileTaskRepository(data_file)

        assert exc_info.value.operation == "parse JSON"
        assert exc_info.value.__cause__ is not None

    def test_wrong_json_shape(self, data_file):
        data_file.parent.mkdir(parents=True)
        data_file.write_text('{"id": "abc"}', encoding="utf-8")

        with pytest.raises(FileSystemError):
            FileTaskRepository(data_file)

    def test_invalid_row_aborts_load(self, data_file):
        row = to_dto(Task.new("Project")).to_json_dict()
        row["status"] = "Finished"
        data_file.parent.mkdir(parents=True)
        data_file.write_text(json.dumps([row]), encoding="utf-8")

        with pytest.raises(ValidationError) as exc_info:
            FileTaskRepository(data_file)
        assert exc_info.value.field == "status"

    @pytest.mark.parametrize("created_at", [0, "2024-01-01T00:00:00"])
    def test_non_rfc3339_timestamp_aborts_load(self, data_file, created_at):
        row = to_dto(Task.new("Project")).to_json_dict()
        row["createdAt"] = created_at
        data_file.parent.mkdir(parents=True)
        data_file.write_text(json.dumps([row]), encoding="utf-8")

        with pytest.raises(FileSystemError) as exc_info:
            FileTaskRepository(data_file)
        assert exc_info.value.operation == "parse JSON"

    def test_directory_cannot_be_created(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file in the way", encoding="utf-8")

        with pytest.raises(FileSystemError) as exc_info:
            FileTaskRepository(blocker / "tasks.json")
        assert exc_info.value.operation == "create directory"


class TestPersistence:
    """Test cases for write-through persistence."""

    def test_save_writes_indented_array(self, file_repository, data_file):
        root = Task.new("Project")
        file_repository.save(root)

        text = data_file.read_text(encoding="utf-8")
        assert text.startswith("[\n  {")
        rows = json.loads(text)
        assert rows[0]["id"] == str(root.id)
        assert rows[0]["parentId"] is None
        assert rows[0]["status"] == "Root Work Item"

    def test_no_temporary_file_left(self, file_repository, data_file):
        file_repository.save(Task.new("Project"))

        assert [p.name for p in data_file.parent.iterdir()] == ["tasks.json"]

    def test_reload_returns_same_tasks(self, file_repository, data_file):
        root = Task.new("Project")
        child = Task.new("Phase 1", root.id, 0)
        child.change_status(TaskStatus.IN_PROGRESS)
        file_repository.save(root)
        file_repository.save(child)

        reopened = FileTaskRepository(data_file)

        assert sorted(reopened.find_all(), key=lambda t: t.description) == [child, root]
        assert reopened.find_root() == root
        assert reopened.find_by_parent_id(root.id) == [child]

    def test_delete_is_persisted(self, file_repository, data_file):
        root = Task.new("Project")
        child = Task.new("Phase 1", root.id, 0)
        file_repository.save(root)
        file_repository.save(child)

        file_repository.delete(child.id)

        assert [row["id"] for row in read_rows(data_file)] == [str(root.id)]

    def test_delete_subtree_is_persisted(self, file_repository, data_file):
        root = Task.new("Project")
        a = Task.new("A", root.id, 0)
        a1 = Task.new("A1", a.id, 0)
        b = Task.new("B", root.id, 1)
        for task in (root, a, a1, b):
            file_repository.save(task)

        file_repository.delete_subtree(a.id)

        assert {row["id"] for row in read_rows(data_file)} == {str(root.id), str(b.id)}

    def test_missing_ids(self, file_repository):
        missing = new_task_id()
        with pytest.raises(NotFoundError):
            file_repository.find_by_id(missing)
        with pytest.raises(NotFoundError):
            file_repository.delete(missing)
        with pytest.raises(NotFoundError):
            file_repository.delete_subtree(missing)
        with pytest.raises(NotFoundError):
            file_repository.find_root()

    def test_save_none_rejected(self, file_repository, data_file):
        with pytest.raises(ValidationError):
            file_repository.save(None)
        assert not data_file.exists()

    def test_failed_rename_keeps_previous_file(self, file_repository, data_file, monkeypatch):
        root = Task.new("Project")
        file_repository.save(root)
        before = data_file.read_text(encoding="utf-8")

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", fail_replace)
        child = Task.new("Phase 1", root.id, 0)

        with pytest.raises(FileSystemError) as exc_info:
            file_repository.save(child)

        assert exc_info.value.operation == "atomic rename"
        assert isinstance(exc_info.value.__cause__, OSError)
        assert data_file.read_text(encoding="utf-8") == before
        assert not data_file.with_name("tasks.json.tmp").exists()
        # The in-memory map keeps the mutation even though the write failed.
        assert file_repository.find_by_id(child.id) is child

    def test_failed_temporary_write(self, file_repository, data_file, monkeypatch):
        def fail_write(self, *args, **kwargs):
            raise OSError("read-only filesystem")

        monkeypatch.setattr(Path, "write_text", fail_write)

        with pytest.raises(FileSystemError) as exc_info:
            file_repository.save(Task.new("Project"))

        assert exc_info.value.operation == "write temporary file"
        assert exc_info.value.path.endswith("tasks.json.tmp")


class TestConcurrency:
    """Test cases for concurrent access through one instance."""

    def test_concurrent_writers_and_readers(self, file_repository, data_file):
        root = Task.new("Project")
        file_repository.save(root)
        errors = []

        def writer(offset):
            try:
                for i in range(10):
                    file_repository.save(Task.new(f"w{offset}-{i}", root.id, offset * 10 + i))
            except Exception as e:  # pragma: no cover - surfaced by the assertion below
                errors.append(e)

        def reader():
            try:
                for _ in range(20):
                    file_repository.find_by_parent_id(root.id)
                    file_repository.find_root()
            except Exception as e:  # pragma: no cover
                errors.append(e)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        threads += [threading.Thread(target=reader) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(file_repository.find_all()) == 41
        assert len(read_rows(data_file)) == 41
