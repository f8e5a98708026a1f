"""Tests for models module."""

import pytest
import os
from pathlib import Path

from src.treewatch.models import (
    ChangeType,
    ChangeEvent,
    RawRecord,
    BackendErrorKind,
    BackendError,
)


class TestChangeType:
    """Tests for ChangeType enum."""

    def test_wire_values(self):
        assert ChangeType.CHANGED == 0
        assert ChangeType.CREATED == 1
        assert ChangeType.DELETED == 2
        assert ChangeType.RENAMED == 3
        assert ChangeType.LOG == 4

    def test_from_value(self):
        assert ChangeType(1) == ChangeType.CREATED
        assert ChangeType(3) == ChangeType.RENAMED


class TestChangeEvent:
    """Tests for ChangeEvent dataclass."""

    def test_create_event(self, tmp_path):
        path = str(tmp_path / "test.txt")
        event = ChangeEvent(change_type=ChangeType.CREATED, path=path)
        assert event.change_type == ChangeType.CREATED
        assert event.path == path
        assert event.old_path is None

    def test_requires_absolute_path(self):
        with pytest.raises(ValueError, match="path must be absolute"):
            ChangeEvent(change_type=ChangeType.CHANGED, path="relative/file.txt")

    def test_requires_path_for_mutations(self):
        with pytest.raises(ValueError, match="path must be absolute"):
            ChangeEvent(change_type=ChangeType.DELETED)

    def test_rename_requires_old_path(self, tmp_path):
        with pytest.raises(ValueError, match="old_path must be absolute"):
            ChangeEvent(change_type=ChangeType.RENAMED, path=str(tmp_path / "b.txt"))

    def test_old_path_only_for_renames(self, tmp_path):
        with pytest.raises(ValueError, match="only valid for renames"):
            ChangeEvent(
                change_type=ChangeType.CREATED,
                path=str(tmp_path / "b.txt"),
                old_path=str(tmp_path / "a.txt"),
            )

    def test_log_event(self):
        event = ChangeEvent.log("buffer overflow")
        assert event.change_type == ChangeType.LOG
        assert event.message == "buffer overflow"
        assert event.path is None

    def test_log_event_needs_content(self):
        with pytest.raises(ValueError, match="log event"):
            ChangeEvent(change_type=ChangeType.LOG)

    def test_immutable(self, tmp_path):
        event = ChangeEvent(change_type=ChangeType.CHANGED, path=str(tmp_path / "a"))
        with pytest.raises(AttributeError):
            event.path = str(tmp_path / "b")

    def test_to_dict(self, tmp_path):
        event = ChangeEvent(change_type=ChangeType.CHANGED, path=str(tmp_path / "a.txt"))
        assert event.to_dict() == {"type": 0, "path": str(tmp_path / "a.txt")}

    def test_to_dict_rename(self, tmp_path):
        event = ChangeEvent(
            change_type=ChangeType.RENAMED,
            path=str(tmp_path / "b.txt"),
            old_path=str(tmp_path / "a.txt"),
        )
        assert event.to_dict() == {
            "type": 3,
            "path": str(tmp_path / "b.txt"),
            "oldPath": str(tmp_path / "a.txt"),
        }

    def test_to_dict_log(self):
        assert ChangeEvent.log("hello").to_dict() == {"type": 4, "message": "hello"}

    def test_from_dict(self, tmp_path):
        data = {
            "type": 3,
            "path": str(tmp_path / "b.txt"),
            "oldPath": str(tmp_path / "a.txt"),
        }
        event = ChangeEvent.from_dict(data)
        assert event.change_type == ChangeType.RENAMED
        assert event.old_path == str(tmp_path / "a.txt")


class TestRawRecord:
    """Tests for RawRecord dataclass."""

    def test_defaults(self, tmp_path):
        record = RawRecord(change_type=ChangeType.CREATED, path=str(tmp_path))
        assert record.old_path is None
        assert record.is_directory is False
        assert record.timestamp > 0


class TestBackendError:
    """Tests for BackendError dataclass."""

    def test_kind_values(self):
        assert BackendErrorKind.OVERFLOW.value == "overflow"
        assert BackendErrorKind.ROOT_INVALIDATED.value == "root_invalidated"
        assert BackendErrorKind.BACKEND_STOPPED.value == "backend_stopped"

    def test_to_dict(self, tmp_path):
        error = BackendError(
            kind=BackendErrorKind.OVERFLOW,
            root=str(tmp_path),
            message="dropped",
            exception=OSError("boom"),
        )
        data = error.to_dict()
        assert data["kind"] == "overflow"
        assert data["root"] == str(tmp_path)
        assert data["message"] == "dropped"
        assert "boom" in data["exception"]

    def test_to_dict_without_exception(self, tmp_path):
        error = BackendError(BackendErrorKind.BACKEND_STOPPED, str(tmp_path), "stopped")
        assert error.to_dict()["exception"] is None
