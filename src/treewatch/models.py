"""Data models for the treewatch package."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional
import os
import time


class ChangeType(IntEnum):
    """Kinds of change events, valued as they appear on the wire."""
    CHANGED = 0
    CREATED = 1
    DELETED = 2
    RENAMED = 3
    LOG = 4


MUTATION_TYPES = frozenset({
    ChangeType.CHANGED,
    ChangeType.CREATED,
    ChangeType.DELETED,
    ChangeType.RENAMED,
})


@dataclass(frozen=True)
class ChangeEvent:
    """
    A normalized change event delivered to the consumer.

    Attributes:
        change_type: The kind of change
        path: Absolute path of the affected entry (optional for LOG events)
        old_path: For RENAMED events, the absolute path before the rename
        message: For LOG events, the diagnostic text
    """
    change_type: ChangeType
    path: Optional[str] = None
    old_path: Optional[str] = None
    message: Optional[str] = None

    def __post_init__(self):
        if self.change_type in MUTATION_TYPES:
            if not self.path or not os.path.isabs(self.path):
                raise ValueError(f"path must be absolute: {self.path}")
        elif self.message is None and self.path is None:
            raise ValueError("log event needs a message or a path")

        if self.change_type == ChangeType.RENAMED:
            if not self.old_path or not os.path.isabs(self.old_path):
                raise ValueError(f"old_path must be absolute: {self.old_path}")
        elif self.old_path is not None:
            raise ValueError(f"old_path is only valid for renames: {self.old_path}")

    @classmethod
    def log(cls, message: str, path: Optional[str] = None) -> "ChangeEvent":
        """Create a diagnostic LOG event."""
        return cls(change_type=ChangeType.LOG, path=path, message=message)

    def to_dict(self) -> dict:
        """Convert to the consumer wire shape."""
        data = {"type": int(self.change_type)}
        if self.path is not None:
            data["path"] = self.path
        if self.old_path is not None:
            data["oldPath"] = self.old_path
        if self.message is not None:
            data["message"] = self.message
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ChangeEvent":
        """Create from the consumer wire shape."""
        return cls(
            change_type=ChangeType(data["type"]),
            path=data.get("path"),
            old_path=data.get("oldPath"),
            message=data.get("message"),
        )


@dataclass
class RawRecord:
    """
    Raw record from the filesystem backend before normalization.

    Attributes:
        change_type: One of CHANGED, CREATED, DELETED, RENAMED
        path: Path of the event (the new path for renames)
        old_path: Previous path (for renames)
        is_directory: Whether the backend reported a directory
        timestamp: Unix timestamp when the record was received
    """
    change_type: ChangeType
    path: str
    old_path: Optional[str] = None
    is_directory: bool = False
    timestamp: float = field(default_factory=time.time)


class BackendErrorKind(Enum):
    """Failures reported by the filesystem backend."""
    OVERFLOW = "overflow"
    ROOT_INVALIDATED = "root_invalidated"
    BACKEND_STOPPED = "backend_stopped"


@dataclass(frozen=True)
class BackendError:
    """
    A backend failure surfaced to the consumer as-is.

    After a backend error the session is no longer reliable; events may
    have been dropped and the caller is expected to rebuild it.

    Attributes:
        kind: What went wrong
        root: The watched root the failure belongs to
        message: Human readable description
        exception: Underlying exception, if any
        timestamp: Unix timestamp when the failure was detected
    """
    kind: BackendErrorKind
    root: str
    message: str
    exception: Optional[BaseException] = None
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "root": self.root,
            "message": self.message,
            "exception": repr(self.exception) if self.exception else None,
            "timestamp": self.timestamp,
        }
