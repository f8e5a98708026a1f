"""Event normalization with rename boundary checks and recursive backfill."""

import logging
import os
from dataclasses import dataclass
from typing import Callable, Optional

from .config import WatchConfig
from .models import ChangeEvent, ChangeType, RawRecord
from .root import WatchRoot


logger = logging.getLogger(__name__)


@dataclass
class NormalizerStats:
    """Counters kept by the normalizer for observability."""
    records: int = 0
    events_emitted: int = 0
    backfilled: int = 0
    skipped_entries: int = 0
    delivery_errors: int = 0


class EventNormalizer:
    """
    Transforms raw records into the public ChangeEvent stream.

    Records are processed one at a time on the calling thread; the caller
    must not invoke ``process`` concurrently for the same root.
    """

    def __init__(
        self,
        root: WatchRoot,
        emit: Callable[[ChangeEvent], None],
        config: Optional[WatchConfig] = None,
    ):
        """
        Initialize the event normalizer.

        Args:
            root: The watched root used for boundary checks
            emit: Callback receiving each normalized event
            config: Watch configuration
        """
        self.root = root
        self.emit = emit
        self.config = config or WatchConfig()
        self.stats = NormalizerStats()

    def process(self, record: RawRecord) -> None:
        """
        Process a raw record, emitting zero or more events.

        Args:
            record: The raw record from the feed
        """
        logger.debug(f"EventNormalizer.process: {record.change_type.name} - {record.path}")
        self.stats.records += 1

        if record.change_type == ChangeType.RENAMED:
            self._handle_rename(record)
        else:
            self._handle_change(record)

    def _handle_change(self, record: RawRecord) -> None:
        """Handle a changed, created or deleted record."""
        self._emit(ChangeEvent(change_type=record.change_type, path=record.path))

        if record.change_type == ChangeType.CREATED:
            self._backfill_if_directory(record.path)

    def _handle_rename(self, record: RawRecord) -> None:
        """Handle a rename, splitting it when it crosses the root boundary."""
        new_inside = self.root.contains(record.path)
        old_inside = record.old_path is not None and self.root.contains(record.old_path)

        if new_inside and old_inside:
            self._emit(ChangeEvent(
                change_type=ChangeType.RENAMED,
                path=record.path,
                old_path=record.old_path,
            ))
            return

        if new_inside:
            self._emit(ChangeEvent(change_type=ChangeType.CREATED, path=record.path))
            if self.config.backfill_renamed_in:
                self._backfill_if_directory(record.path)

        if old_inside:
            self._emit(ChangeEvent(change_type=ChangeType.DELETED, path=record.old_path))

        if not new_inside and not old_inside:
            logger.debug(f"Dropping rename outside root: {record.old_path} -> {record.path}")

    def _backfill_if_directory(self, path: str) -> None:
        """Backfill the subtree of path if it is currently a directory."""
        if not self.config.follow_symlinks and os.path.islink(path):
            return
        if os.path.isdir(path):
            self._backfill(path, set())

    def _backfill(self, directory: str, visited: set) -> None:
        """
        Emit CREATED for everything below a directory.

        Subdirectories come first, each followed by its own subtree, then
        files. Entries that vanish or cannot be read are skipped.

        Args:
            directory: Directory whose contents to report
            visited: Real paths already walked, guards against symlink cycles
        """
        real = os.path.realpath(directory)
        if real in visited:
            return
        visited.add(real)

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.debug(f"Skipping backfill of {directory}: {e}")
            self.stats.skipped_entries += 1
            return

        directories = []
        files = []
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=True):
                    directories.append(entry)
                else:
                    files.append(entry)
            except OSError as e:
                logger.debug(f"Skipping backfill entry {entry.path}: {e}")
                self.stats.skipped_entries += 1

        for entry in directories:
            self._emit_backfill(entry.path)
            try:
                descend = self.config.follow_symlinks or not entry.is_symlink()
            except OSError:
                descend = False
            if descend:
                self._backfill(entry.path, visited)

        for entry in files:
            self._emit_backfill(entry.path)

    def _emit_backfill(self, path: str) -> None:
        self.stats.backfilled += 1
        self._emit(ChangeEvent(change_type=ChangeType.CREATED, path=path))

    def _emit(self, event: ChangeEvent) -> None:
        self.stats.events_emitted += 1
        try:
            self.emit(event)
        except Exception as e:
            logger.error(f"Error delivering {event.change_type.name} {event.path}: {e}")
            self.stats.delivery_errors += 1
