"""Raw filesystem feed using the watchdog library."""

import logging
import os
import queue
import threading
from typing import Callable, List, Optional, Union

from watchdog.observers import Observer
from watchdog.events import (
    FileSystemEventHandler,
    DirCreatedEvent,
    DirDeletedEvent,
    DirModifiedEvent,
    DirMovedEvent,
)

from .config import WatchConfig
from .exceptions import (
    RootAccessError,
    RootNotDirectoryError,
    RootNotFoundError,
    SubscriptionError,
)
from .models import BackendError, BackendErrorKind, ChangeType, RawRecord
from .root import WatchRoot


logger = logging.getLogger(__name__)

FeedItem = Union[RawRecord, BackendError]


class RawFeedHandler(FileSystemEventHandler):
    """Handler that converts watchdog events to RawRecord."""

    def __init__(self, callback: Callable[[FeedItem], None], root: str):
        super().__init__()
        self.callback = callback
        self.root = os.path.normpath(root)

    def _emit(
        self,
        change_type: ChangeType,
        path: str,
        old_path: Optional[str] = None,
        is_directory: bool = False,
    ):
        """Emit a RawRecord to the callback."""
        self.callback(RawRecord(
            change_type=change_type,
            path=path,
            old_path=old_path,
            is_directory=is_directory,
        ))

    def _is_root(self, path: str) -> bool:
        return os.path.normpath(path) == self.root

    def _root_invalidated(self, message: str) -> None:
        self.callback(BackendError(
            kind=BackendErrorKind.ROOT_INVALIDATED,
            root=self.root,
            message=message,
        ))

    def on_created(self, event):
        is_dir = isinstance(event, DirCreatedEvent)
        self._emit(ChangeType.CREATED, os.fsdecode(event.src_path), is_directory=is_dir)

    def on_deleted(self, event):
        is_dir = isinstance(event, DirDeletedEvent)
        path = os.fsdecode(event.src_path)
        self._emit(ChangeType.DELETED, path, is_directory=is_dir)
        if self._is_root(path):
            self._root_invalidated(f"Watched root was deleted: {path}")

    def on_modified(self, event):
        is_dir = isinstance(event, DirModifiedEvent)
        self._emit(ChangeType.CHANGED, os.fsdecode(event.src_path), is_directory=is_dir)

    def on_moved(self, event):
        is_dir = isinstance(event, DirMovedEvent)
        old_path = os.fsdecode(event.src_path)
        self._emit(
            ChangeType.RENAMED,
            os.fsdecode(event.dest_path),
            old_path,
            is_directory=is_dir,
        )
        if self._is_root(old_path):
            self._root_invalidated(f"Watched root was moved away: {old_path}")


def validate_root(path: str) -> None:
    """
    Check that a root can be subscribed to.

    Args:
        path: Absolute path of the root folder

    Raises:
        RootNotFoundError: If the path does not exist
        RootNotDirectoryError: If the path is not a directory
        RootAccessError: If the directory cannot be listed
    """
    if not os.path.exists(path):
        raise RootNotFoundError(f"Root folder does not exist: {path}")
    if not os.path.isdir(path):
        raise RootNotDirectoryError(f"Root is not a directory: {path}")
    if not os.access(path, os.R_OK | os.X_OK):
        raise RootAccessError(f"Root folder is not accessible: {path}")


class WatchdogFeed:
    """
    Recursive raw feed for a single root.

    A watchdog observer pushes records into a bounded FIFO buffer which a
    single delivery thread drains, so records reach ``on_raw`` one at a time
    and in arrival order. Backend failures are reported once through
    ``on_error`` and stop the feed; nothing is retried.
    """

    def __init__(
        self,
        config: Optional[WatchConfig] = None,
        observer_factory: Callable[[], object] = Observer,
    ):
        """
        Initialize the feed.

        Args:
            config: Watch configuration
            observer_factory: Callable creating the watchdog observer
        """
        self.config = config or WatchConfig()
        self._observer_factory = observer_factory
        self._observer = None
        self._root: Optional[str] = None
        self._queue: "queue.Queue[FeedItem]" = queue.Queue(maxsize=self.config.buffer_size)
        self._on_raw: Optional[Callable[[RawRecord], None]] = None
        self._on_error: Optional[Callable[[BackendError], None]] = None
        self._running = False
        self._error_reported = False
        self._stop_event = threading.Event()
        self._threads: List[threading.Thread] = []
        self._lock = threading.Lock()

    def start(
        self,
        root: Union[WatchRoot, str],
        on_raw: Callable[[RawRecord], None],
        on_error: Callable[[BackendError], None],
    ) -> None:
        """
        Subscribe to a root and its whole subtree.

        Args:
            root: The root folder to watch
            on_raw: Callback for each raw record
            on_error: Callback for backend failures

        Raises:
            SubscriptionError: If the root cannot be watched
        """
        path = str(root)

        with self._lock:
            if self._running:
                raise SubscriptionError(f"Feed is already running for {self._root}")

        validate_root(path)

        self._root = path
        self._on_raw = on_raw
        self._on_error = on_error
        self._queue = queue.Queue(maxsize=self.config.buffer_size)
        self._error_reported = False
        # Threads left over from an earlier run keep their own event and queue.
        self._stop_event = threading.Event()

        observer = self._observer_factory()
        handler = RawFeedHandler(self._enqueue, path)

        try:
            observer.schedule(handler, path, recursive=True)
            observer.start()
        except OSError as e:
            self._release_observer(observer)
            raise SubscriptionError(f"Cannot subscribe to {path}: {e}") from e
        except Exception:
            self._release_observer(observer)
            raise

        self._threads = [
            threading.Thread(
                target=self._delivery_loop,
                args=(self._stop_event, self._queue),
                name="FeedDelivery",
            ),
            threading.Thread(
                target=self._health_loop,
                args=(self._stop_event,),
                name="FeedHealth",
            ),
        ]

        with self._lock:
            self._observer = observer
            self._running = True

        for thread in self._threads:
            thread.daemon = True
            thread.start()

        logger.info(f"Started watching {path}")

    def stop(self) -> bool:
        """
        Release the subscription and stop delivery.

        Safe to call repeatedly, before start, and from the delivery thread.

        Returns:
            True if the feed was stopped, False if it was not running
        """
        with self._lock:
            if not self._running:
                return False

            self._running = False
            observer = self._observer
            self._observer = None
            threads = list(self._threads)
            self._threads.clear()

        self._stop_event.set()
        self._release_observer(observer)

        timeout = self.config.stop_timeout_ms / 1000.0
        current = threading.current_thread()
        for thread in threads:
            if thread is not current and thread.is_alive():
                thread.join(timeout=timeout)

        logger.info(f"Stopped watching {self._root}")
        return True

    @property
    def is_running(self) -> bool:
        """Check if the feed is running."""
        return self._running

    @property
    def root(self) -> Optional[str]:
        return self._root

    def pending_count(self) -> int:
        """Get number of records waiting for delivery."""
        return self._queue.qsize()

    def _release_observer(self, observer) -> None:
        """Stop an observer that may or may not have been started."""
        if observer is None:
            return
        try:
            observer.stop()
        except Exception as e:
            logger.error(f"Error stopping observer for {self._root}: {e}")
        if observer is not threading.current_thread() and observer.is_alive():
            observer.join(timeout=self.config.stop_timeout_ms / 1000.0)

    def _enqueue(self, item: FeedItem) -> None:
        """Called from the observer thread for every record."""
        if self._stop_event.is_set():
            return

        try:
            self._queue.put_nowait(item)
        except queue.Full:
            logger.warning(f"Event buffer full for {self._root} ({self.config.buffer_size} records)")
            self._fail(BackendError(
                kind=BackendErrorKind.OVERFLOW,
                root=self._root,
                message=f"Event buffer overflow, events were dropped ({self.config.buffer_size} records)",
            ))

    def _delivery_loop(self, stop_event: threading.Event, records: "queue.Queue[FeedItem]") -> None:
        """Worker loop that hands buffered records to the consumer in order."""
        logger.debug(f"Delivery loop started for {self._root}")

        while not stop_event.is_set():
            try:
                item = records.get(timeout=0.1)
            except queue.Empty:
                continue

            if stop_event.is_set():
                break

            if isinstance(item, BackendError):
                self._fail(item)
                break

            try:
                self._on_raw(item)
            except Exception as e:
                logger.error(f"Error delivering {item.change_type.name} {item.path}: {e}")

    def _health_loop(self, stop_event: threading.Event) -> None:
        """Worker loop that reports an observer thread that died."""
        interval = self.config.health_check_interval_ms / 1000.0

        while not stop_event.wait(timeout=interval):
            observer = self._observer
            if observer is not None and not observer.is_alive():
                self._fail(BackendError(
                    kind=BackendErrorKind.BACKEND_STOPPED,
                    root=self._root,
                    message=f"Filesystem observer stopped unexpectedly for {self._root}",
                ))
                break

    def _fail(self, error: BackendError) -> None:
        """Report a backend failure once and stop the feed."""
        with self._lock:
            if self._error_reported or not self._running:
                return
            self._error_reported = True

        self.stop()

        try:
            self._on_error(error)
        except Exception as e:
            logger.error(f"Error callback failed for {self._root}: {e}")
