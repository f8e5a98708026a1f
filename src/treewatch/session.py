"""Watch session wiring the raw feed, the normalizer and the error relay."""

import logging
import threading
from typing import Callable, Optional

from .config import WatchConfig
from .exceptions import SessionAlreadyStartedError, SessionDisposedError
from .feed import WatchdogFeed
from .models import BackendError, ChangeEvent
from .normalizer import EventNormalizer, NormalizerStats
from .root import WatchRoot


logger = logging.getLogger(__name__)


class ErrorRelay:
    """Forwards backend failures to the consumer unchanged."""

    def __init__(self, on_error: Callable[[BackendError], None]):
        self.on_error = on_error

    def relay(self, error: BackendError) -> None:
        logger.error(f"Backend error on {error.root} ({error.kind.value}): {error.message}")
        self.on_error(error)


class WatchSession:
    """
    Watches one root and delivers normalized events to a consumer.

    Callbacks are fixed for the lifetime of the session. A session is
    started once and disposed once; after a backend error it is marked
    failed and the caller is expected to build a new one (and rescan).
    """

    def __init__(
        self,
        path,
        on_event: Callable[[ChangeEvent], None],
        on_error: Callable[[BackendError], None],
        config: Optional[WatchConfig] = None,
        feed: Optional[WatchdogFeed] = None,
    ):
        """
        Initialize the watch session.

        Args:
            path: Root folder to watch
            on_event: Callback for each normalized change event
            on_error: Callback for backend failures
            config: Watch configuration
            feed: Raw feed to subscribe with (defaults to a WatchdogFeed)
        """
        self.config = config or WatchConfig()
        self._root = WatchRoot(path, segment_aware=self.config.segment_aware_boundary)
        self._relay = ErrorRelay(on_error)
        self._normalizer = EventNormalizer(self._root, on_event, self.config)
        self._feed = feed or WatchdogFeed(self.config)

        self._started = False
        self._disposed = False
        self._failed = False
        self._lock = threading.Lock()

    def start(self) -> None:
        """
        Subscribe to the root and begin delivering events.

        Raises:
            SessionAlreadyStartedError: If already started
            SessionDisposedError: If the session was disposed
            SubscriptionError: If the root cannot be watched
        """
        with self._lock:
            if self._disposed:
                raise SessionDisposedError(f"Session for {self._root} was disposed")
            if self._started:
                raise SessionAlreadyStartedError(f"Session for {self._root} is already running")
            self._started = True

        try:
            self._feed.start(self._root, self._normalizer.process, self._on_backend_error)
        except Exception:
            with self._lock:
                self._started = False
            self._feed.stop()
            raise

        logger.info(f"Watch session started for {self._root}")

    def dispose(self) -> None:
        """Stop delivering events and release the subscription."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True

        if self._feed.stop():
            logger.info(f"Watch session disposed for {self._root}")

    def close(self) -> None:
        """Alias for dispose()."""
        self.dispose()

    def _on_backend_error(self, error: BackendError) -> None:
        self._failed = True
        self._relay.relay(error)

    @property
    def root(self) -> WatchRoot:
        return self._root

    @property
    def is_running(self) -> bool:
        """Check if events are being delivered."""
        return self._started and not self._disposed and self._feed.is_running

    @property
    def failed(self) -> bool:
        """True once a backend error has been reported."""
        return self._failed

    @property
    def stats(self) -> NormalizerStats:
        return self._normalizer.stats

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
        return False


def create_session(
    path,
    on_event: Callable[[ChangeEvent], None],
    on_error: Callable[[BackendError], None],
    config: Optional[WatchConfig] = None,
) -> WatchSession:
    """
    Create and start a watch session.

    Args:
        path: Root folder to watch
        on_event: Callback for each normalized change event
        on_error: Callback for backend failures
        config: Watch configuration

    Returns:
        The running session; call dispose() to stop it

    Raises:
        SubscriptionError: If the root cannot be watched
    """
    session = WatchSession(path, on_event, on_error, config)
    session.start()
    return session
