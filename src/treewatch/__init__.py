"""
Tree Watch Package

Recursively watches a directory tree and delivers a normalized, ordered
stream of change events to a consumer callback.

Features:
- Change events: CHANGED, CREATED, DELETED, RENAMED (plus LOG markers)
- Renames crossing the root split into CREATED or DELETED
- Recursive CREATED backfill for directories that appear atomically
- Bounded event buffer with overflow reported as a backend error
- Backend failures relayed to the consumer without retry
"""

from .models import (
    ChangeType,
    ChangeEvent,
    RawRecord,
    BackendErrorKind,
    BackendError,
)

from .config import WatchConfig, MAX_BUFFER_SIZE

from .exceptions import (
    WatchError,
    SubscriptionError,
    RootNotFoundError,
    RootNotDirectoryError,
    RootAccessError,
    SessionError,
    SessionAlreadyStartedError,
    SessionDisposedError,
)

from .root import WatchRoot
from .normalizer import EventNormalizer, NormalizerStats
from .feed import WatchdogFeed, RawFeedHandler
from .session import WatchSession, ErrorRelay, create_session


__all__ = [
    # Models
    "ChangeType",
    "ChangeEvent",
    "RawRecord",
    "BackendErrorKind",
    "BackendError",
    # Config
    "WatchConfig",
    "MAX_BUFFER_SIZE",
    # Exceptions
    "WatchError",
    "SubscriptionError",
    "RootNotFoundError",
    "RootNotDirectoryError",
    "RootAccessError",
    "SessionError",
    "SessionAlreadyStartedError",
    "SessionDisposedError",
    # Components
    "WatchRoot",
    "EventNormalizer",
    "NormalizerStats",
    "WatchdogFeed",
    "RawFeedHandler",
    # Session
    "WatchSession",
    "ErrorRelay",
    "create_session",
]

__version__ = "0.1.0"
