"""Configuration for the treewatch package."""

from dataclasses import dataclass


# Larger buffers are known to destabilize some network filesystem backends.
MAX_BUFFER_SIZE = 65536


@dataclass
class WatchConfig:
    """
    Configuration options for a watch session.
    
    Attributes:
        buffer_size: Maximum number of raw records held between the backend
            thread and the delivery thread before an overflow is reported
        segment_aware_boundary: Treat the root as a path segment when checking
            containment instead of a literal string prefix
        backfill_renamed_in: Also backfill directories that are moved into
            the root from outside
        follow_symlinks: Descend into symlinked directories during backfill
        health_check_interval_ms: Interval for checking the backend is alive
        stop_timeout_ms: Maximum time to wait for threads when stopping
    """
    buffer_size: int = 8192
    segment_aware_boundary: bool = False
    backfill_renamed_in: bool = False
    follow_symlinks: bool = False
    health_check_interval_ms: int = 500
    stop_timeout_ms: int = 5000

    def __post_init__(self):
        if self.buffer_size < 1:
            raise ValueError(f"buffer_size must be positive: {self.buffer_size}")
        if self.buffer_size > MAX_BUFFER_SIZE:
            raise ValueError(
                f"buffer_size must not exceed {MAX_BUFFER_SIZE}: {self.buffer_size}"
            )
        if self.health_check_interval_ms <= 0:
            raise ValueError(
                f"health_check_interval_ms must be positive: {self.health_check_interval_ms}"
            )
        if self.stop_timeout_ms < 0:
            raise ValueError(f"stop_timeout_ms must not be negative: {self.stop_timeout_ms}")
