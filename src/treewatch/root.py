"""The watched root folder and boundary checks against it."""

import os


class WatchRoot:
    """
    Immutable absolute path being watched by a session.

    Containment is a literal string-prefix comparison by default, so a
    sibling such as ``/watched-other`` counts as inside ``/watch``.
    Pass ``segment_aware=True`` to require a separator boundary instead.
    """

    __slots__ = ("_path", "_segment_aware")

    def __init__(self, path, segment_aware: bool = False):
        """
        Initialize the watch root.

        Args:
            path: Path to the root folder (str or path-like)
            segment_aware: Compare on path segment boundaries
        """
        path = os.path.abspath(os.fspath(path))
        stripped = path.rstrip(os.sep)
        if os.altsep:
            stripped = stripped.rstrip(os.altsep)
        # A filesystem root ("/" or "C:\") keeps its separator.
        if stripped and not stripped.endswith(":"):
            path = stripped
        self._path = path
        self._segment_aware = segment_aware

    @property
    def path(self) -> str:
        """The absolute root path."""
        return self._path

    @property
    def segment_aware(self) -> bool:
        return self._segment_aware

    def contains(self, path: str) -> bool:
        """
        Check whether a path lies within this root.

        Args:
            path: Absolute path to check

        Returns:
            True if the path is the root or below it
        """
        if not path.startswith(self._path):
            return False
        if not self._segment_aware:
            return True
        if len(path) == len(self._path) or self._path.endswith(os.sep):
            return True
        return path[len(self._path)] in (os.sep, os.altsep or os.sep)

    def __contains__(self, path: str) -> bool:
        return self.contains(path)

    def __eq__(self, other) -> bool:
        if not isinstance(other, WatchRoot):
            return NotImplemented
        return self._path == other._path and self._segment_aware == other._segment_aware

    def __hash__(self) -> int:
        return hash((self._path, self._segment_aware))

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"WatchRoot({self._path!r}, segment_aware={self._segment_aware})"
