#!/usr/bin/env python3
"""
CLI that streams change events for a directory tree as JSON lines.

Usage:
    python -m treewatch /path/to/folder
    python -m treewatch /path/to/folder --buffer-size 4096 --segment-aware -v

Each line on stdout is one event in the wire shape
{"type": <0-4>, "path": ..., "oldPath": ...}. Backend errors are written
as log events (type 4) and end the process with exit status 1.
"""

import argparse
import json
import logging
import signal
import sys
import threading
from typing import List, Optional, TextIO

from .config import WatchConfig
from .exceptions import SubscriptionError
from .models import BackendError, ChangeEvent
from .session import create_session


logger = logging.getLogger("treewatch.cli")


class GracefulShutdown:
    """Handle graceful shutdown on SIGINT/SIGTERM."""

    def __init__(self):
        self.stop_event = threading.Event()
        signal.signal(signal.SIGINT, self._handler)
        signal.signal(signal.SIGTERM, self._handler)

    def _handler(self, signum, frame):
        logger.info("Received shutdown signal, stopping...")
        self.stop_event.set()


class EventWriter:
    """Writes events to a text stream, one JSON object per line."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.failed = threading.Event()
        self._lock = threading.Lock()

    def write_event(self, event: ChangeEvent) -> None:
        line = json.dumps(event.to_dict())
        with self._lock:
            self.stream.write(line + "\n")
            self.stream.flush()

    def write_error(self, error: BackendError) -> None:
        self.write_event(ChangeEvent.log(f"[{error.kind.value}] {error.message}", path=error.root))
        self.failed.set()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treewatch",
        description="Watch a directory tree and print change events as JSON lines",
    )
    parser.add_argument("path", help="Root directory to watch")
    parser.add_argument("--buffer-size", type=int, default=WatchConfig.buffer_size,
                        help="Maximum buffered raw records before overflow")
    parser.add_argument("--segment-aware", action="store_true",
                        help="Match the root on path segment boundaries")
    parser.add_argument("--backfill-renamed-in", action="store_true",
                        help="Report contents of directories moved into the root")
    parser.add_argument("--follow-symlinks", action="store_true",
                        help="Descend into symlinked directories when backfilling")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def run(args: argparse.Namespace, stream: TextIO, stop_event: threading.Event) -> int:
    """
    Stream events until stop_event is set or the backend fails.

    Returns:
        Process exit status
    """
    try:
        config = WatchConfig(
            buffer_size=args.buffer_size,
            segment_aware_boundary=args.segment_aware,
            backfill_renamed_in=args.backfill_renamed_in,
            follow_symlinks=args.follow_symlinks,
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    writer = EventWriter(stream)

    try:
        session = create_session(args.path, writer.write_event, writer.write_error, config)
    except SubscriptionError as e:
        logger.error(f"Cannot watch {args.path}: {e}")
        return 1

    with session:
        logger.info(f"Watching {session.root}")
        while not stop_event.is_set() and not writer.failed.is_set():
            stop_event.wait(timeout=0.5)

    if writer.failed.is_set():
        return 1

    logger.info("Watcher stopped")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    shutdown = GracefulShutdown()
    return run(args, sys.stdout, shutdown.stop_event)


if __name__ == "__main__":
    sys.exit(main())
