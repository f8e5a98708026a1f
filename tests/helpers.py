"""Shared test doubles for feed and session tests."""

import threading
import time


class FakeObserver:
    """Stands in for a watchdog observer and exposes the scheduled handler."""

    def __init__(self, schedule_error=None):
        self.schedule_error = schedule_error
        self.handler = None
        self.path = None
        self.recursive = None
        self.alive = False
        self.stopped = False

    def schedule(self, handler, path, recursive=False):
        if self.schedule_error:
            raise self.schedule_error
        self.handler = handler
        self.path = path
        self.recursive = recursive

    def start(self):
        self.alive = True

    def stop(self):
        self.alive = False
        self.stopped = True

    def is_alive(self):
        return self.alive

    def join(self, timeout=None):
        pass


def wait_until(predicate, timeout=2.0):
    """Poll predicate until it returns True or the timeout expires."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False
