"""
Repeating-task schedulers for the capture loop.

ThreadScheduler drives the loop from one background thread at a fixed rate;
ManualScheduler only runs the callback when tick() is called.
"""
import threading
import time
from typing import Callable, Optional


class TaskHandle:
    def cancel(self):
        raise NotImplementedError

    @property
    def cancelled(self) -> bool:
        raise NotImplementedError


class Scheduler:
    def call_repeatedly(self, fn: Callable[[], None]) -> TaskHandle:
        raise NotImplementedError


class _ThreadHandle(TaskHandle):
    def __init__(self, fn: Callable[[], None], interval: float):
        self._fn = fn
        self._interval = interval
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="capture-loop", daemon=True)

    def _run(self):
        # One invocation in flight at a time: the next cycle starts only after
        # the previous one returned.
        while not self._stop.is_set():
            t0 = time.monotonic()
            self._fn()
            remaining = self._interval - (time.monotonic() - t0)
            if remaining > 0:
                self._stop.wait(remaining)

    def start(self):
        self._thread.start()

    def cancel(self):
        self._stop.set()
        # Let an in-flight cycle finish; never abort it.
        if self._thread.is_alive() and threading.current_thread() is not self._thread:
            self._thread.join()

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()


class ThreadScheduler(Scheduler):
    def __init__(self, fps: float = 30.0):
        if fps <= 0:
            raise ValueError("fps must be positive")
        self.interval = 1.0 / fps

    def call_repeatedly(self, fn: Callable[[], None]) -> TaskHandle:
        handle = _ThreadHandle(fn, self.interval)
        handle.start()
        return handle


class _ManualHandle(TaskHandle):
    def __init__(self, fn: Callable[[], None]):
        self.fn = fn
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """Runs the registered callback only when tick() is called."""

    def __init__(self):
        self._handle: Optional[_ManualHandle] = None

    def call_repeatedly(self, fn: Callable[[], None]) -> TaskHandle:
        self._handle = _ManualHandle(fn)
        return self._handle

    @property
    def active(self) -> bool:
        return self._handle is not None and not self._handle.cancelled

    def tick(self, n: int = 1) -> int:
        ran = 0
        for _ in range(n):
            if not self.active:
                break
            self._handle.fn()
            ran += 1
        return ran
