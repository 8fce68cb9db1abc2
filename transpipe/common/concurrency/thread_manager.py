from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, Optional, Set, TypeVar

R = TypeVar("R")

log = logging.getLogger(__name__)


@dataclass
class ThreadStats:
    start_ts: float
    tasks_submitted: int = 0
    tasks_completed: int = 0
    tasks_failed: int = 0

    @property
    def uptime_sec(self) -> float:
        return time.time() - self.start_ts

    @property
    def in_flight(self) -> int:
        return max(0, self.tasks_submitted - (self.tasks_completed + self.tasks_failed))


class ThreadManager:
    """
    Runs each submitted task on its own daemon thread
    (waiting on subprocess exit, pumping pipes).

    Features
    --------
    - submit(fn, *args, **kwargs) -> Future
    - Stats snapshot (submitted / completed / failed / in flight)
    - Exceptions escaping a task are logged once when its future completes
    - Clean shutdown, context manager support

    Notes
    -----
    - There is no worker limit and no queue: a task starts as soon as it is
      submitted, so one long-running task never delays another.
    - Submitted tasks are never cancelled by this class.
    """

    def __init__(self, name: str = "worker", thread_name_prefix: Optional[str] = None) -> None:
        """
        Parameters
        ----------
        name:
            Logical name for stats/logging.
        thread_name_prefix:
            Prefix for thread names.
        """
        self._name = name
        self._prefix = thread_name_prefix or name
        self._stats = ThreadStats(start_ts=time.time())
        self._threads: Set[threading.Thread] = set()
        self._closed = False
        self._lock = threading.Lock()

    # -------------------------
    # Lifecycle
    # -------------------------
    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks; optionally join the running ones. Safe to call multiple times."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            running = list(self._threads)
        if wait:
            for t in running:
                t.join()

    def __enter__(self) -> "ThreadManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)

    @property
    def closed(self) -> bool:
        return self._closed

    def stats(self) -> ThreadStats:
        """Return a *snapshot* of current stats."""
        with self._lock:
            return ThreadStats(
                start_ts=self._stats.start_ts,
                tasks_submitted=self._stats.tasks_submitted,
                tasks_completed=self._stats.tasks_completed,
                tasks_failed=self._stats.tasks_failed,
            )

    # -------------------------
    # Submission
    # -------------------------
    def submit(self, fn: Callable[..., R], /, *args, **kwargs) -> Future[R]:
        """
        Start a single callable on a fresh thread and track its outcome.
        Returns a Future that will hold the result or exception.
        """
        fut: Future[R] = Future()
        # already running, so cancel() is a no-op
        fut.set_running_or_notify_cancel()

        def _run() -> None:
            try:
                result = fn(*args, **kwargs)
            except BaseException as e:
                fut.set_exception(e)
            else:
                fut.set_result(result)
            finally:
                with self._lock:
                    self._threads.discard(threading.current_thread())

        def _cb(f: Future[R]) -> None:
            try:
                _ = f.result()
                with self._lock:
                    self._stats.tasks_completed += 1
            except Exception as e:
                with self._lock:
                    self._stats.tasks_failed += 1
                log.exception("%s task failed: %s", self._name, e)

        fut.add_done_callback(_cb)

        with self._lock:
            if self._closed:
                raise RuntimeError(f"{self._name}: submit() after shutdown")
            self._stats.tasks_submitted += 1
            n = self._stats.tasks_submitted
            t = threading.Thread(target=_run, name=f"{self._prefix}-{n}", daemon=True)
            self._threads.add(t)
        try:
            t.start()
        except RuntimeError:
            with self._lock:
                self._threads.discard(t)
                self._stats.tasks_submitted -= 1
            raise
        return fut
