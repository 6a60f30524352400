"""
Recurring schedules for the simulation.

Both schedulers expose the same interface:
  call_every(interval_ms, callback) -> handle with cancel(wait) and join()
  monotonic()                       -> current time in seconds

ThreadScheduler runs on wall-clock time with one daemon thread per schedule.
VirtualScheduler only moves when advance() is called, so tests can drive the
sensor tick, the alarm tick and the frame tick deterministically.
"""

import itertools
import threading
import time


class ThreadHandle:
    """Recurring schedule backed by a daemon thread."""

    def __init__(self, interval_ms, callback, scheduler=None):
        self.interval_ms = int(interval_ms)
        self._callback = callback
        self._scheduler = scheduler
        self._fire_lock = threading.Lock()
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)

    @property
    def active(self):
        return not self._stopped.is_set()

    def start(self):
        self._thread.start()
        return self

    def _run(self):
        interval = self.interval_ms / 1000.0
        next_due = time.monotonic() + interval
        while not self._stopped.wait(max(0.0, next_due - time.monotonic())):
            with self._fire_lock:
                if self._stopped.is_set():
                    break
                try:
                    self._callback()
                except Exception as e:
                    print(f"[ERROR] Scheduled callback failed: {e}")
            next_due += interval
            # fell behind (suspended host), skip missed firings
            if next_due < time.monotonic():
                next_due = time.monotonic() + interval

    def cancel(self, wait=True):
        """
        Stop the schedule. No new firing starts after this call; with
        wait=True an in-flight firing has also finished when it returns.
        """
        self._stopped.set()
        if self._scheduler is not None:
            self._scheduler._discard(self)
        if wait:
            self.join()

    def join(self):
        """Wait for an in-flight firing to finish."""
        if threading.current_thread() is self._thread:
            return
        with self._fire_lock:
            pass
        self._thread.join(timeout=1)


class ThreadScheduler:

    def __init__(self):
        self._handles = []
        self._lock = threading.Lock()

    def monotonic(self):
        return time.monotonic()

    def call_every(self, interval_ms, callback):
        handle = ThreadHandle(interval_ms, callback, scheduler=self)
        with self._lock:
            self._handles.append(handle)
        return handle.start()

    def pending(self):
        with self._lock:
            return len(self._handles)

    def _discard(self, handle):
        with self._lock:
            if handle in self._handles:
                self._handles.remove(handle)

    def shutdown(self):
        with self._lock:
            handles = list(self._handles)
        for handle in handles:
            handle.cancel()


class VirtualHandle:
    """Recurring schedule on a VirtualScheduler timeline."""

    def __init__(self, scheduler, interval_ms, callback, first_due, seq):
        self.interval_ms = int(interval_ms)
        self.next_due = first_due
        self.seq = seq
        self.active = True
        self._scheduler = scheduler
        self._callback = callback

    def fire(self):
        try:
            self._callback()
        except Exception as e:
            print(f"[ERROR] Scheduled callback failed: {e}")

    def cancel(self, wait=True):
        self.active = False
        self._scheduler._discard(self)

    def join(self):
        pass


class VirtualScheduler:
    """Deterministic virtual clock in integer milliseconds."""

    def __init__(self, start_ms=0):
        self.now_ms = int(start_ms)
        self._handles = []
        self._seq = itertools.count()

    def monotonic(self):
        return self.now_ms / 1000.0

    def call_every(self, interval_ms, callback):
        if int(interval_ms) <= 0:
            raise ValueError("interval_ms must be positive")
        handle = VirtualHandle(
            self, interval_ms, callback,
            first_due=self.now_ms + int(interval_ms),
            seq=next(self._seq),
        )
        self._handles.append(handle)
        return handle

    def advance(self, ms):
        """Move the clock forward, firing every schedule that comes due."""
        target = self.now_ms + int(ms)
        while True:
            due = [h for h in self._handles if h.active and h.next_due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: (h.next_due, h.seq))
            self.now_ms = handle.next_due
            handle.next_due += handle.interval_ms
            handle.fire()
        self.now_ms = target

    def pending(self):
        return len(self._handles)

    def _discard(self, handle):
        if handle in self._handles:
            self._handles.remove(handle)

    def shutdown(self):
        for handle in list(self._handles):
            handle.cancel()
