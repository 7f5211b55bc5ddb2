"""Elapsed-time measurement with an optional timeout callback."""

import time


class Timer:
    """Measures seconds since ``start`` on a monotonic clock."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._start = 0.0
        self.running = False
        self.timeout = 0.0
        self.callback = None

    def start(self):
        self._start = self._clock()
        self.running = True

    def stop(self):
        self.running = False

    def reset(self):
        self.start()

    def elapsed(self):
        """Return seconds since start, or 0 when stopped."""
        if not self.running:
            return 0.0
        return self._clock() - self._start

    def has_expired(self, timeout):
        return self.elapsed() >= timeout

    def set_timeout(self, timeout, callback):
        """Arrange for ``callback`` to run once ``timeout`` seconds pass."""
        self.timeout = timeout
        self.callback = callback

    def check_timeout(self):
        """Run the callback and stop when the timeout has passed."""
        if self.running and self.callback is not None and self.has_expired(self.timeout):
            self.callback()
            self.stop()


class ScopeTimer:
    """Context manager printing how many milliseconds its block took."""

    def __init__(self, name, clock=time.monotonic):
        self.name = name
        self._clock = clock
        self._start = 0.0

    def __enter__(self):
        self._start = self._clock()
        return self

    def __exit__(self, exc_type, exc, tb):
        millis = int((self._clock() - self._start) * 1000)
        print(f"[Timer] {self.name}: {millis}ms", flush=True)