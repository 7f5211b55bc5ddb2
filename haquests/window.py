"""TCP send window bookkeeping."""

from dataclasses import dataclass

from haquests.constants import DEFAULT_WINDOW_SIZE


@dataclass
class Window:
    """A window of ``size`` bytes of which ``used`` are outstanding."""

    size: int = DEFAULT_WINDOW_SIZE
    used: int = 0

    def update(self, bytes_received):
        """Release ``bytes_received`` bytes, never going below zero."""
        if bytes_received <= self.used:
            self.used -= bytes_received
        else:
            self.used = 0

    def can_send(self, nbytes):
        """Return True when ``nbytes`` more bytes fit in the window."""
        return self.used + nbytes <= self.size

    def available_space(self):
        """Return the number of bytes that still fit."""
        return max(self.size - self.used, 0)