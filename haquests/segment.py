"""A TCP segment as seen by the connection logic."""

from dataclasses import dataclass

from haquests.constants import DEFAULT_WINDOW_SIZE


@dataclass
class Segment:
    """Ports, sequence numbers, flags, window and payload of a TCP segment."""

    src_port: int = 0
    dst_port: int = 0
    seq_num: int = 0
    ack_num: int = 0
    flags: int = 0
    window: int = DEFAULT_WINDOW_SIZE
    data: bytes = b""

    def __post_init__(self):
        self.data = bytes(self.data)

    @property
    def data_length(self):
        """Number of payload bytes."""
        return len(self.data)

    def has_flag(self, flag):
        """Return True when any bit of ``flag`` is set on this segment."""
        return (self.flags & int(flag)) != 0