"""Download progress reporting."""

from typing import Callable

from ..logging_config import get_logger

logger = get_logger(__name__)

# (bytes_read, total_bytes); total_bytes is 0 when the server did not send a length
ProgressCallback = Callable[[int, int], None]


def human_bytes(num_bytes: int, si: bool = False) -> str:
    """Format a byte count for humans.

    Binary units (KiB, MiB, ...) by default, decimal units (kB, MB, ...) when
    si is True.

    Examples:
        human_bytes(512) -> "512 B"
        human_bytes(1536) -> "1.5KiB"
        human_bytes(2_000_000, si=True) -> "2.0MB"
    """
    unit = 1000 if si else 1024
    if num_bytes < unit:
        return f"{num_bytes} B"

    exp = 1
    while exp < 6 and num_bytes >= unit ** (exp + 1):
        exp += 1
    prefix = "kMGTPE"[exp - 1] if si else "KMGTPE"[exp - 1] + "i"
    return f"{num_bytes / unit ** exp:.1f}{prefix}B"


class LoggingProgress:
    """Default progress callback: logs each report it receives at INFO."""

    def __init__(self, si: bool = False):
        self.si = si

    def __call__(self, bytes_read: int, total_bytes: int) -> None:
        logger.info(self.format(bytes_read, total_bytes))

    def format(self, bytes_read: int, total_bytes: int) -> str:
        if total_bytes <= 0:
            return f"Downloading: {human_bytes(bytes_read, self.si)}"
        percent = bytes_read / total_bytes * 100
        return (
            f"Downloading: [{percent:.2f}%] "
            f"{human_bytes(bytes_read, self.si)}/{human_bytes(total_bytes, self.si)}"
        )
