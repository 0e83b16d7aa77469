"""Status line publication."""

from pomoline.status.surface import (
    MemoryStatusSurface,
    StatusFile,
    StatusSurface,
    read_status_file,
)

__all__ = ["MemoryStatusSurface", "StatusFile", "StatusSurface", "read_status_file"]
