"""Exception classes for the grid engine."""


class GridError(Exception):
    """Base exception for grid errors."""

    pass


class GridBuildError(GridError):
    """Raised when detector output cannot be turned into a matrix."""

    pass


class SnapshotError(GridError):
    """Raised for invalid or unreadable serialized snapshots."""

    pass


class CellNotFoundError(GridError):
    """Raised when an edit targets a cell that is not in the current matrix."""

    pass


class RebuildInProgressError(GridError):
    """Raised when a rebuild is started while another one is running."""

    pass


class LayerError(GridError):
    """Raised for unknown layer identifiers."""

    pass
