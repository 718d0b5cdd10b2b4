"""
GridForge - Grid construction and state-preserving rebuilds for canvas layouts
"""

from .config import Settings, settings
from .exceptions import (
    CellNotFoundError,
    GridBuildError,
    GridError,
    LayerError,
    RebuildInProgressError,
    SnapshotError,
)
from .geometry import CanvasSize, Padding, Point, Rect, calculate_distance
from .cells import (
    AnimationKind,
    BaseCell,
    BaseContent,
    Cell,
    CellAnimation,
    CellType,
    ContentCell,
    ContentKind,
    EmptyContent,
    FillContent,
    MediaContent,
    TextBlockContent,
    TextLineCell,
    TextStyle,
    cell_from_dict,
)
from .layers import Layer, LayerId, LayerRegistry
from .grid import (
    DetectionResult,
    Detector,
    Grid,
    GridSnapshot,
    TextLineBounds,
    WaitingItem,
)

__all__ = [
    # Configuration
    "Settings",
    "settings",
    # Errors
    "GridError",
    "GridBuildError",
    "SnapshotError",
    "CellNotFoundError",
    "RebuildInProgressError",
    "LayerError",
    # Geometry
    "CanvasSize",
    "Padding",
    "Point",
    "Rect",
    "calculate_distance",
    # Cells
    "AnimationKind",
    "BaseCell",
    "BaseContent",
    "Cell",
    "CellAnimation",
    "CellType",
    "ContentCell",
    "ContentKind",
    "EmptyContent",
    "FillContent",
    "MediaContent",
    "TextBlockContent",
    "TextLineCell",
    "TextStyle",
    "cell_from_dict",
    # Layers
    "Layer",
    "LayerId",
    "LayerRegistry",
    # Grid
    "DetectionResult",
    "Detector",
    "Grid",
    "GridSnapshot",
    "TextLineBounds",
    "WaitingItem",
]
