"""
Grid construction and state-preserving rebuilds.

    Grid             - owner of the cell matrix (build, rebuild, queries, edits)
    Detector         - protocol of the external region detector
    GridSnapshot     - serialized grid state
    WaitingItem      - content queued for a free cell between rebuilds
"""

from .builder import Matrix, assign_sequential_ids, build_matrix, iter_cells
from .detector import (
    DetectionResult,
    Detector,
    EmptyRegion,
    RawRegion,
    TextLineBounds,
    TextRegion,
    region_from_dict,
)
from .grid import Grid
from .reconcile import WaitingItem, find_nearest_cell
from .snapshot import GridSnapshot, SnapshotLayout, SnapshotMetadata, SnapshotValidation

__all__ = [
    'Grid',
    # Detector input/output
    'Detector',
    'DetectionResult',
    'EmptyRegion',
    'RawRegion',
    'TextLineBounds',
    'TextRegion',
    'region_from_dict',
    # Matrix helpers
    'Matrix',
    'assign_sequential_ids',
    'build_matrix',
    'iter_cells',
    # Reconciliation
    'WaitingItem',
    'find_nearest_cell',
    # Snapshots
    'GridSnapshot',
    'SnapshotLayout',
    'SnapshotMetadata',
    'SnapshotValidation',
]
