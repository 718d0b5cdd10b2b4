"""
GridSnapshot - Serialized grid state for the persistence layer.

Serialization format:
{
    "metadata": {
        "timestamp": 1707123456789,
        "version": "1.0.0",
        "canvasWidth": 1080,
        "canvasHeight": 1350
    },
    "layout": {
        "rows": 3,
        "cols": 3,
        "cells": [{...cell record...}, ...]
    }
}

Restoring a snapshot rebuilds the matrix directly from the cell records;
it does not go through reconciliation.
"""

import time
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from gridforge.cells import BaseCell, cell_from_dict
from gridforge.config import settings


class SnapshotMetadata(BaseModel):
    """When and for which canvas a snapshot was taken."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    timestamp: float = Field(default_factory=lambda: time.time() * 1000)
    version: str = Field(default_factory=lambda: settings.SNAPSHOT_VERSION)
    canvas_width: float = Field(default_factory=lambda: settings.DEFAULT_CANVAS_WIDTH, alias='canvasWidth')
    canvas_height: float = Field(default_factory=lambda: settings.DEFAULT_CANVAS_HEIGHT, alias='canvasHeight')


class SnapshotLayout(BaseModel):
    """Matrix dimensions and cell records."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    rows: int = Field(default=0, ge=0)
    cols: int = Field(default=0, ge=0)
    # Stored as dicts for serialization, converted to cells on restore
    cells: list[dict[str, Any]] = Field(default_factory=list)


class SnapshotValidation(BaseModel):
    """Result of GridSnapshot.validate_snapshot()."""
    success: bool = True
    issues: list[str] = Field(default_factory=list)


class GridSnapshot(BaseModel):
    """Complete serialized grid."""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=False,
        extra='ignore',
    )

    metadata: SnapshotMetadata = Field(default_factory=SnapshotMetadata)
    layout: SnapshotLayout = Field(default_factory=SnapshotLayout)

    def to_api_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary with camelCase keys."""
        return self.model_dump(by_alias=True, mode='json')

    @classmethod
    def from_api_dict(cls, data: dict[str, Any]) -> 'GridSnapshot':
        """
        Create a snapshot from a serialized dictionary.

        Raises:
            pydantic.ValidationError: If the structure is invalid
        """
        data = cls.migrate(dict(data))
        return cls.model_validate(data)

    @classmethod
    def migrate(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Migrate serialized data from older formats.

        Snapshot wrappers that nest the grid under "grid" are unwrapped.
        """
        if 'layout' not in data and isinstance(data.get('grid'), dict):
            grid = data['grid']
            data = {'metadata': {**grid.get('metadata', {}), **data.get('metadata', {})},
                    'layout': grid.get('layout', {})}
        return data

    def get_cell_objects(self) -> list[BaseCell]:
        """
        Get all cell records as cell model instances.

        Raises:
            ValueError: If a record has an unknown type or invalid fields
        """
        return [cell_from_dict(record) for record in self.layout.cells]

    def validate_snapshot(self, expected_version: Optional[str] = None) -> SnapshotValidation:
        """
        Check snapshot integrity.

        A version mismatch is reported but does not fail validation.

        Args:
            expected_version: Current format version (settings value if None)
        """
        expected_version = expected_version or settings.SNAPSHOT_VERSION
        issues: list[str] = []
        success = True

        if not self.metadata.timestamp or not self.metadata.version:
            issues.append('Missing or invalid metadata')
            success = False

        if self.metadata.canvas_width <= 0 or self.metadata.canvas_height <= 0:
            issues.append('Invalid canvas dimensions')
            success = False

        positions: set[tuple[int, int]] = set()
        content_ids: set[str] = set()
        for record in self.layout.cells:
            content_id = record.get('contentId')
            if content_id:
                if content_id in content_ids:
                    issues.append(f"Duplicate content id {content_id!r}")
                    success = False
                content_ids.add(content_id)

            row, col = record.get('row'), record.get('col')
            if not isinstance(row, int) or not isinstance(col, int):
                issues.append(f"Cell without position: {record.get('contentId')}")
                success = False
                continue
            if row >= self.layout.rows:
                issues.append(f"Cell row {row} outside layout with {self.layout.rows} rows")
                success = False
            if (row, col) in positions:
                issues.append(f"Duplicate cell position [{row}][{col}]")
                success = False
            positions.add((row, col))

        if self.metadata.version != expected_version:
            issues.append(
                f"Version mismatch: snapshot {self.metadata.version}, current {expected_version}")

        return SnapshotValidation(success=success, issues=issues)

    def get_info(self) -> dict[str, Any]:
        """Get human-readable snapshot information."""
        animated = sum(1 for record in self.layout.cells if record.get('animation'))
        return {
            'timestamp': time.strftime(
                '%Y-%m-%d %H:%M:%S', time.localtime(self.metadata.timestamp / 1000)),
            'version': self.metadata.version,
            'gridCells': len(self.layout.cells),
            'activeAnimations': animated,
            'canvasSize': f"{self.metadata.canvas_width:g}x{self.metadata.canvas_height:g}",
            'isValid': self.validate_snapshot().success,
        }

    def compare(self, other: 'GridSnapshot') -> dict[str, Any]:
        """
        Compare this snapshot with another.

        Returns:
            Dict with timeDiff (ms) and per-section change flags
        """
        return {
            'timeDiff': abs(self.metadata.timestamp - other.metadata.timestamp),
            'gridChanged': self.layout.model_dump() != other.layout.model_dump(),
            'canvasChanged': (
                (self.metadata.canvas_width, self.metadata.canvas_height)
                != (other.metadata.canvas_width, other.metadata.canvas_height)
            ),
            'animationChanged': (
                [record.get('animation') for record in self.layout.cells]
                != [record.get('animation') for record in other.layout.cells]
            ),
        }

    def clone(self) -> 'GridSnapshot':
        """Create a deep copy through the serialized form."""
        return GridSnapshot.from_api_dict(self.to_api_dict())

    def find_cell_record(self, content_id: str) -> Optional[dict[str, Any]]:
        """Get a cell record by content id."""
        for record in self.layout.cells:
            if record.get('contentId') == content_id:
                return record
        return None
