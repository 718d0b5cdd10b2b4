"""
Layer - A fixed-order compositing bucket for cells.

Four layers exist, rendered from lowest order to highest:

    background (0) < behind-text (1) < text (2) < above-text (3)

A layer keeps its cells in insertion order. Cells are tracked by object
identity because every rebuild creates fresh cell objects.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from gridforge.cells.base import BaseCell


class LayerId(str, Enum):
    """Layer identifiers."""
    BACKGROUND = "background"
    BEHIND_TEXT = "behind-text"
    TEXT = "text"
    ABOVE_TEXT = "above-text"


# Render order (lower numbers render first, behind)
LAYER_ORDER: dict[str, int] = {
    LayerId.BACKGROUND.value: 0,
    LayerId.BEHIND_TEXT.value: 1,
    LayerId.TEXT.value: 2,
    LayerId.ABOVE_TEXT.value: 3,
}

LAYER_NAMES: dict[str, str] = {
    LayerId.BACKGROUND.value: 'Background',
    LayerId.BEHIND_TEXT.value: 'Behind Text',
    LayerId.TEXT.value: 'Text',
    LayerId.ABOVE_TEXT.value: 'Above Text',
}


class Layer:
    """A single compositing layer."""

    def __init__(self, layer_id: LayerId, name: str, order: int, visible: bool = True):
        self.id = LayerId(layer_id)
        self.name = name
        self.order = order
        self.visible = visible
        self._cells: dict[int, BaseCell] = {}

    def add_cell(self, cell: BaseCell) -> None:
        """Add a cell to this layer and record the layer on the cell."""
        self._cells[id(cell)] = cell
        cell.layer = self.id.value

    def remove_cell(self, cell: BaseCell) -> bool:
        """
        Remove a cell from this layer.

        Returns:
            True if the cell was a member
        """
        return self._cells.pop(id(cell), None) is not None

    def has_cell(self, cell: BaseCell) -> bool:
        return id(cell) in self._cells

    def set_visible(self, visible: bool) -> None:
        self.visible = visible

    def get_cells(self) -> list[BaseCell]:
        """Get all cells in insertion order."""
        return list(self._cells.values())

    def get_cell_count(self) -> int:
        return len(self._cells)

    def clear(self) -> None:
        self._cells.clear()

    def __iter__(self) -> Iterator[BaseCell]:
        return iter(list(self._cells.values()))

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"Layer({self.id.value!r}, order={self.order}, visible={self.visible}, cells={len(self)})"
