"""LayerRegistry - assigns cells to compositing layers and orders them for rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Union

from gridforge.exceptions import LayerError

from .layer import LAYER_NAMES, LAYER_ORDER, Layer, LayerId

if TYPE_CHECKING:
    from gridforge.cells.base import BaseCell


LayerRef = Union[LayerId, str]


class LayerRegistry:
    """
    Owns the fixed set of layers and the cell-to-layer membership.

    A cell belongs to at most one layer; assign() moves it.
    """

    def __init__(self):
        self._layers: dict[str, Layer] = {}
        self._init_default_layers()

    def _init_default_layers(self) -> None:
        self._layers = {
            layer_id: Layer(LayerId(layer_id), LAYER_NAMES[layer_id], order)
            for layer_id, order in LAYER_ORDER.items()
        }

    def _resolve(self, layer: LayerRef) -> Layer:
        try:
            key = LayerId(layer).value
        except ValueError:
            raise LayerError(f"Unknown layer: {layer!r}") from None
        return self._layers[key]

    # ===== Lookup =====

    def get_layer(self, layer: LayerRef) -> Layer:
        """
        Get a layer by id.

        Raises:
            LayerError: If the layer id is unknown
        """
        return self._resolve(layer)

    def get_layers(self, include_hidden: bool = True) -> list[Layer]:
        """Get layers sorted by render order."""
        layers = sorted(self._layers.values(), key=lambda l: l.order)
        if include_hidden:
            return layers
        return [layer for layer in layers if layer.visible]

    def layer_of(self, cell: BaseCell) -> Optional[Layer]:
        """Get the layer that currently holds a cell, if any."""
        for layer in self._layers.values():
            if layer.has_cell(cell):
                return layer
        return None

    @staticmethod
    def default_layer_for(cell: BaseCell) -> LayerId:
        """Text lines render on the text layer; everything else behind it."""
        if cell.is_text_line():
            return LayerId.TEXT
        return LayerId.BEHIND_TEXT

    # ===== Membership =====

    def assign(self, cell: BaseCell, layer: LayerRef) -> Layer:
        """
        Move a cell onto a layer.

        Args:
            cell: Cell to assign
            layer: Target layer id

        Returns:
            The target layer

        Raises:
            LayerError: If the layer id is unknown
        """
        target = self._resolve(layer)
        current = self.layer_of(cell)
        if current is not None and current is not target:
            current.remove_cell(cell)
        target.add_cell(cell)
        return target

    def assign_default(self, cell: BaseCell) -> Layer:
        """Assign a cell to the layer it names, falling back to its type default."""
        try:
            return self.assign(cell, cell.layer)
        except LayerError:
            return self.assign(cell, self.default_layer_for(cell))

    def remove(self, cell: BaseCell) -> bool:
        """Remove a cell from whichever layer holds it."""
        current = self.layer_of(cell)
        if current is None:
            return False
        return current.remove_cell(cell)

    def cells_in_order(self) -> list[BaseCell]:
        """
        Get all cells of visible layers in render order.

        Layers ascend by order; within a layer cells keep insertion order.
        """
        cells: list[BaseCell] = []
        for layer in self.get_layers(include_hidden=False):
            cells.extend(layer.get_cells())
        return cells

    # ===== Visibility =====

    def set_visible(self, layer: LayerRef, visible: bool) -> None:
        """Show or hide a layer. Hidden cells stay in the matrix."""
        self._resolve(layer).set_visible(visible)

    def is_visible(self, layer: LayerRef) -> bool:
        return self._resolve(layer).visible

    # ===== Housekeeping =====

    def clear(self) -> None:
        """Remove all cells from all layers, keeping visibility."""
        for layer in self._layers.values():
            layer.clear()

    def reset(self) -> None:
        """Restore the default layer set (empty and visible)."""
        self.clear()
        self._init_default_layers()

    def get_layer_stats(self) -> dict[str, dict[str, Any]]:
        """Get per-layer statistics."""
        return {
            layer.id.value: {
                'name': layer.name,
                'order': layer.order,
                'visible': layer.visible,
                'cellCount': layer.get_cell_count(),
            }
            for layer in self.get_layers()
        }
