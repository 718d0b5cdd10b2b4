"""
Reconciliation - re-attaches state from the old matrix onto a rebuilt one.

A rebuild throws every cell away. What survives is keyed by content id:

Phase A (capture, before build):
    - animations of all cells            -> {content_id: CellAnimation}
    - layer moves of all cells           -> {content_id: LayerId}
    - payloads of non-empty content cells -> waiting list (appended after
      items still waiting from earlier rebuilds)

Phase C (restore animations/layers): cells whose content id recurs get a
copy of the captured animation and layer. Text lines whose text changed
have a new content id and start without animation.

Phase D (restore waiting content): waiting items are processed oldest
first. Each lands on the empty content cell whose center is nearest to the
item's last center (plain Euclidean distance, first cell in matrix scan
order wins ties). A cell receives at most one item. Items with nowhere to
go stay queued for the next rebuild.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Optional, Sequence, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from gridforge.cells import (
    BaseCell,
    CellAnimation,
    ContentCell,
    EmptyContent,
    FillContent,
    MediaContent,
    TextBlockContent,
    content_from_dict,
)
from gridforge.geometry import Point, calculate_distance
from gridforge.layers import LayerId, LayerRegistry

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from .builder import Matrix


class WaitingItem(BaseModel):
    """Content that lost its cell and has not found a new one yet."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra='ignore',
        use_enum_values=True,
    )

    content_id: str = Field(alias='contentId')
    content: Union[EmptyContent, MediaContent, TextBlockContent, FillContent]
    last_center: Point = Field(alias='lastCenter')
    animation: Optional[CellAnimation] = Field(default=None)
    layer: LayerId = Field(default=LayerId.BEHIND_TEXT.value)

    @field_validator('content', mode='before')
    @classmethod
    def _coerce_content(cls, v: Any) -> Any:
        if v is None or isinstance(v, dict):
            return content_from_dict(v)
        return v

    @classmethod
    def from_cell(cls, cell: ContentCell) -> 'WaitingItem':
        """Capture a content cell's payload, position and animation."""
        return cls(
            content_id=cell.content_id,
            content=cell.content.model_copy(deep=True),
            last_center=cell.center(),
            animation=cell.animation.model_copy() if cell.animation is not None else None,
            layer=cell.layer,
        )

    def to_api_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode='json')


# ===== Phase A: capture =====

def capture_animation_state(cells: Iterable[BaseCell]) -> dict[str, CellAnimation]:
    """
    Record the animation of every animated cell.

    Returns:
        Mapping of content id to an independent copy of the animation
    """
    state: dict[str, CellAnimation] = {}
    for cell in cells:
        if cell.animation is not None:
            state[cell.content_id] = cell.animation.model_copy()
    return state


def capture_layer_state(cells: Iterable[BaseCell]) -> dict[str, str]:
    """Record layer assignments that differ from a cell's type default."""
    state: dict[str, str] = {}
    for cell in cells:
        default = LayerRegistry.default_layer_for(cell)
        if LayerId(cell.layer) != default:
            state[cell.content_id] = LayerId(cell.layer).value
    return state


def capture_waiting_content(
    cells: Iterable[BaseCell],
    waiting: Sequence[WaitingItem] = (),
) -> list[WaitingItem]:
    """
    Queue the payload of every non-empty content cell.

    Items already waiting keep their place at the front of the queue.

    Args:
        cells: Cells of the matrix about to be discarded
        waiting: Items left over from earlier rebuilds

    Returns:
        New waiting list (the input sequence is not modified)
    """
    queue = [item.model_copy(deep=True) for item in waiting]
    captured = 0
    for cell in cells:
        if isinstance(cell, ContentCell) and not cell.is_empty():
            queue.append(WaitingItem.from_cell(cell))
            captured += 1
    logger.debug(f"Captured {captured} content payloads, {len(queue)} waiting in total")
    return queue


# ===== Phase C: restore animations and layers =====

def restore_animation_state(cells: Iterable[BaseCell], state: dict[str, CellAnimation]) -> int:
    """
    Recreate captured animations on cells whose content id recurs.

    Returns:
        Number of animations restored
    """
    restored = 0
    for cell in cells:
        captured = state.get(cell.content_id)
        if captured is None:
            continue
        animation = cell.set_animation(captured.kind, captured.intensity, captured.speed)
        if captured.is_playing:
            animation.play()
        restored += 1
    return restored


def restore_layer_state(
    cells: Iterable[BaseCell],
    state: dict[str, str],
    registry: LayerRegistry,
) -> int:
    """
    Move cells whose content id recurs back to their captured layer.

    Returns:
        Number of cells moved
    """
    moved = 0
    for cell in cells:
        layer = state.get(cell.content_id)
        if layer is not None:
            registry.assign(cell, layer)
            moved += 1
    return moved


# ===== Phase D: restore waiting content =====

def _nearest_index(point: Point, cells: Sequence[BaseCell]) -> Optional[int]:
    if not cells:
        return None
    centers = np.array([cell.center().as_tuple() for cell in cells], dtype=np.float64)
    distances = np.hypot(centers[:, 0] - point.x, centers[:, 1] - point.y)
    # argmin returns the first minimum, so scan order breaks ties
    return int(np.argmin(distances))


def find_nearest_cell(point: Point, cells: Sequence[BaseCell]) -> Optional[BaseCell]:
    """
    Find the cell whose center is closest to a point.

    Ties resolve to the earliest cell in the sequence.

    Returns:
        Nearest cell, or None if the sequence is empty
    """
    index = _nearest_index(point, cells)
    return cells[index] if index is not None else None


def restore_waiting_content(
    cells: Iterable[BaseCell],
    waiting: Sequence[WaitingItem],
    registry: Optional[LayerRegistry] = None,
) -> list[WaitingItem]:
    """
    Place waiting items onto the nearest empty content cells.

    The landing cell takes over the item's payload, animation, layer and
    content id.

    Args:
        cells: Cells of the new matrix in scan order
        waiting: Queue of items, oldest first
        registry: Layer registry to move landing cells in (optional)

    Returns:
        Items that found no cell, in their original order
    """
    available = [
        cell for cell in cells
        if isinstance(cell, ContentCell) and cell.is_empty()
    ]
    remaining: list[WaitingItem] = []

    for item in waiting:
        index = _nearest_index(item.last_center, available)
        if index is None:
            remaining.append(item)
            continue

        target = available.pop(index)
        distance = calculate_distance(item.last_center, target.center())
        target.content = item.content.model_copy(deep=True)
        target.content_id = item.content_id
        target.animation = item.animation.model_copy() if item.animation is not None else None
        if registry is not None:
            registry.assign(target, item.layer)
        else:
            target.layer = LayerId(item.layer).value
        logger.debug(
            f"Placed {item.content.kind} {item.content_id} on cell {target.display_id} "
            f"({distance:.1f}px from its last position)")

    return remaining


def check_identity(matrix: Matrix) -> None:
    """Assert that no two live cells share a content id."""
    seen: set[str] = set()
    for row in matrix:
        for cell in row or ():
            if cell is None:
                continue
            assert cell.content_id not in seen, f"Duplicate content id {cell.content_id!r}"
            seen.add(cell.content_id)
