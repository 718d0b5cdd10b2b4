"""
Grid - single owner of the cell matrix.

The Grid builds its matrix from detector output, numbers the cells and
keeps user state alive across rebuilds by running reconciliation:

    rebuild():  capture (A) -> build (B) -> restore animations/layers (C)
                -> place waiting content (D)

Consumers read cells through the query methods and change them through the
edit methods, addressing cells by content id. Cell references must not be
kept across a rebuild; the whole matrix is replaced.

Example:
    grid = Grid(detector, lambda: CanvasSize(width=1080, height=1350))
    grid.build(text_bounds, Padding(top=40, bottom=40, left=40, right=40))
    cell = grid.get_empty_content_cells()[0]
    grid.set_content(cell.content_id, MediaContent(ref='asset-1'))
    grid.rebuild()  # media follows the nearest empty cell
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence, Union

from pydantic import ValidationError

from gridforge.cells import (
    BaseCell,
    BaseContent,
    CellAnimation,
    ContentCell,
    TextLineCell,
)
from gridforge.config import Settings
from gridforge.config import settings as default_settings
from gridforge.exceptions import (
    CellNotFoundError,
    GridBuildError,
    GridError,
    RebuildInProgressError,
    SnapshotError,
)
from gridforge.geometry import CanvasSize, Padding
from gridforge.layers import Layer, LayerId, LayerRegistry

from . import builder
from .detector import Detector, TextLineBounds
from .reconcile import (
    WaitingItem,
    capture_animation_state,
    capture_layer_state,
    capture_waiting_content,
    check_identity,
    restore_animation_state,
    restore_layer_state,
    restore_waiting_content,
)
from .snapshot import GridSnapshot, SnapshotLayout, SnapshotMetadata

logger = logging.getLogger(__name__)

CanvasSizeProvider = Callable[[], CanvasSize]
TextBoundsInput = Sequence[Union[TextLineBounds, dict[str, Any]]]


class Grid:
    """
    Cell matrix with durable identities and state-preserving rebuilds.

    Args:
        detector: Region detector producing the logical matrix
        canvas_size_provider: Zero-argument callable returning the canvas size
        layers: Layer registry to populate (a fresh one if None)
        settings: Settings override (module settings if None)
    """

    def __init__(
        self,
        detector: Detector,
        canvas_size_provider: CanvasSizeProvider,
        *,
        layers: Optional[LayerRegistry] = None,
        settings: Optional[Settings] = None,
    ):
        self.detector = detector
        self.canvas_size_provider = canvas_size_provider
        self.layers = layers if layers is not None else LayerRegistry()
        self.settings = settings if settings is not None else default_settings

        self._matrix: builder.Matrix = []
        self.rows = 0
        self.cols = 0
        self.is_ready = False
        self.is_locked = False
        self.build_count = 0

        self._waiting: list[WaitingItem] = []
        self._rebuilding = False

        self.last_text_bounds: list[TextLineBounds] = []
        self.last_padding = Padding()

    # ===== State =====

    @property
    def matrix(self) -> builder.Matrix:
        """Copy of the row lists. The cells themselves are shared."""
        return [list(row) for row in self._matrix]

    @property
    def waiting_content(self) -> tuple[WaitingItem, ...]:
        return tuple(self._waiting)

    @property
    def waiting_count(self) -> int:
        return len(self._waiting)

    @property
    def is_starved(self) -> bool:
        """True when more content is waiting than the warning threshold allows."""
        return len(self._waiting) > self.settings.WAITING_WARN_THRESHOLD

    def clear_waiting_content(self) -> int:
        """
        Drop all waiting content.

        Returns:
            Number of items dropped
        """
        count = len(self._waiting)
        self._waiting = []
        return count

    def lock(self) -> None:
        """Refuse rebuilds until unlock() is called."""
        self.is_locked = True

    def unlock(self) -> None:
        self.is_locked = False

    # ===== Build =====

    def _resolve_inputs(
        self,
        text_bounds: Optional[TextBoundsInput],
        padding: Optional[Padding],
    ) -> tuple[list[TextLineBounds], Padding]:
        """
        Fill in omitted inputs from the previous build and validate the rest.

        Raises:
            GridBuildError: If a text line box or the padding is malformed
        """
        try:
            if text_bounds is None:
                lines = [line.model_copy() for line in self.last_text_bounds]
            else:
                lines = [
                    line if isinstance(line, TextLineBounds) else TextLineBounds.model_validate(line)
                    for line in text_bounds
                ]
            if padding is None:
                padding = self.last_padding.model_copy()
            elif not isinstance(padding, Padding):
                padding = Padding.model_validate(padding)
        except ValidationError as e:
            raise GridBuildError(f"Invalid build input: {e}") from e
        return lines, padding

    def _canvas_size(self) -> CanvasSize:
        try:
            size = self.canvas_size_provider()
        except GridError:
            raise
        except Exception as e:
            raise GridBuildError(f"Canvas size provider failed: {e}") from e
        if isinstance(size, CanvasSize):
            return size
        try:
            return CanvasSize.model_validate(size)
        except ValidationError as e:
            raise GridBuildError(f"Invalid canvas size: {size!r}") from e

    def _build_matrix(
        self,
        lines: list[TextLineBounds],
        padding: Padding,
    ) -> tuple[builder.Matrix, int, int]:
        """
        Run the detector and turn its output into a numbered matrix.

        Nothing on the grid is modified here.

        Raises:
            GridBuildError: If the detector fails or returns unusable output
        """
        canvas_size = self._canvas_size()
        try:
            raw = self.detector.detect(canvas_size, lines, padding)
        except GridError:
            raise
        except Exception as e:
            raise GridBuildError(f"Detector failed: {e}") from e

        result = builder.parse_detection(raw)
        builder.validate_detection(result, canvas_size)

        matrix = builder.build_matrix(result)
        builder.assign_sequential_ids(matrix)
        builder.save_original_bounds(matrix)
        return matrix, result.rows, result.cols

    def _commit(
        self,
        matrix: builder.Matrix,
        rows: int,
        cols: int,
    ) -> None:
        """Replace the live matrix and repopulate the layers from it."""
        self._matrix = matrix
        self.rows = rows
        self.cols = cols
        self.layers.clear()
        for cell in builder.iter_cells(matrix):
            self.layers.assign_default(cell)
        self.is_ready = True
        self.build_count += 1

    def build(
        self,
        text_bounds: Optional[TextBoundsInput] = None,
        padding: Optional[Padding] = None,
    ) -> bool:
        """
        Build a fresh matrix without carrying any state over.

        Animations, layer moves and content of the current cells are
        discarded. The waiting list is left as it is.

        Args:
            text_bounds: Main text line boxes (previous input if None)
            padding: Canvas padding (previous input if None)

        Returns:
            True on success. On failure the previous matrix stays in place.
        """
        try:
            lines, padding = self._resolve_inputs(text_bounds, padding)
            matrix, rows, cols = self._build_matrix(lines, padding)
        except GridBuildError as e:
            logger.error(f"Grid build failed, keeping previous layout: {e}")
            return False

        self._commit(matrix, rows, cols)
        self.last_text_bounds = lines
        self.last_padding = padding
        logger.info(f"Built grid {rows}x{cols} with {len(self.get_all_cells())} cells")
        return True

    def rebuild(
        self,
        text_bounds: Optional[TextBoundsInput] = None,
        padding: Optional[Padding] = None,
    ) -> bool:
        """
        Rebuild the matrix and carry state over by content id.

        Args:
            text_bounds: Main text line boxes (previous input if None)
            padding: Canvas padding (previous input if None)

        Returns:
            True on success, False if the grid is locked or the build failed.
            On failure matrix, layers and waiting list are unchanged.

        Raises:
            RebuildInProgressError: If called while a rebuild is running
        """
        if self._rebuilding:
            raise RebuildInProgressError("Rebuild already in progress")
        if self.is_locked:
            logger.warning("Grid is locked, rebuild skipped")
            return False

        self._rebuilding = True
        try:
            return self._rebuild(text_bounds, padding)
        finally:
            self._rebuilding = False

    def _rebuild(
        self,
        text_bounds: Optional[TextBoundsInput],
        padding: Optional[Padding],
    ) -> bool:
        try:
            lines, padding = self._resolve_inputs(text_bounds, padding)
        except GridBuildError as e:
            logger.error(f"Grid rebuild failed, keeping previous layout: {e}")
            return False

        # Phase A
        old_cells = list(builder.iter_cells(self._matrix))
        animation_state = capture_animation_state(old_cells)
        layer_state = capture_layer_state(old_cells)
        waiting = capture_waiting_content(old_cells, self._waiting)

        # Phase B
        try:
            matrix, rows, cols = self._build_matrix(lines, padding)
        except GridBuildError as e:
            logger.error(f"Grid rebuild failed, keeping previous layout: {e}")
            return False

        self._commit(matrix, rows, cols)
        self.last_text_bounds = lines
        self.last_padding = padding

        # Phase C
        new_cells = list(builder.iter_cells(matrix))
        restored = restore_animation_state(new_cells, animation_state)
        restore_layer_state(new_cells, layer_state, self.layers)

        # Phase D
        self._waiting = restore_waiting_content(new_cells, waiting, self.layers)

        if self.settings.CHECK_IDENTITY:
            check_identity(self._matrix)

        logger.info(
            f"Rebuilt grid {rows}x{cols}: {restored} animations restored, "
            f"{len(waiting) - len(self._waiting)} payloads placed, {len(self._waiting)} waiting")
        if self.is_starved:
            logger.warning(
                f"{len(self._waiting)} content items are waiting for a free cell "
                f"(threshold {self.settings.WAITING_WARN_THRESHOLD})")
        return True

    def assign_sequential_ids(self) -> int:
        """Renumber display ids 1..N row-major."""
        return builder.assign_sequential_ids(self._matrix)

    def save_original_bounds(self) -> None:
        """Take the current bounds of every cell as its animation rest position."""
        builder.save_original_bounds(self._matrix)

    # ===== Queries =====

    def get_cell(self, row: int, col: int) -> Optional[BaseCell]:
        """Get the cell at a matrix position, None for absent slots."""
        if not 0 <= row < len(self._matrix):
            return None
        cells = self._matrix[row]
        if not 0 <= col < len(cells):
            return None
        return cells[col]

    def get_all_cells(self) -> list[BaseCell]:
        """All cells row-major."""
        return list(builder.iter_cells(self._matrix))

    def get_cell_by_id(self, display_id: int) -> Optional[BaseCell]:
        """
        Get a cell by its display id.

        Display ids change on every build; use get_cell_by_content_id()
        to find a cell again after a rebuild.
        """
        for cell in builder.iter_cells(self._matrix):
            if cell.display_id == display_id:
                return cell
        return None

    def get_cell_by_content_id(self, content_id: str) -> Optional[BaseCell]:
        for cell in builder.iter_cells(self._matrix):
            if cell.content_id == content_id:
                return cell
        return None

    def get_cell_at(self, x: float, y: float) -> Optional[BaseCell]:
        """
        Hit-test a canvas point.

        Visible layers are searched from the top; within a layer the most
        recently added cell wins.
        """
        for layer in reversed(self.layers.get_layers(include_hidden=False)):
            for cell in reversed(layer.get_cells()):
                if cell.contains(x, y):
                    return cell
        return None

    def get_text_cells(self) -> list[TextLineCell]:
        return [cell for cell in builder.iter_cells(self._matrix) if isinstance(cell, TextLineCell)]

    def get_content_cells(self) -> list[ContentCell]:
        return [cell for cell in builder.iter_cells(self._matrix) if isinstance(cell, ContentCell)]

    def get_empty_content_cells(self) -> list[ContentCell]:
        """Content cells available for new content."""
        return [cell for cell in self.get_content_cells() if cell.is_empty()]

    def get_cells_in_row(self, row: int) -> list[BaseCell]:
        if not 0 <= row < len(self._matrix):
            return []
        return [cell for cell in self._matrix[row] if cell is not None]

    def get_cells_in_column(self, col: int) -> list[BaseCell]:
        """Cells at a logical column index. Rows may be ragged."""
        return [cell for cell in builder.iter_cells(self._matrix) if cell.col == col]

    def get_animated_cells(self) -> list[BaseCell]:
        return [cell for cell in builder.iter_cells(self._matrix) if cell.has_animation()]

    def cells_in_order(self) -> list[BaseCell]:
        """Cells of visible layers in render order."""
        return self.layers.cells_in_order()

    # ===== Edits =====

    def _require(self, content_id: str, cell_class: type[BaseCell] = BaseCell) -> Any:
        cell = self.get_cell_by_content_id(content_id)
        if cell is None or not isinstance(cell, cell_class):
            kind = 'cell' if cell_class is BaseCell else cell_class.__name__
            raise CellNotFoundError(f"No {kind} with content id {content_id!r}")
        return cell

    def set_content(
        self,
        content_id: str,
        content: Union[BaseContent, dict[str, Any], None],
    ) -> ContentCell:
        """
        Replace the payload of a content cell.

        Raises:
            CellNotFoundError: If no content cell has this id
        """
        cell: ContentCell = self._require(content_id, ContentCell)
        cell.set_content(content)
        return cell

    def set_content_type(self, content_id: str, kind: str) -> ContentCell:
        """Switch a content cell to another payload kind with default values."""
        cell: ContentCell = self._require(content_id, ContentCell)
        cell.set_content_type(kind)
        return cell

    def clear_content(self, content_id: str) -> ContentCell:
        cell: ContentCell = self._require(content_id, ContentCell)
        cell.clear_content()
        return cell

    def set_text(self, content_id: str, text: str) -> str:
        """
        Change the text of a text line in place.

        Returns:
            The line's new content id
        """
        cell: TextLineCell = self._require(content_id, TextLineCell)
        return cell.set_text(text)

    def update_text_style(self, content_id: str, **changes: Any) -> TextLineCell:
        cell: TextLineCell = self._require(content_id, TextLineCell)
        cell.update_style(**changes)
        return cell

    def set_animation(
        self,
        content_id: str,
        kind: str = 'sway',
        intensity: Optional[float] = None,
        speed: Optional[float] = None,
    ) -> CellAnimation:
        """
        Attach an animation to a cell, replacing any existing one.

        Raises:
            CellNotFoundError: If no cell has this id
            ValueError: If the kind is unknown
        """
        cell: BaseCell = self._require(content_id)
        if intensity is None:
            intensity = self.settings.DEFAULT_ANIMATION_INTENSITY
        if speed is None:
            speed = self.settings.DEFAULT_ANIMATION_SPEED
        return cell.set_animation(kind, intensity, speed)

    def remove_animation(self, content_id: str) -> None:
        cell: BaseCell = self._require(content_id)
        cell.remove_animation()

    def assign_layer(self, content_id: str, layer: Union[LayerId, str]) -> Layer:
        """
        Move a cell to another layer. The move survives rebuilds.

        Raises:
            CellNotFoundError: If no cell has this id
            LayerError: If the layer is unknown
        """
        cell: BaseCell = self._require(content_id)
        return self.layers.assign(cell, layer)

    # ===== Animation control =====

    def play_all_animations(self) -> int:
        cells = self.get_animated_cells()
        for cell in cells:
            cell.animation.play()
        return len(cells)

    def pause_all_animations(self) -> int:
        cells = self.get_animated_cells()
        for cell in cells:
            cell.animation.pause()
        return len(cells)

    def reset_all_animations(self) -> int:
        """Stop all animations and move cells back to their rest bounds."""
        cells = self.get_animated_cells()
        for cell in cells:
            cell.reset_to_original()
        return len(cells)

    # ===== Serialization =====

    def create_snapshot(self) -> GridSnapshot:
        """Capture the current matrix as a snapshot."""
        canvas_size = self._canvas_size()
        return GridSnapshot(
            metadata=SnapshotMetadata(
                version=self.settings.SNAPSHOT_VERSION,
                canvas_width=canvas_size.width,
                canvas_height=canvas_size.height,
            ),
            layout=SnapshotLayout(
                rows=self.rows,
                cols=self.cols,
                cells=[cell.to_api_dict() for cell in builder.iter_cells(self._matrix)],
            ),
        )

    def serialize(self) -> dict[str, Any]:
        """Serialize the grid to a JSON-compatible dictionary."""
        return self.create_snapshot().to_api_dict()

    def deserialize(self, data: dict[str, Any]) -> None:
        """
        Restore a serialized grid exactly, without reconciliation.

        The waiting list is cleared. Display ids are renumbered 1..N.

        Raises:
            SnapshotError: If the data is malformed or fails validation
        """
        try:
            snapshot = GridSnapshot.from_api_dict(data)
        except ValidationError as e:
            raise SnapshotError(f"Malformed snapshot: {e}") from e

        validation = snapshot.validate_snapshot(self.settings.SNAPSHOT_VERSION)
        if not validation.success:
            raise SnapshotError(f"Invalid snapshot: {'; '.join(validation.issues)}")
        for issue in validation.issues:
            logger.warning(f"Snapshot: {issue}")

        try:
            cells = snapshot.get_cell_objects()
        except ValueError as e:
            raise SnapshotError(f"Invalid cell record: {e}") from e

        rows = snapshot.layout.rows
        matrix: builder.Matrix = [[] for _ in range(rows)]
        for cell in cells:
            row = matrix[cell.row]
            if len(row) <= cell.col:
                row.extend([None] * (cell.col + 1 - len(row)))
            row[cell.col] = cell
        for r, row in enumerate(matrix):
            if not row:
                matrix[r] = [None]

        builder.assign_sequential_ids(matrix)
        for cell in cells:
            if cell.original_bounds is None:
                cell.save_original_bounds()

        self._commit(matrix, rows, snapshot.layout.cols)
        self._waiting = []
        logger.info(f"Restored grid {rows}x{snapshot.layout.cols} with {len(cells)} cells")

    def restore_snapshot(self, snapshot: GridSnapshot) -> bool:
        """
        Restore a snapshot.

        Returns:
            True on success. On failure the grid is unchanged.
        """
        try:
            self.deserialize(snapshot.to_api_dict())
        except SnapshotError as e:
            logger.error(f"Failed to restore snapshot: {e}")
            return False
        return True

    # ===== Diagnostics =====

    def get_status(self) -> dict[str, Any]:
        """Get a summary of the grid state."""
        cells = self.get_all_cells()
        content_cells = [cell for cell in cells if isinstance(cell, ContentCell)]
        return {
            'isReady': self.is_ready,
            'isLocked': self.is_locked,
            'rows': self.rows,
            'cols': self.cols,
            'cellCount': len(cells),
            'textCells': len(cells) - len(content_cells),
            'contentCells': len(content_cells),
            'emptyContentCells': sum(1 for cell in content_cells if cell.is_empty()),
            'animatedCells': sum(1 for cell in cells if cell.has_animation()),
            'waitingContent': len(self._waiting),
            'buildCount': self.build_count,
        }

    def get_detailed_status(self) -> dict[str, Any]:
        """Get the summary plus per-layer, per-cell and waiting list details."""
        status = self.get_status()
        status['layers'] = self.layers.get_layer_stats()
        status['cells'] = [str(cell) for cell in self.get_all_cells()]
        status['waiting'] = [item.to_api_dict() for item in self._waiting]
        return status

    def format_grid(self) -> str:
        """
        Render the matrix as text, one line per row.

        Example:
            Row 0: [HELLO][empty]
            Row 1: [media][-]
        """
        lines = []
        for r, row in enumerate(self._matrix):
            labels = []
            for cell in row:
                if cell is None:
                    labels.append('[-]')
                elif isinstance(cell, TextLineCell):
                    labels.append(f"[{cell.text}]")
                else:
                    labels.append(f"[{cell.content_kind}]")
            lines.append(f"Row {r}: {''.join(labels)}")
        return '\n'.join(lines)

    def __repr__(self) -> str:
        return f"Grid({self.rows}x{self.cols}, cells={len(self.get_all_cells())}, ready={self.is_ready})"
