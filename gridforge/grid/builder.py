"""
Matrix construction from detector output.

Steps owned by the grid (the detector decides the layout):
1. Accept the detector's rows verbatim; rows may be ragged.
2. Instantiate a TextLineCell or ContentCell per region, copying bounds.
3. Assign display ids 1..N row-major, skipping absent slots.
4. Snapshot every cell's bounds as its animation rest position.

A row without regions is kept as [None] so row indices stay aligned.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional, Union

from pydantic import ValidationError

from gridforge.cells import BaseCell, ContentCell, TextLineCell, TextStyle
from gridforge.exceptions import GridBuildError
from gridforge.geometry import CanvasSize

from .detector import DetectionResult, EmptyRegion, TextRegion

logger = logging.getLogger(__name__)

Matrix = list[list[Optional[BaseCell]]]


def parse_detection(raw: Union[DetectionResult, dict[str, Any]]) -> DetectionResult:
    """
    Validate raw detector output into a DetectionResult.

    Raises:
        GridBuildError: If the output cannot be parsed
    """
    if isinstance(raw, DetectionResult):
        return raw
    if not isinstance(raw, dict):
        raise GridBuildError(f"Detector returned {type(raw).__name__}, expected a mapping")
    try:
        return DetectionResult.model_validate(raw)
    except ValidationError as e:
        raise GridBuildError(f"Malformed detector output: {e}") from e


def validate_detection(result: DetectionResult, canvas_size: CanvasSize) -> None:
    """
    Check detector output before anything is replaced.

    Ragged rows are legal; a row longer than the declared column count is
    not.

    Raises:
        GridBuildError: On negative dimensions or inconsistent row structure
    """
    if canvas_size.width < 0 or canvas_size.height < 0:
        raise GridBuildError(
            f"Negative canvas size: {canvas_size.width}x{canvas_size.height}")
    if result.rows < 0 or result.cols < 0:
        raise GridBuildError(f"Negative grid dimensions: {result.rows}x{result.cols}")
    if len(result.matrix) != result.rows:
        raise GridBuildError(
            f"Detector declared {result.rows} rows but returned {len(result.matrix)}")

    for r, row in enumerate(result.matrix):
        if row is None:
            continue
        if len(row) > max(result.cols, 1):
            raise GridBuildError(
                f"Row {r} has {len(row)} columns, more than the declared {result.cols}")
        for c, region in enumerate(row):
            if region is not None and not region.bounds.is_valid():
                raise GridBuildError(f"Region at [{r}][{c}] has invalid bounds: {region.bounds}")


def _create_cell(region: Union[TextRegion, EmptyRegion], row: int, col: int) -> BaseCell:
    if isinstance(region, TextRegion):
        return TextLineCell.create(
            region.text,
            region.line_index,
            row,
            col,
            bounds=region.bounds.model_copy(),
            style=region.style.model_copy() if region.style is not None else TextStyle(),
        )
    return ContentCell.create(row=row, col=col, bounds=region.bounds.model_copy())


def build_matrix(result: DetectionResult) -> Matrix:
    """
    Instantiate cells for every detected region.

    Args:
        result: Validated detector output

    Returns:
        Matrix of fresh cells (display ids and rest bounds not yet assigned)

    Raises:
        GridBuildError: If a region is rejected by its cell model
    """
    matrix: Matrix = []
    for r, row in enumerate(result.matrix):
        if not row:
            matrix.append([None])
            continue
        try:
            matrix.append([
                _create_cell(region, r, c) if region is not None else None
                for c, region in enumerate(row)
            ])
        except ValidationError as e:
            raise GridBuildError(f"Row {r} has a region that cannot become a cell: {e}") from e
    logger.debug(f"Built matrix: {len(matrix)} rows from {result.rows}x{result.cols} detector grid")
    return matrix


def iter_cells(matrix: Matrix) -> Iterator[BaseCell]:
    """Iterate the cells of a matrix row-major, skipping absent slots."""
    for row in matrix:
        if not row:
            continue
        for cell in row:
            if cell is not None:
                yield cell


def assign_sequential_ids(matrix: Matrix) -> int:
    """
    Assign display ids 1..N left-to-right, top-to-bottom.

    Returns:
        Number of cells numbered
    """
    count = 0
    for count, cell in enumerate(iter_cells(matrix), start=1):
        cell.display_id = count
    return count


def save_original_bounds(matrix: Matrix) -> None:
    """Snapshot current bounds as each cell's animation rest position."""
    for cell in iter_cells(matrix):
        cell.save_original_bounds()
