"""
Grid Cell Models

Pydantic models for the cells of a grid matrix.

Cell Hierarchy:
    BaseCell (shared fields, abstract)
    ├── TextLineCell (type: 'text-line')
    └── ContentCell (type: 'content')

Content cells carry one payload from gridforge.cells.content; any cell may
carry a CellAnimation.
"""

from typing import Any, Union

from .animation import AnimationKind, CellAnimation
from .base import BaseCell, CellType
from .content import (
    BaseContent,
    Content,
    ContentKind,
    EmptyContent,
    FillContent,
    MediaContent,
    Placement,
    TextBlockContent,
    TextStyle,
    content_from_dict,
    default_content,
)
from .content_cell import ContentCell
from .text_cell import TextLineCell, text_content_id

Cell = Union[TextLineCell, ContentCell]

# Cell type registry for deserialization
_CELL_REGISTRY: dict[str, type[BaseCell]] = {
    'text-line': TextLineCell,
    'content': ContentCell,
    # Legacy type names
    'main-text': TextLineCell,
    'spot': ContentCell,
}


def get_cell_class(cell_type: str) -> type[BaseCell]:
    """
    Get the cell class for a cell type.

    Args:
        cell_type: Cell type string ('text-line', 'content')

    Returns:
        Cell class

    Raises:
        ValueError: If the type is unknown
    """
    try:
        return _CELL_REGISTRY[cell_type]
    except KeyError:
        raise ValueError(f"Unknown cell type: {cell_type!r}") from None


def cell_from_dict(data: dict[str, Any]) -> BaseCell:
    """
    Create a cell instance from a serialized dictionary.

    Automatically determines the cell type and uses the appropriate class.

    Args:
        data: Serialized cell data

    Returns:
        Cell instance of the appropriate type
    """
    return BaseCell.from_api_dict(data)


__all__ = [
    # Base
    'BaseCell',
    'Cell',
    'CellType',
    # Cell types
    'TextLineCell',
    'ContentCell',
    'text_content_id',
    # Animation
    'AnimationKind',
    'CellAnimation',
    # Content payloads
    'BaseContent',
    'Content',
    'ContentKind',
    'EmptyContent',
    'MediaContent',
    'TextBlockContent',
    'FillContent',
    'Placement',
    'TextStyle',
    'content_from_dict',
    'default_content',
    # Utilities
    'get_cell_class',
    'cell_from_dict',
]
