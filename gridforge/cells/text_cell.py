"""
TextLineCell - Grid cell holding one line of the main text.

The identity of a text-line cell is "being this line of text": its
contentId is derived from the line index and the text, so an unchanged
line keeps its id across rebuilds and an edited line gets a new one.
"""

import hashlib
from typing import Any, ClassVar, Literal

from pydantic import Field

from gridforge.layers.layer import LayerId

from .base import BaseCell, CellType
from .content import TextStyle


def text_content_id(line_index: int, text: str) -> str:
    """
    Derive the content id of a text line.

    Args:
        line_index: Index of the line in the main text
        text: Line text

    Returns:
        Id of the form "text-{line_index}-{digest}"
    """
    digest = hashlib.sha1(text.encode('utf-8')).hexdigest()[:12]
    return f"text-{line_index}-{digest}"


class TextLineCell(BaseCell):
    """
    Cell for a main text line.

    Serialization format:
    {
        "type": "text-line",
        "text": "HELLO",
        "lineIndex": 0,
        "style": {"fontSize": 48, "fontFamily": "Arial, sans-serif", ...},
        ...base cell properties
    }
    """

    VERSION: ClassVar[int] = 1
    cell_type: Literal["text-line"] = Field(default="text-line", alias="type")

    text: str = Field(default='')
    line_index: int = Field(default=0, ge=0, alias='lineIndex')
    style: TextStyle = Field(default_factory=TextStyle)

    layer: LayerId = Field(default=LayerId.TEXT.value)

    def model_post_init(self, __context: Any) -> None:
        """Derive the content id unless one was restored from data."""
        if not self.content_id:
            self.content_id = text_content_id(self.line_index, self.text)

    @classmethod
    def create(cls, text: str, line_index: int, row: int, col: int, **kwargs: Any) -> 'TextLineCell':
        """Create a text-line cell at a matrix position."""
        return cls(text=text, line_index=line_index, row=row, col=col, **kwargs)

    def set_text(self, text: str) -> str:
        """
        Replace the line text.

        The content id is recomputed, so animations keyed by the old id do
        not follow the edit.

        Returns:
            The new content id
        """
        self.text = text
        self.content_id = text_content_id(self.line_index, text)
        return self.content_id

    def update_style(self, **changes: Any) -> None:
        """
        Update text style properties.

        Accepts snake_case or camelCase names; unknown names are ignored.
        """
        aliases = {name: field.alias or name for name, field in TextStyle.model_fields.items()}
        data = self.style.model_dump(by_alias=True)
        for key, value in changes.items():
            data[aliases.get(key, key)] = value
        self.style = TextStyle.model_validate(data)

    @property
    def alignment(self) -> str:
        """Horizontal alignment of the line."""
        return self.style.alignment

    def is_empty(self) -> bool:
        """A text line is empty when its text is blank."""
        return not self.text.strip()

    @classmethod
    def migrate(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Migrate serialized data from older versions."""
        data = BaseCell.migrate(data)

        # Older records stored the cell type as 'main-text' and the layer
        # as 'main-text'
        if data.get('type') == 'main-text':
            data['type'] = CellType.TEXT_LINE
        if data.get('layer') in ('main-text', None):
            data['layer'] = LayerId.TEXT.value

        return data
