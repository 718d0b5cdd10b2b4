"""
ContentCell - Grid cell for an open content area.

Content cells hold one payload (empty, media, text block or fill). Their
contentId is a random uuid assigned once at creation and never recomputed;
reconciliation hands it to whichever new cell receives the payload after a
rebuild.
"""

import uuid
from typing import Any, ClassVar, Literal, Union

from pydantic import Field, field_validator

from gridforge.layers.layer import LayerId

from .base import BaseCell
from .content import (
    BaseContent,
    ContentKind,
    EmptyContent,
    FillContent,
    MediaContent,
    TextBlockContent,
    content_from_dict,
    default_content,
)


class ContentCell(BaseCell):
    """
    Cell for a content area.

    Serialization format:
    {
        "type": "content",
        "content": {"kind": "media", "ref": "asset-1", "scale": 1.0, ...},
        ...base cell properties
    }
    """

    VERSION: ClassVar[int] = 1
    cell_type: Literal["content"] = Field(default="content", alias="type")

    content_id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias='contentId')
    content: Union[EmptyContent, MediaContent, TextBlockContent, FillContent] = Field(
        default_factory=EmptyContent)

    layer: LayerId = Field(default=LayerId.BEHIND_TEXT.value)

    @field_validator('content', mode='before')
    @classmethod
    def _coerce_content(cls, v: Any) -> Any:
        """Accept dicts (dispatched on "kind") and None for empty."""
        if v is None or isinstance(v, dict):
            return content_from_dict(v)
        return v

    @classmethod
    def create(cls, content_kind: str = ContentKind.EMPTY.value, row: int = 0, col: int = 0,
               **kwargs: Any) -> 'ContentCell':
        """Create a content cell at a matrix position with the kind's default payload."""
        return cls(content=default_content(content_kind), row=row, col=col, **kwargs)

    # ===== Content =====

    @property
    def content_kind(self) -> str:
        return self.content.kind

    def set_content_type(self, kind: str) -> BaseContent:
        """
        Switch the payload kind, resetting it to that kind's defaults.

        Returns:
            The new payload
        """
        self.content = default_content(kind)
        return self.content

    def set_content(self, content: Union[BaseContent, dict[str, Any], None]) -> None:
        """
        Replace the payload in place.

        Used by consumers whose media resolves after the cell was created.
        """
        self.content = content_from_dict(content)

    def clear_content(self) -> None:
        """Make this cell empty (available) again."""
        self.content = EmptyContent()

    # ===== Type checks =====

    def is_empty(self) -> bool:
        return self.content.is_empty()

    def has_media(self) -> bool:
        return isinstance(self.content, MediaContent) and self.content.ref is not None

    def has_text(self) -> bool:
        return isinstance(self.content, TextBlockContent) and bool(self.content.text)

    def is_fill(self) -> bool:
        return isinstance(self.content, FillContent)

    @classmethod
    def migrate(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Migrate serialized data from older versions."""
        data = BaseCell.migrate(data)

        # Older records kept the kind next to the payload as contentType
        content_type = data.pop('contentType', None)
        content = data.get('content')
        if content_type is not None:
            if content_type == 'image':
                content_type = ContentKind.MEDIA.value
            if content is None:
                data['content'] = {'kind': content_type} if content_type != 'empty' else None
            elif isinstance(content, dict) and 'kind' not in content:
                data['content'] = {**content, 'kind': content_type}

        if data.get('type') == 'spot':
            data['type'] = 'content'
        if data.get('layer') in ('behind-main-text', None):
            data['layer'] = LayerId.BEHIND_TEXT.value
        elif data.get('layer') == 'above-main-text':
            data['layer'] = LayerId.ABOVE_TEXT.value

        return data

    def __str__(self) -> str:
        return f"{super().__str__()} - {self.content_kind}"
