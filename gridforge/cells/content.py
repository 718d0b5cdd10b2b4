"""
Content payloads for content cells.

A content cell holds exactly one payload:
- EmptyContent (kind: 'empty') - available for reconciliation placement
- MediaContent (kind: 'media') - image or video reference
- TextBlockContent (kind: 'text') - free text block
- FillContent (kind: 'fill') - solid fill with the global background color

Only EmptyContent counts as empty. A MediaContent whose ref is still None
is a placeholder for an asset that has not resolved yet; it is occupied.
"""

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ContentKind(str, Enum):
    """Content payload identifiers."""
    EMPTY = "empty"
    MEDIA = "media"
    TEXT = "text"
    FILL = "fill"


class TextStyle(BaseModel):
    """Typography shared by text-line cells and text blocks."""
    font_size: Union[int, str] = Field(default=48, alias='fontSize')
    font_family: str = Field(default='Arial, sans-serif', alias='fontFamily')
    color: str = Field(default='#000000')
    alignment: str = Field(default='left')
    bold: bool = Field(default=False)
    italic: bool = Field(default=False)
    underline: bool = Field(default=False)
    highlight: bool = Field(default=False)
    highlight_color: str = Field(default='#ffff00', alias='highlightColor')

    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class Placement(BaseModel):
    """Where a payload sits inside its cell."""
    position_h: str = Field(default='center', alias='positionH')
    position_v: str = Field(default='middle', alias='positionV')
    padding: float = Field(default=10)

    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class BaseContent(BaseModel):
    """Base model for all content payloads."""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=False,
        extra='ignore',
        use_enum_values=True,
    )

    kind: str = Field(default=ContentKind.EMPTY.value)

    def is_empty(self) -> bool:
        return False

    def to_api_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode='json')


class EmptyContent(BaseContent):
    """No payload; the cell is available."""
    kind: Literal["empty"] = "empty"

    def is_empty(self) -> bool:
        return True


class MediaContent(BaseContent):
    """Image or video placed in a cell."""
    kind: Literal["media"] = "media"
    ref: Optional[str] = Field(default=None)
    media_type: Optional[str] = Field(default=None, alias='mediaType')
    scale: float = Field(default=1.0, gt=0)
    rotation: float = Field(default=0)
    placement: Placement = Field(default_factory=Placement)
    fill_with_background_color: bool = Field(default=False, alias='fillWithBackgroundColor')

    def is_resolved(self) -> bool:
        """Check if the media reference has been filled in."""
        return self.ref is not None


class TextBlockContent(BaseContent):
    """Free text placed in a cell."""
    kind: Literal["text"] = "text"
    text: str = Field(default='')
    style: TextStyle = Field(default_factory=lambda: TextStyle(
        font_size='auto', color='#808080', alignment='center'))
    alignment: str = Field(default='center')
    placement: Placement = Field(default_factory=lambda: Placement(padding=1))
    fill_with_background_color: bool = Field(default=False, alias='fillWithBackgroundColor')


class FillContent(BaseContent):
    """Solid fill using the global background color."""
    kind: Literal["fill"] = "fill"
    padding: float = Field(default=0)


Content = Union[EmptyContent, MediaContent, TextBlockContent, FillContent]

# Content kind registry for deserialization
_CONTENT_REGISTRY: dict[str, type[BaseContent]] = {
    'empty': EmptyContent,
    'media': MediaContent,
    'text': TextBlockContent,
    'fill': FillContent,
}


def get_content_class(kind: str) -> type[BaseContent]:
    """
    Get the payload class for a content kind.

    Raises:
        ValueError: If the kind is unknown
    """
    try:
        return _CONTENT_REGISTRY[ContentKind(kind).value]
    except ValueError:
        raise ValueError(f"Unknown content kind: {kind!r}") from None


def default_content(kind: str) -> BaseContent:
    """Create the default payload for a content kind."""
    return get_content_class(kind)()


def content_from_dict(data: Optional[dict[str, Any]]) -> BaseContent:
    """
    Create a payload from a serialized dictionary.

    None deserializes to EmptyContent.
    """
    if data is None:
        return EmptyContent()
    if isinstance(data, BaseContent):
        return data
    kind = data.get('kind', 'empty')
    return get_content_class(kind).model_validate(data)
