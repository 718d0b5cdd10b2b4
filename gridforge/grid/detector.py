"""Detector interface and the raw layout records it produces.

The detector is an external collaborator. Given the canvas size, the
bounding boxes of the main text lines and the canvas padding, it returns a
logical matrix of raw regions:

    {
        "rows": 3,
        "cols": 3,
        "matrix": [
            [{"type": "region", "bounds": {...}}],
            [{"type": "region", ...}, {"type": "text", "text": "HELLO", ...}],
            [{"type": "region", ...}]
        ]
    }

Rows may have different lengths. The Grid trusts this structure as-is apart
from the sanity checks in gridforge.grid.builder.
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Protocol, Sequence, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gridforge.cells.content import TextStyle
from gridforge.geometry import CanvasSize, Padding, Rect


class TextLineBounds(BaseModel):
    """Bounding box of one rendered main text line."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    text: str = Field(default='')
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    style: Optional[TextStyle] = Field(default=None)

    @property
    def bounds(self) -> Rect:
        return Rect(x=self.x, y=self.y, width=self.width, height=self.height)


class TextRegion(BaseModel):
    """A detected text line."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    region_type: Literal["text"] = Field(default="text", alias='type')
    text: str = Field(default='')
    line_index: int = Field(default=0, ge=0, alias='lineIndex')
    bounds: Rect = Field(default_factory=Rect)
    style: Optional[TextStyle] = Field(default=None)


class EmptyRegion(BaseModel):
    """A detected open area that becomes a content cell."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    region_type: Literal["region"] = Field(default="region", alias='type')
    bounds: Rect = Field(default_factory=Rect)


RawRegion = Union[TextRegion, EmptyRegion]

# Region type registry for deserialization
_REGION_REGISTRY: dict[str, type[BaseModel]] = {
    'text': TextRegion,
    'region': EmptyRegion,
}


def region_from_dict(data: Any) -> Optional[RawRegion]:
    """
    Create a raw region from a dictionary.

    None stays None (an absent slot); model instances pass through.

    Raises:
        ValueError: If the region type is unknown
    """
    if data is None or isinstance(data, (TextRegion, EmptyRegion)):
        return data
    if not isinstance(data, dict):
        raise ValueError(f"Region must be a dict, got {type(data).__name__}")
    region_type = data.get('type', 'region')
    region_class = _REGION_REGISTRY.get(region_type)
    if region_class is None:
        raise ValueError(f"Unknown region type: {region_type!r}")
    return region_class.model_validate(data)


class DetectionResult(BaseModel):
    """Detector output: logical rows of raw regions."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    rows: int = 0
    cols: int = 0
    matrix: list[Optional[list[Optional[RawRegion]]]] = Field(default_factory=list)

    @field_validator('matrix', mode='before')
    @classmethod
    def _coerce_regions(cls, v: Any) -> Any:
        """Dispatch region dicts on their "type" key."""
        if not isinstance(v, list):
            return v
        result = []
        for row in v:
            if row is None or not isinstance(row, list):
                result.append(row)
            else:
                result.append([region_from_dict(region) for region in row])
        return result


@runtime_checkable
class Detector(Protocol):
    """Protocol for the geometric region detector.

    Implementations turn text line boxes into a logical matrix of text
    and empty regions inside the padded canvas.
    """

    def detect(
        self,
        canvas_size: CanvasSize,
        text_line_bounds: Sequence[TextLineBounds],
        padding: Padding,
    ) -> Union[DetectionResult, dict[str, Any]]:
        """Detect regions.

        :param canvas_size: Canvas dimensions in pixels
        :param text_line_bounds: Bounding boxes of the main text lines
        :param padding: Canvas padding to keep free
        :returns: DetectionResult or an equivalent dict
        """
        ...
