"""
BaseCell - Shared base model for all grid cells.

Provides shared properties for all cells:
- Position: row, col (matrix indices of the current build)
- Identity: displayId (transient 1..N), contentId (durable across rebuilds)
- Compositing: layer
- Geometry: bounds, originalBounds (animation rest position)
- Animation: optional CellAnimation owned by this cell

Concrete variants are TextLineCell (type: 'text-line') and ContentCell
(type: 'content'). Consumers dispatch on `cell_type`.

Uses Pydantic v2 with camelCase aliases for JSON serialization.
"""

from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field

from gridforge.geometry import Point, Rect
from gridforge.layers.layer import LayerId

from .animation import AnimationKind, CellAnimation


class CellType:
    """Cell type discriminants."""
    TEXT_LINE = "text-line"
    CONTENT = "content"


class BaseCell(BaseModel):
    """
    Base model for all cell types.

    Serialization format:
    {
        "_version": 1,
        "type": "content",
        "row": 0,
        "col": 2,
        "displayId": 3,
        "contentId": "uuid",
        "layer": "behind-text",
        "bounds": {"x": 0, "y": 0, "width": 100, "height": 50},
        "originalBounds": {"x": 0, "y": 0, "width": 100, "height": 50},
        "animation": null
    }
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=False,
        extra='ignore',
        use_enum_values=True,
    )

    VERSION: ClassVar[int] = 1

    version: int = Field(default=1, alias='_version')

    # Discriminant (overridden in subclasses with Literal types)
    cell_type: str = Field(default="base", alias="type")

    row: int = Field(default=0, ge=0)
    col: int = Field(default=0, ge=0)

    # Transient, reassigned after every build
    display_id: Optional[int] = Field(default=None, alias='displayId')
    # Durable identity, see subclasses for how it is derived
    content_id: str = Field(default='', alias='contentId')

    layer: LayerId = Field(default=LayerId.BEHIND_TEXT.value)

    bounds: Rect = Field(default_factory=Rect)
    original_bounds: Optional[Rect] = Field(default=None, alias='originalBounds')

    animation: Optional[CellAnimation] = Field(default=None)

    # ===== State =====

    def is_empty(self) -> bool:
        """Check if this cell carries no content."""
        return True

    def is_text_line(self) -> bool:
        return self.cell_type == CellType.TEXT_LINE

    def is_content(self) -> bool:
        return self.cell_type == CellType.CONTENT

    # ===== Spatial =====

    def contains(self, x: float, y: float) -> bool:
        """Check if a point is inside this cell."""
        return self.bounds.contains(x, y)

    def center(self) -> Point:
        """Get the center point of this cell."""
        return self.bounds.center

    def area(self) -> float:
        """Get the area of this cell in pixels."""
        return self.bounds.area

    def aspect_ratio(self) -> float:
        """Get width divided by height."""
        return self.bounds.aspect_ratio

    def save_original_bounds(self) -> None:
        """Save current bounds as the animation rest position."""
        self.original_bounds = self.bounds.model_copy()

    def reset_to_original(self) -> None:
        """Restore bounds from the saved rest position and stop the animation."""
        if self.original_bounds is not None:
            self.bounds = self.original_bounds.model_copy()
        if self.animation is not None:
            self.animation.reset()

    # ===== Animation =====

    def set_animation(
        self,
        kind: str = AnimationKind.SWAY.value,
        intensity: Optional[float] = None,
        speed: Optional[float] = None,
    ) -> CellAnimation:
        """
        Attach a new animation to this cell, replacing any existing one.

        Args:
            kind: Animation kind ('sway', 'bounce', 'rotate', 'pulse')
            intensity: Movement intensity in pixels (settings default if None)
            speed: Speed multiplier (settings default if None)

        Returns:
            The new animation
        """
        values: dict[str, Any] = {'kind': AnimationKind(kind).value}
        if intensity is not None:
            values['intensity'] = intensity
        if speed is not None:
            values['speed'] = speed
        self.animation = CellAnimation(**values)
        return self.animation

    def remove_animation(self) -> None:
        """Detach the animation from this cell."""
        if self.animation is not None:
            self.animation.reset()
        self.animation = None

    def has_animation(self) -> bool:
        return self.animation is not None

    # ===== Serialization =====

    def to_api_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-compatible dictionary with camelCase keys.

        Returns:
            Dict in the cell serialization format
        """
        self.version = self.VERSION
        return self.model_dump(by_alias=True, mode='json')

    def serialize(self) -> dict[str, Any]:
        """Alias of to_api_dict()."""
        return self.to_api_dict()

    @classmethod
    def from_api_dict(cls, data: dict[str, Any]) -> 'BaseCell':
        """
        Create a cell from a serialized dictionary.

        Dispatches on the "type" key, so BaseCell.from_api_dict() returns the
        matching subclass.

        Args:
            data: Dictionary from to_api_dict()

        Returns:
            Cell instance of the appropriate type
        """
        # Import here to avoid circular imports
        from gridforge.cells import get_cell_class

        cell_class = get_cell_class(data.get('type', CellType.CONTENT))
        data = cell_class.migrate(dict(data))
        return cell_class.model_validate(data)

    @classmethod
    def deserialize(cls, data: dict[str, Any]) -> 'BaseCell':
        """Alias of from_api_dict()."""
        return cls.from_api_dict(data)

    @classmethod
    def migrate(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Migrate serialized data from older versions.

        Args:
            data: Serialized cell data

        Returns:
            Migrated data at current version
        """
        version = data.get('_version', 0)

        # v0 -> v1: the sequential id was stored as "id"
        if version < 1:
            if 'displayId' not in data and isinstance(data.get('id'), int):
                data['displayId'] = data['id']
            data['_version'] = 1

        return data

    def __str__(self) -> str:
        x, y, w, h = self.bounds.to_int_tuple()
        return f"{type(self).__name__} {self.display_id} ({self.content_id}): {w}x{h} at ({x}, {y})"
