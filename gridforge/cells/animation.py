"""
CellAnimation - Per-cell animation settings.

Animations are plain data: a kind, an intensity in pixels, a speed
multiplier and a playing flag. Advancing an animation over time is the
renderer's job; the grid only stores, copies and restores these records.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from gridforge.config import settings


class AnimationKind(str, Enum):
    """Supported animation kinds."""
    SWAY = "sway"        # Horizontal sine movement
    BOUNCE = "bounce"    # Vertical sine movement
    ROTATE = "rotate"    # Rotation oscillation
    PULSE = "pulse"      # Scale oscillation


class CellAnimation(BaseModel):
    """
    Animation attached to a single cell.

    Serialization format:
    {
        "type": "sway",
        "intensity": 20,
        "speed": 1.0,
        "isPlaying": false
    }
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=False,
        extra='ignore',
        use_enum_values=True,
    )

    kind: AnimationKind = Field(default=AnimationKind.SWAY.value, alias='type')
    intensity: float = Field(default_factory=lambda: settings.DEFAULT_ANIMATION_INTENSITY, ge=0)
    speed: float = Field(default_factory=lambda: settings.DEFAULT_ANIMATION_SPEED, ge=0)
    is_playing: bool = Field(default=False, alias='isPlaying')

    def play(self) -> None:
        """Start playback."""
        self.is_playing = True

    def pause(self) -> None:
        """Pause playback."""
        self.is_playing = False

    def reset(self) -> None:
        """Stop playback; the renderer drops any accumulated offset."""
        self.pause()

    def update_config(
        self,
        kind: Optional[str] = None,
        intensity: Optional[float] = None,
        speed: Optional[float] = None,
    ) -> None:
        """Update animation settings in place, leaving None values untouched."""
        if kind is not None:
            self.kind = AnimationKind(kind).value
        if intensity is not None:
            self.intensity = intensity
        if speed is not None:
            self.speed = speed

    def get_status(self) -> dict[str, Any]:
        """Get current animation status."""
        return {
            'type': self.kind,
            'intensity': self.intensity,
            'speed': self.speed,
            'isPlaying': self.is_playing,
        }

    def to_api_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode='json')

    @classmethod
    def from_api_dict(cls, data: dict[str, Any]) -> 'CellAnimation':
        return cls.model_validate(data)
