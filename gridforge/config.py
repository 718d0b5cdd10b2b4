"""Library configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Grid engine settings."""

    # Serialization
    SNAPSHOT_VERSION: str = "1.0.0"

    # Canvas fallback when a snapshot carries no dimensions
    DEFAULT_CANVAS_WIDTH: int = 1080
    DEFAULT_CANVAS_HEIGHT: int = 1350

    # Reconciliation
    WAITING_WARN_THRESHOLD: int = 10  # Waiting items before starvation is reported
    CHECK_IDENTITY: bool = True  # Assert content ids are unique after each build

    # Animation defaults
    DEFAULT_ANIMATION_INTENSITY: float = 20.0  # Pixels of movement
    DEFAULT_ANIMATION_SPEED: float = 1.0

    model_config = {"env_prefix": "GRIDFORGE_"}


settings = Settings()
