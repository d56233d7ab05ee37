"""
Engine configuration for image handles.

Classes:
    EngineOptions: Which engine a handle runs on and how to invoke it
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from MZ_Libs.constants import (
    DEFAULT_ENGINE,
    ENGINE_GRAPHICSMAGICK,
    ENGINE_IMAGEMAGICK,
    FIELD_ENGINE,
    FIELD_IMAGE_MAGICK,
    SUPPORTED_ENGINES,
)


@dataclass
class EngineOptions:
    """Configuration for the engine behind an image handle.

    Attributes:
        engine: Engine name ('pillow', 'imagemagick', 'graphicsmagick')
        app_path: Explicit executable for command line engines
                  (None = look it up on PATH)
        timeout: Seconds before a command line engine call is aborted
                 (None = no limit)
    """
    engine: str = DEFAULT_ENGINE
    app_path: Optional[str] = None
    timeout: Optional[float] = None

    def __post_init__(self):
        self.engine = str(self.engine).strip().lower()

        if self.engine not in SUPPORTED_ENGINES:
            raise ValueError(
                f"Unknown engine: {self.engine}. "
                f"Valid engines: {', '.join(SUPPORTED_ENGINES)}"
            )

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {self.timeout}")

    @property
    def image_magick(self) -> bool:
        """True when the engine executes the directive stack language."""
        return self.engine != ENGINE_GRAPHICSMAGICK

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineOptions":
        """
        Create from dictionary, ignoring unknown keys.

        A boolean ``image_magick`` key without an ``engine`` key selects the
        ImageMagick (True) or GraphicsMagick (False) command line engine.
        """
        data = dict(data)
        if FIELD_IMAGE_MAGICK in data and FIELD_ENGINE not in data:
            data[FIELD_ENGINE] = ENGINE_IMAGEMAGICK if data[FIELD_IMAGE_MAGICK] else ENGINE_GRAPHICSMAGICK

        filtered = {
            k: v
            for k, v in data.items()
            if k in cls.__dataclass_fields__
        }
        return cls(**filtered)
