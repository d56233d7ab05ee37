"""
Directive data models for Mirrorize.

This module defines the typed vocabulary used to talk to a directive-based
image engine. A directive is a structured command (kind + parameters) that
serializes to the exact argv tokens the engine expects.

Classes:
    Direction: The eight mirroring directions
    Gravity: Anchor used by geometry-relative directives
    DirectiveKind: Categories of engine directives
    Geometry: A ``WxH+X+Y`` geometry with percent and exact-size flags
    Directive: A single engine directive

Functions:
    gravity, crop, repage, open_group, close_group, clone, flip, flop,
    rotate, append, swap, delete, resize, fill, draw, raw:
        Directive constructors
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

from MZ_Libs.constants import DEFAULT_DIRECTION, DEFAULT_GRAVITY


class Direction(Enum):
    """Mirroring direction; names the part of the image that is kept."""

    NORTH = "north"
    SOUTH = "south"
    WEST = "west"
    EAST = "east"
    NORTHWEST = "northwest"
    NORTHEAST = "northeast"
    SOUTHWEST = "southwest"
    SOUTHEAST = "southeast"

    @classmethod
    def parse(cls, value: Optional[Union[str, "Direction"]]) -> Optional["Direction"]:
        """
        Resolve a user supplied direction.

        Args:
            value: Direction name (case-insensitive), a Direction, or None

        Returns:
            The matching Direction; WEST when value is None or empty;
            None when value is not one of the eight names
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls(DEFAULT_DIRECTION)

        name = str(value).strip().lower()
        if not name:
            return cls(DEFAULT_DIRECTION)

        try:
            return cls(name)
        except ValueError:
            return None

    @classmethod
    def names(cls) -> Tuple[str, ...]:
        return tuple(direction.value for direction in cls)

    @property
    def is_diagonal(self) -> bool:
        return self in (
            Direction.NORTHWEST,
            Direction.NORTHEAST,
            Direction.SOUTHWEST,
            Direction.SOUTHEAST,
        )


class Gravity(Enum):
    """Engine gravity names."""

    NORTH_WEST = "NorthWest"
    NORTH = "North"
    NORTH_EAST = "NorthEast"
    WEST = "West"
    CENTER = "Center"
    EAST = "East"
    SOUTH_WEST = "SouthWest"
    SOUTH = "South"
    SOUTH_EAST = "SouthEast"

    @classmethod
    def default(cls) -> "Gravity":
        return cls(DEFAULT_GRAVITY)

    @classmethod
    def parse(cls, value: Union[str, "Gravity"]) -> "Gravity":
        """
        Resolve a gravity name, case-insensitive.

        Raises:
            ValueError: If the name is not a known gravity
        """
        if isinstance(value, cls):
            return value

        name = str(value).strip().lower()
        for gravity in cls:
            if gravity.value.lower() == name:
                return gravity

        valid = ", ".join(gravity.value for gravity in cls)
        raise ValueError(f"Unknown gravity: {value}. Valid gravities: {valid}")

    @property
    def horizontal(self) -> int:
        """-1 for west edge, 0 for center, 1 for east edge."""
        if self.value.endswith("West"):
            return -1
        if self.value.endswith("East"):
            return 1
        return 0

    @property
    def vertical(self) -> int:
        """-1 for north edge, 0 for center, 1 for south edge."""
        if self.value.startswith("North"):
            return -1
        if self.value.startswith("South"):
            return 1
        return 0


class DirectiveKind(Enum):
    GRAVITY = "gravity"
    CROP = "crop"
    REPAGE = "repage"
    OPEN_GROUP = "open_group"
    CLOSE_GROUP = "close_group"
    CLONE = "clone"
    FLIP = "flip"
    FLOP = "flop"
    ROTATE = "rotate"
    APPEND = "append"
    SWAP = "swap"
    DELETE = "delete"
    RESIZE = "resize"
    FILL = "fill"
    DRAW = "draw"
    RAW = "raw"


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


@dataclass(frozen=True)
class Geometry:
    """Image geometry as understood by the engine.

    Attributes:
        width: Width in pixels or percent (None = derive from height/image)
        height: Height in pixels or percent (None = derive from width/image)
        x: Horizontal offset, relative to the gravity edge
        y: Vertical offset, relative to the gravity edge
        percent: Width and height are percentages of the image size
        exact: Ignore aspect ratio when resizing (the ``!`` flag)
        has_offset: Offsets were given explicitly
    """
    width: Optional[float] = None
    height: Optional[float] = None
    x: int = 0
    y: int = 0
    percent: bool = False
    exact: bool = False
    has_offset: bool = False

    def resolve_size(self, image_width: int, image_height: int) -> Tuple[int, int]:
        """
        Resolve width/height against an image size.

        Percent sizes are rounded half up. A missing dimension falls back to
        the image's own dimension.
        """
        width = self.width
        height = self.height

        if self.percent:
            width = image_width if width is None else int(image_width * width / 100.0 + 0.5)
            height = image_height if height is None else int(image_height * height / 100.0 + 0.5)
        else:
            width = image_width if width is None else int(width)
            height = image_height if height is None else int(height)

        return max(width, 1), max(height, 1)

    def __str__(self) -> str:
        marker = "%" if self.percent else ""
        text = ""
        if self.width is not None:
            text += f"{_format_number(self.width)}{marker}"
        if self.height is not None:
            text += f"x{_format_number(self.height)}{marker}"
        if self.has_offset:
            text += f"{self.x:+d}{self.y:+d}"
        if self.exact:
            text += "!"
        return text


@dataclass(frozen=True)
class Directive:
    """A single engine directive.

    ``value`` holds the structured parameter for the kind: a Gravity for
    GRAVITY, a Geometry for CROP and RESIZE, an index spec string for CLONE
    (None = last image) and DELETE, degrees for ROTATE, ``vertical`` for
    APPEND, a color for FILL, a primitive for DRAW, a token tuple for RAW.
    """
    kind: DirectiveKind
    value: Any = None

    def to_args(self) -> Tuple[str, ...]:
        """Serialize to engine tokens, one argv element per token."""
        kind = self.kind

        if kind is DirectiveKind.GRAVITY:
            return ("-gravity", self.value.value)
        if kind is DirectiveKind.CROP:
            return ("-crop", str(self.value))
        if kind is DirectiveKind.REPAGE:
            return ("+repage",)
        if kind is DirectiveKind.OPEN_GROUP:
            return ("(",)
        if kind is DirectiveKind.CLOSE_GROUP:
            return (")",)
        if kind is DirectiveKind.CLONE:
            if self.value is None:
                return ("+clone",)
            return ("-clone", str(self.value))
        if kind is DirectiveKind.FLIP:
            return ("-flip",)
        if kind is DirectiveKind.FLOP:
            return ("-flop",)
        if kind is DirectiveKind.ROTATE:
            return ("-rotate", _format_number(self.value))
        if kind is DirectiveKind.APPEND:
            return ("-append",) if self.value else ("+append",)
        if kind is DirectiveKind.SWAP:
            return ("+swap",)
        if kind is DirectiveKind.DELETE:
            return ("-delete", str(self.value))
        if kind is DirectiveKind.RESIZE:
            return ("-resize", str(self.value))
        if kind is DirectiveKind.FILL:
            return ("-fill", str(self.value))
        if kind is DirectiveKind.DRAW:
            return ("-draw", str(self.value))
        return tuple(str(token) for token in self.value)

    def __str__(self) -> str:
        return " ".join(self.to_args())


def gravity(value: Union[str, Gravity]) -> Directive:
    return Directive(DirectiveKind.GRAVITY, Gravity.parse(value))


def crop(geometry: Geometry) -> Directive:
    return Directive(DirectiveKind.CROP, geometry)


def repage() -> Directive:
    return Directive(DirectiveKind.REPAGE)


def open_group() -> Directive:
    return Directive(DirectiveKind.OPEN_GROUP)


def close_group() -> Directive:
    return Directive(DirectiveKind.CLOSE_GROUP)


def clone(indexes: Optional[Union[int, str]] = None) -> Directive:
    """Clone the last image (``+clone``) or the given indexes (``-clone``)."""
    return Directive(DirectiveKind.CLONE, None if indexes is None else str(indexes))


def flip() -> Directive:
    return Directive(DirectiveKind.FLIP)


def flop() -> Directive:
    return Directive(DirectiveKind.FLOP)


def rotate(degrees: float) -> Directive:
    return Directive(DirectiveKind.ROTATE, float(degrees))


def append(vertical: bool = True) -> Directive:
    """Join the current image list top-to-bottom (``-append``) or left-to-right (``+append``)."""
    return Directive(DirectiveKind.APPEND, bool(vertical))


def swap() -> Directive:
    return Directive(DirectiveKind.SWAP)


def delete(indexes: Union[int, str]) -> Directive:
    return Directive(DirectiveKind.DELETE, str(indexes))


def resize(geometry: Geometry) -> Directive:
    return Directive(DirectiveKind.RESIZE, geometry)


def fill(color: str) -> Directive:
    return Directive(DirectiveKind.FILL, str(color))


def draw(primitive: str) -> Directive:
    return Directive(DirectiveKind.DRAW, str(primitive))


def raw(*tokens: str) -> Directive:
    return Directive(DirectiveKind.RAW, tuple(str(token) for token in tokens))
