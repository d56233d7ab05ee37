"""
In-process directive engine built on Pillow.

Interprets the directive stack language without any external executable.
The engine keeps a stack of image lists: ``(`` opens a new list, ``)``
moves its images onto the end of the enclosing list, clones copy images
from the enclosing list, and image operators apply to every image of the
current list.

Example:
    >>> from MZ_Libs.EngineLib.image_handle import ImageHandle
    >>> handle = ImageHandle(width=200, height=200, color="yellow")
    >>> image = handle.mirrorize("north").render()

Classes:
    Layer: One image in a list, with its page offset
    EngineState: Image lists, gravity and fill color during a run
    PillowEngine: Runs a handle's directive queue with Pillow
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple
import logging
import re

from PIL import Image, ImageDraw

from MZ_Libs.constants import (
    DEFAULT_FILL_COLOR,
    DEFAULT_IMAGE_MODE,
    DEFAULT_OUTPUT_FORMAT,
    ENGINE_PILLOW,
)
from MZ_Libs.DirectiveLib.directive_models import Directive, Geometry, Gravity
from MZ_Libs.DirectiveLib.directive_parser import parse_index_spec
from MZ_Libs.EngineLib.directive_handlers import get_default_registry

logger = logging.getLogger(__name__)

RECTANGLE_PATTERN = re.compile(
    r"^\s*rectangle\s+(-?\d+(?:\.\d+)?),(-?\d+(?:\.\d+)?)\s+(-?\d+(?:\.\d+)?),(-?\d+(?:\.\d+)?)\s*$",
    re.IGNORECASE,
)

TRANSPARENT = (0, 0, 0, 0)


@dataclass
class Layer:
    image: Any
    page_offset: Tuple[int, int] = (0, 0)

    def copy(self) -> "Layer":
        return Layer(self.image.copy(), self.page_offset)


@dataclass
class EngineState:
    """Mutable state for one run of a directive queue.

    Attributes:
        lists: Stack of image lists; the last one is the current list
        gravity: Anchor for crop offsets and append alignment
        fill_color: Color used by draw primitives
    """
    lists: List[List[Layer]] = field(default_factory=lambda: [[]])
    gravity: Gravity = field(default_factory=Gravity.default)
    fill_color: str = DEFAULT_FILL_COLOR

    @classmethod
    def start(cls, image: Any) -> "EngineState":
        return cls(lists=[[Layer(image)]])

    @property
    def current(self) -> List[Layer]:
        return self.lists[-1]

    @property
    def parent(self) -> List[Layer]:
        """The list clones are taken from."""
        if len(self.lists) > 1:
            return self.lists[-2]
        return self.lists[-1]

    def result(self) -> Any:
        """
        Get the final image of a finished run.

        Raises:
            ValueError: If a group is still open or no image is left
        """
        if len(self.lists) != 1:
            raise ValueError(f"Unbalanced directives: {len(self.lists) - 1} group(s) left open")

        if not self.current:
            raise ValueError("No image left after running directives")

        if len(self.current) > 1:
            logger.debug(f"{len(self.current)} images left, using the last one")

        return self.current[-1].image


def _require_images(state: EngineState, directive: Directive, count: int = 1) -> None:
    if len(state.current) < count:
        raise ValueError(
            f"Directive '{directive}' needs {count} image(s), "
            f"current list has {len(state.current)}"
        )


def _edge_offset(total: int, size: int, offset: int, edge: int) -> int:
    """Position of a span of ``size`` inside ``total`` for a gravity edge."""
    if edge < 0:
        return offset
    if edge > 0:
        return total - size - offset
    return (total - size) // 2 + offset


def crop_box(
    image_size: Tuple[int, int],
    geometry: Geometry,
    gravity: Gravity,
) -> Tuple[int, int, int, int]:
    """
    Compute the pixel box a crop geometry selects.

    Args:
        image_size: (width, height) of the image being cropped
        geometry: Crop geometry (percent sizes are rounded half up)
        gravity: Edge the offsets are measured from

    Returns:
        (left, top, right, bottom) clipped to the image

    Raises:
        ValueError: If the geometry falls entirely outside the image
    """
    image_width, image_height = image_size
    width, height = geometry.resolve_size(image_width, image_height)

    left = _edge_offset(image_width, width, geometry.x, gravity.horizontal)
    top = _edge_offset(image_height, height, geometry.y, gravity.vertical)
    right = left + width
    bottom = top + height

    left, top = max(left, 0), max(top, 0)
    right, bottom = min(right, image_width), min(bottom, image_height)

    if right <= left or bottom <= top:
        raise ValueError(f"Crop geometry {geometry} does not overlap a {image_width}x{image_height} image")

    return left, top, right, bottom


def resize_dimensions(image_size: Tuple[int, int], geometry: Geometry) -> Tuple[int, int]:
    """
    Target size for a resize geometry.

    Without the exact flag the aspect ratio is kept and the image fits inside
    the requested box.
    """
    image_width, image_height = image_size

    if geometry.percent or geometry.exact:
        return geometry.resolve_size(image_width, image_height)

    scales = []
    if geometry.width is not None:
        scales.append(geometry.width / image_width)
    if geometry.height is not None:
        scales.append(geometry.height / image_height)
    scale = min(scales)

    return max(int(image_width * scale + 0.5), 1), max(int(image_height * scale + 0.5), 1)


def handle_gravity(state: EngineState, directive: Directive) -> None:
    state.gravity = directive.value


def handle_crop(state: EngineState, directive: Directive) -> None:
    _require_images(state, directive)

    for layer in state.current:
        box = crop_box(layer.image.size, directive.value, state.gravity)
        layer.image = layer.image.crop(box)
        offset_x, offset_y = layer.page_offset
        layer.page_offset = (offset_x + box[0], offset_y + box[1])


def handle_repage(state: EngineState, directive: Directive) -> None:
    for layer in state.current:
        layer.page_offset = (0, 0)


def handle_open_group(state: EngineState, directive: Directive) -> None:
    state.lists.append([])


def handle_close_group(state: EngineState, directive: Directive) -> None:
    if len(state.lists) < 2:
        raise ValueError("Unbalanced directives: ')' without matching '('")

    finished = state.lists.pop()
    state.current.extend(finished)


def handle_clone(state: EngineState, directive: Directive) -> None:
    source = state.parent

    if directive.value is None:
        if not source:
            raise ValueError("Nothing to clone: source list is empty")
        state.current.append(source[-1].copy())
        return

    for index in parse_index_spec(directive.value, len(source)):
        state.current.append(source[index].copy())


def _transpose_all(state: EngineState, directive: Directive, method: Image.Transpose) -> None:
    _require_images(state, directive)
    for layer in state.current:
        layer.image = layer.image.transpose(method)


def handle_flip(state: EngineState, directive: Directive) -> None:
    _transpose_all(state, directive, Image.Transpose.FLIP_TOP_BOTTOM)


def handle_flop(state: EngineState, directive: Directive) -> None:
    _transpose_all(state, directive, Image.Transpose.FLIP_LEFT_RIGHT)


# Clockwise quarter turns; Pillow's ROTATE_* constants turn counter-clockwise
_QUARTER_TURNS = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


def handle_rotate(state: EngineState, directive: Directive) -> None:
    _require_images(state, directive)
    degrees = float(directive.value) % 360

    if degrees == 0:
        return

    if degrees.is_integer() and int(degrees) in _QUARTER_TURNS:
        _transpose_all(state, directive, _QUARTER_TURNS[int(degrees)])
        return

    for layer in state.current:
        layer.image = layer.image.rotate(
            -degrees,
            resample=Image.Resampling.BICUBIC,
            expand=True,
            fillcolor=TRANSPARENT,
        )


def handle_append(state: EngineState, directive: Directive) -> None:
    _require_images(state, directive)
    vertical = bool(directive.value)
    images = [layer.image for layer in state.current]

    if vertical:
        width = max(image.width for image in images)
        height = sum(image.height for image in images)
    else:
        width = sum(image.width for image in images)
        height = max(image.height for image in images)

    joined = Image.new(DEFAULT_IMAGE_MODE, (width, height), TRANSPARENT)

    position = 0
    for image in images:
        tile = image.convert(DEFAULT_IMAGE_MODE)
        if vertical:
            x = _edge_offset(width, image.width, 0, state.gravity.horizontal)
            joined.paste(tile, (x, position))
            position += image.height
        else:
            y = _edge_offset(height, image.height, 0, state.gravity.vertical)
            joined.paste(tile, (position, y))
            position += image.width

    state.current[:] = [Layer(joined)]


def handle_swap(state: EngineState, directive: Directive) -> None:
    _require_images(state, directive, count=2)
    images = state.current
    images[-1], images[-2] = images[-2], images[-1]


def handle_delete(state: EngineState, directive: Directive) -> None:
    doomed = set(parse_index_spec(directive.value, len(state.current)))
    state.current[:] = [
        layer for index, layer in enumerate(state.current) if index not in doomed
    ]


def handle_resize(state: EngineState, directive: Directive) -> None:
    _require_images(state, directive)

    for layer in state.current:
        size = resize_dimensions(layer.image.size, directive.value)
        if size != layer.image.size:
            layer.image = layer.image.resize(size, Image.Resampling.LANCZOS)


def handle_fill(state: EngineState, directive: Directive) -> None:
    state.fill_color = directive.value


def handle_draw(state: EngineState, directive: Directive) -> None:
    _require_images(state, directive)

    match = RECTANGLE_PATTERN.match(directive.value)
    if match is None:
        raise ValueError(f"Unsupported draw primitive: {directive.value!r}. Supported: rectangle")

    x0, y0, x1, y1 = (int(float(value)) for value in match.groups())
    for layer in state.current:
        ImageDraw.Draw(layer.image).rectangle([x0, y0, x1, y1], fill=state.fill_color)


class PillowEngine:
    """Runs directive queues in-process with Pillow."""

    name = ENGINE_PILLOW
    image_magick = True

    def __init__(self, options: Any = None, registry: Optional[Any] = None):
        self.options = options
        self.registry = registry if registry is not None else get_default_registry()

    def load_source(self, handle: Any) -> Any:
        """
        Load the handle's starting image.

        Raises:
            FileNotFoundError: If the source path does not exist
            OSError: If the file cannot be decoded
        """
        if handle.canvas is not None:
            return Image.new(DEFAULT_IMAGE_MODE, (handle.canvas.width, handle.canvas.height), handle.canvas.color)

        source = Path(handle.source)
        if not source.exists():
            raise FileNotFoundError(f"Image file not found: {source}")

        with Image.open(source) as image:
            return image.convert(DEFAULT_IMAGE_MODE)

    def render(self, handle: Any) -> Any:
        """
        Run the handle's directive queue.

        Returns:
            The resulting PIL Image (RGBA)

        Raises:
            ValueError: If a directive is unsupported or malformed
        """
        state = EngineState.start(self.load_source(handle))

        for directive in handle.directives:
            if not self.registry.has_handler(directive.kind):
                raise ValueError(f"Pillow engine does not support directive '{directive}'")
            self.registry.execute(state, directive)

        logger.debug(f"Rendered {len(handle.directives)} directives")
        return state.result()

    def write(self, handle: Any, path: Path) -> Path:
        """Render and save; the format follows the file extension (PNG if none)."""
        path = Path(path)
        image = self.render(handle)

        save_format = None if path.suffix else DEFAULT_OUTPUT_FORMAT
        if path.suffix.lower() in (".jpg", ".jpeg"):
            image = image.convert("RGB")

        image.save(path, format=save_format)
        return path
