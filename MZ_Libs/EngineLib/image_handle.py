"""
Image handles with a pending directive queue.

A handle names a starting image (a file or a blank canvas), collects
directives from chainable operations and hands the queue to its engine
when the result is requested.

Example:
    >>> from MZ_Libs.EngineLib.image_handle import ImageHandle
    >>> handle = ImageHandle("photo.png")
    >>> handle.resize(200, 150, "!").crop(150, 100).mirrorize("east")
    >>> handle.write("photo_east.png")

Classes:
    CanvasSpec: A blank starting canvas
    ImageHandle: Chainable handle over a directive queue

Functions:
    create_engine: Build the engine selected by EngineOptions
    subclass: Create a handle class bound to engine options
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from MZ_Libs.constants import (
    DEFAULT_CANVAS_COLOR,
    ENGINE_GRAPHICSMAGICK,
    ENGINE_IMAGEMAGICK,
)
from MZ_Libs.DirectiveLib.directive_models import (
    Directive,
    Geometry,
    crop,
    draw,
    fill,
    gravity,
    resize,
)
from MZ_Libs.DirectiveLib.directive_parser import parse_directives
from MZ_Libs.DirectiveLib.mirrorize import MirrorizeMixin
from MZ_Libs.EngineLib.engine_options import EngineOptions
from MZ_Libs.EngineLib.magick_engine import GraphicsMagickEngine, MagickCliEngine
from MZ_Libs.EngineLib.pillow_engine import PillowEngine


@dataclass(frozen=True)
class CanvasSpec:
    width: int
    height: int
    color: str = DEFAULT_CANVAS_COLOR


def create_engine(options: EngineOptions) -> Any:
    """
    Build the engine selected by options.

    Args:
        options: Engine configuration

    Returns:
        PillowEngine, MagickCliEngine or GraphicsMagickEngine
    """
    if options.engine == ENGINE_IMAGEMAGICK:
        return MagickCliEngine(options)
    if options.engine == ENGINE_GRAPHICSMAGICK:
        return GraphicsMagickEngine(options)
    return PillowEngine(options)


class ImageHandle(MirrorizeMixin):
    """
    Chainable image handle.

    Operations append directives and return the handle; ``render``,
    ``write``, ``size`` and ``color_at`` run the queue through the engine
    without consuming it.

    Attributes:
        source: Path of the starting image (None for a canvas)
        canvas: Blank starting canvas (None for a file)
        options: Engine configuration
        engine: Engine that executes the queue
        image_magick: Engine understands the directive stack language
        directives: Pending directive queue, in issue order
    """

    # Engine options applied to every instance; set by subclass()
    default_options: Dict[str, Any] = {}

    def __init__(
        self,
        source: Optional[Union[str, Path]] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        color: Optional[str] = None,
        options: Optional[Union[EngineOptions, Dict[str, Any]]] = None,
    ):
        """
        Raises:
            ValueError: If neither or both of source and width/height are
                given, or the canvas size is not positive
        """
        has_canvas = width is not None or height is not None

        if source is not None and has_canvas:
            raise ValueError("Give either a source path or a canvas size, not both")

        if source is None and not has_canvas:
            raise ValueError("ImageHandle requires a source path or width and height")

        self.source: Optional[Path] = Path(source) if source is not None else None
        self.canvas: Optional[CanvasSpec] = None

        if has_canvas:
            if width is None or height is None:
                raise ValueError("Canvas requires both width and height")
            if int(width) <= 0 or int(height) <= 0:
                raise ValueError(f"Canvas size must be positive, got {width}x{height}")
            self.canvas = CanvasSpec(int(width), int(height), color or DEFAULT_CANVAS_COLOR)

        self.options = self._resolve_options(options)
        self.engine = create_engine(self.options)
        self.image_magick: bool = self.engine.image_magick
        self.directives: List[Directive] = []

    def _resolve_options(self, options: Optional[Union[EngineOptions, Dict[str, Any]]]) -> EngineOptions:
        if isinstance(options, EngineOptions):
            return options

        merged = dict(self.default_options)
        merged.update(options or {})
        return EngineOptions.from_dict(merged)

    # ------------------------------------------------------------------
    # Chainable operations

    def out(self, *tokens: str) -> "ImageHandle":
        """Append raw engine tokens, e.g. ``out('-gravity', 'East')``."""
        self.directives.extend(parse_directives(tokens))
        return self

    def gravity(self, name: str) -> "ImageHandle":
        self.directives.append(gravity(name))
        return self

    def resize(self, width: Optional[int], height: Optional[int] = None, option: str = "") -> "ImageHandle":
        """
        Resize the image. ``option='!'`` ignores the aspect ratio and
        ``option='%'`` treats width/height as percentages.
        """
        if width is None and height is None:
            raise ValueError("resize requires a width or a height")

        percent = "%" in option
        if percent and height is None:
            height = width

        geometry = Geometry(
            width=width,
            height=height,
            percent=percent,
            exact="!" in option,
        )
        self.directives.append(resize(geometry))
        return self

    def crop(self, width: int, height: int, x: int = 0, y: int = 0) -> "ImageHandle":
        geometry = Geometry(width=width, height=height, x=int(x), y=int(y), has_offset=True)
        self.directives.append(crop(geometry))
        return self

    def fill(self, color: str) -> "ImageHandle":
        self.directives.append(fill(color))
        return self

    def draw_rectangle(self, x0: float, y0: float, x1: float, y1: float) -> "ImageHandle":
        self.directives.append(draw(f"rectangle {x0:g},{y0:g} {x1:g},{y1:g}"))
        return self

    # ------------------------------------------------------------------
    # Execution

    def command_args(self) -> List[str]:
        """The queue serialized to engine argv tokens."""
        args: List[str] = []
        for directive in self.directives:
            args.extend(directive.to_args())
        return args

    def render(self) -> Any:
        """Run the queue and return the resulting PIL Image."""
        return self.engine.render(self)

    def write(self, path: Union[str, Path]) -> Path:
        """Run the queue and save the result to path."""
        return self.engine.write(self, Path(path))

    def size(self) -> Tuple[int, int]:
        return self.render().size

    def color_at(self, x: int, y: int) -> Tuple[int, int, int]:
        """
        Get the RGB color of one pixel of the result.

        Raises:
            ValueError: If the point lies outside the image
        """
        image = self.render()
        if not (0 <= x < image.width and 0 <= y < image.height):
            raise ValueError(f"Point ({x}, {y}) outside {image.width}x{image.height} image")
        return image.convert("RGB").getpixel((x, y))

    def __repr__(self) -> str:
        start = str(self.source) if self.source is not None else (
            f"{self.canvas.width}x{self.canvas.height} {self.canvas.color}"
        )
        return f"ImageHandle({start!r}, engine={self.engine.name!r}, directives={len(self.directives)})"


def subclass(**options: Any) -> Type[ImageHandle]:
    """
    Create an ImageHandle class whose instances default to the given
    engine options.

    Example:
        >>> Magick = subclass(image_magick=True)
        >>> Magick("photo.png").mirrorize("north").write("north.png")
    """
    EngineOptions.from_dict(options)  # validate early
    return type("ImageHandle", (ImageHandle,), {"default_options": dict(options)})
