"""
Command line engines: ImageMagick and GraphicsMagick.

The handle's directive queue is serialized to argv tokens and passed to the
executable between the input and the output file. Nothing is run until the
handle is written or inspected.

Classes:
    MagickCliEngine: Runs ``magick`` (or ``convert``) from ImageMagick
    GraphicsMagickEngine: Runs ``gm convert``; has no directive stack

Functions:
    command_str: Render an argv list for logs and error messages
"""

from pathlib import Path
from typing import Any, List
import logging
import shlex
import shutil
import subprocess
import tempfile

from PIL import Image

from MZ_Libs.constants import (
    DEFAULT_IMAGE_MODE,
    ENGINE_GRAPHICSMAGICK,
    ENGINE_IMAGEMAGICK,
    GRAPHICSMAGICK_EXECUTABLE,
    IMAGEMAGICK_EXECUTABLES,
    TEMP_RENDER_NAME,
)
from MZ_Libs.EngineLib.engine_options import EngineOptions

logger = logging.getLogger(__name__)


def command_str(argv: List[str]) -> str:
    return " ".join(shlex.quote(str(arg)) for arg in argv)


class MagickCliEngine:
    """Runs directive queues through the ImageMagick command line."""

    name = ENGINE_IMAGEMAGICK
    image_magick = True
    executables = IMAGEMAGICK_EXECUTABLES

    def __init__(self, options: EngineOptions = None):
        self.options = options if options is not None else EngineOptions(engine=self.name)

    def find_executable(self) -> List[str]:
        """
        Locate the executable prefix for commands.

        Returns:
            argv prefix, e.g. ``['/usr/bin/magick']``

        Raises:
            RuntimeError: If no executable can be found
        """
        if self.options.app_path:
            return [str(self.options.app_path)]

        for executable in self.executables:
            found = shutil.which(executable)
            if found:
                return [found]

        raise RuntimeError(
            f"{self.name} is not installed: none of {', '.join(self.executables)} found on PATH"
        )

    def input_args(self, handle: Any) -> List[str]:
        if handle.canvas is not None:
            canvas = handle.canvas
            return ["-size", f"{canvas.width}x{canvas.height}", f"xc:{canvas.color}"]
        return [str(handle.source)]

    def build_command(self, handle: Any, output: Path) -> List[str]:
        """Full argv: executable, input, directive tokens, output."""
        return (
            self.find_executable()
            + self.input_args(handle)
            + handle.command_args()
            + [str(output)]
        )

    def run(self, command: List[str]) -> subprocess.CompletedProcess:
        """
        Run a command and check its exit status.

        Raises:
            RuntimeError: If the command fails or times out
        """
        logger.debug(f"Running {command_str(command)}")

        try:
            proc = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.options.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise RuntimeError(f"{self.name} timed out after {e.timeout}s: {command_str(command)}") from e

        if proc.returncode != 0:
            raise RuntimeError(
                f"{self.name} failed with exit code {proc.returncode}: "
                f"{(proc.stderr or '').strip() or command_str(command)}"
            )

        return proc

    def write(self, handle: Any, path: Path) -> Path:
        path = Path(path)
        self.run(self.build_command(handle, path))
        return path

    def render(self, handle: Any) -> Any:
        """
        Run the queue into a temporary PNG and load it with Pillow.

        Returns:
            The resulting PIL Image (RGBA)
        """
        with tempfile.TemporaryDirectory() as tmpdir:
            output = Path(tmpdir) / TEMP_RENDER_NAME
            self.write(handle, output)
            with Image.open(output) as image:
                return image.convert(DEFAULT_IMAGE_MODE)


class GraphicsMagickEngine(MagickCliEngine):
    """
    Runs queues through ``gm convert``.

    GraphicsMagick has no parenthesized image lists, clone or swap, so
    handles on this engine report ``image_magick = False`` and mirrorize
    leaves their queue untouched.
    """

    name = ENGINE_GRAPHICSMAGICK
    image_magick = False
    executables = (GRAPHICSMAGICK_EXECUTABLE,)

    def find_executable(self) -> List[str]:
        return super().find_executable() + ["convert"]
