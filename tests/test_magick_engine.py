"""
Tests for the command line engines and engine options.

Executables and subprocess calls are mocked; no ImageMagick install is
needed.

Tests cover:
- Executable lookup
- Command construction for file and canvas sources
- Exit status and timeout handling
- Rendering through a temporary file
- GraphicsMagick command prefix
- EngineOptions validation and dict conversion
"""

import subprocess
import unittest
from pathlib import Path
from unittest.mock import patch

from PIL import Image

from MZ_Libs.EngineLib.engine_options import EngineOptions
from MZ_Libs.EngineLib.image_handle import ImageHandle
from MZ_Libs.EngineLib.magick_engine import (
    GraphicsMagickEngine,
    MagickCliEngine,
    command_str,
)

WHICH = "MZ_Libs.EngineLib.magick_engine.shutil.which"
RUN = "MZ_Libs.EngineLib.magick_engine.subprocess.run"


def completed(command, returncode=0, stderr=""):
    return subprocess.CompletedProcess(command, returncode, stdout="", stderr=stderr)


class TestFindExecutable(unittest.TestCase):
    """Test executable lookup."""

    def test_prefers_magick(self):
        with patch(WHICH, side_effect=lambda name: f"/usr/bin/{name}") as which:
            self.assertEqual(MagickCliEngine().find_executable(), ["/usr/bin/magick"])
        which.assert_called_once_with("magick")

    def test_falls_back_to_convert(self):
        with patch(WHICH, side_effect=lambda name: "/usr/bin/convert" if name == "convert" else None):
            self.assertEqual(MagickCliEngine().find_executable(), ["/usr/bin/convert"])

    def test_missing_executable(self):
        with patch(WHICH, return_value=None):
            with self.assertRaises(RuntimeError) as context:
                MagickCliEngine().find_executable()

        self.assertIn("not installed", str(context.exception))

    def test_app_path_skips_lookup(self):
        engine = MagickCliEngine(EngineOptions(engine="imagemagick", app_path="/opt/im/magick"))

        with patch(WHICH) as which:
            self.assertEqual(engine.find_executable(), ["/opt/im/magick"])
        which.assert_not_called()

    def test_graphicsmagick_prefix(self):
        with patch(WHICH, return_value="/usr/bin/gm"):
            self.assertEqual(GraphicsMagickEngine().find_executable(), ["/usr/bin/gm", "convert"])


class TestBuildCommand(unittest.TestCase):
    """Test argv construction."""

    def setUp(self):
        patcher = patch(WHICH, return_value="/usr/bin/magick")
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_file_source(self):
        handle = ImageHandle("in.png", options={"engine": "imagemagick"}).mirrorize("north")

        command = handle.engine.build_command(handle, Path("out.png"))

        self.assertEqual(command[:2], ["/usr/bin/magick", "in.png"])
        self.assertEqual(command[2:-1], handle.command_args())
        self.assertEqual(command[-1], "out.png")
        self.assertIn("(", command)
        self.assertIn("-flip", command)

    def test_canvas_source(self):
        handle = ImageHandle(width=200, height=100, color="rgb(255,255,0)", options={"engine": "imagemagick"})

        command = handle.engine.build_command(handle, Path("out.png"))

        self.assertEqual(command, ["/usr/bin/magick", "-size", "200x100", "xc:rgb(255,255,0)", "out.png"])

    def test_command_str_quotes_parentheses(self):
        self.assertEqual(command_str(["magick", "(", "+clone", ")"]), "magick '(' +clone ')'")


class TestRun(unittest.TestCase):
    """Test running commands."""

    def setUp(self):
        patcher = patch(WHICH, return_value="/usr/bin/magick")
        patcher.start()
        self.addCleanup(patcher.stop)
        self.handle = ImageHandle("in.png", options={"engine": "imagemagick"}).mirrorize("west")

    def test_write_runs_command(self):
        with patch(RUN, side_effect=lambda command, **kwargs: completed(command)) as run:
            result = self.handle.write("out.png")

        self.assertEqual(result, Path("out.png"))
        command = run.call_args[0][0]
        self.assertEqual(command[-1], "out.png")
        self.assertTrue(run.call_args[1]["capture_output"])

    def test_nonzero_exit_raises(self):
        with patch(RUN, side_effect=lambda command, **kwargs: completed(command, 1, "unable to open image")):
            with self.assertRaises(RuntimeError) as context:
                self.handle.write("out.png")

        self.assertIn("unable to open image", str(context.exception))
        self.assertIn("exit code 1", str(context.exception))

    def test_timeout_passed_and_reported(self):
        handle = ImageHandle("in.png", options={"engine": "imagemagick", "timeout": 5})

        with patch(RUN, side_effect=subprocess.TimeoutExpired(["magick"], 5)) as run:
            with self.assertRaises(RuntimeError) as context:
                handle.write("out.png")

        self.assertEqual(run.call_args[1]["timeout"], 5)
        self.assertIn("timed out", str(context.exception))

    def test_render_loads_result(self):
        def fake_run(command, **kwargs):
            Image.new("RGB", (12, 8), (255, 0, 0)).save(command[-1])
            return completed(command)

        with patch(RUN, side_effect=fake_run):
            image = self.handle.render()
            color = self.handle.color_at(3, 3)

        self.assertEqual(image.size, (12, 8))
        self.assertEqual(image.mode, "RGBA")
        self.assertEqual(color, (255, 0, 0))


class TestGraphicsMagickEngine(unittest.TestCase):
    """Test the GraphicsMagick engine."""

    def test_mirrorize_queues_nothing(self):
        handle = ImageHandle("in.png", options={"engine": "graphicsmagick"}).resize(50, option="%").mirrorize("south")

        with patch(WHICH, return_value="/usr/bin/gm"):
            command = handle.engine.build_command(handle, Path("out.png"))

        self.assertEqual(command, ["/usr/bin/gm", "convert", "in.png", "-resize", "50%x50%", "out.png"])


class TestEngineOptions(unittest.TestCase):
    """Test EngineOptions configuration."""

    def test_defaults(self):
        options = EngineOptions()

        self.assertEqual(options.engine, "pillow")
        self.assertIsNone(options.app_path)
        self.assertIsNone(options.timeout)
        self.assertTrue(options.image_magick)

    def test_engine_name_normalized(self):
        self.assertEqual(EngineOptions(engine=" ImageMagick ").engine, "imagemagick")

    def test_invalid_engine(self):
        with self.assertRaises(ValueError):
            EngineOptions(engine="gimp")

    def test_invalid_timeout(self):
        with self.assertRaises(ValueError):
            EngineOptions(timeout=0)

    def test_graphicsmagick_has_no_directive_stack(self):
        self.assertFalse(EngineOptions(engine="graphicsmagick").image_magick)

    def test_to_dict(self):
        options = EngineOptions(engine="imagemagick", app_path="/opt/magick", timeout=30)

        self.assertEqual(
            options.to_dict(),
            {"engine": "imagemagick", "app_path": "/opt/magick", "timeout": 30},
        )

    def test_from_dict_ignores_unknown_keys(self):
        options = EngineOptions.from_dict({"engine": "imagemagick", "colorspace": "sRGB"})
        self.assertEqual(options.engine, "imagemagick")

    def test_from_dict_image_magick_flag(self):
        self.assertEqual(EngineOptions.from_dict({"image_magick": True}).engine, "imagemagick")
        self.assertEqual(EngineOptions.from_dict({"image_magick": False}).engine, "graphicsmagick")

    def test_from_dict_engine_wins_over_flag(self):
        options = EngineOptions.from_dict({"engine": "pillow", "image_magick": False})
        self.assertEqual(options.engine, "pillow")


if __name__ == "__main__":
    unittest.main()
