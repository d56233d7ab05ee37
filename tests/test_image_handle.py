"""
Tests for ImageHandle.

Tests cover:
- Construction from a file or a canvas, and its validation
- Chainable operations and the tokens they queue
- Engine selection from options and subclass()
- Rendering, writing and sampling
"""

import pytest
from PIL import Image

from MZ_Libs.DirectiveLib.directive_models import Direction, DirectiveKind
from MZ_Libs.DirectiveLib.mirror_templates import get_template
from MZ_Libs.EngineLib.engine_options import EngineOptions
from MZ_Libs.EngineLib.image_handle import ImageHandle, subclass
from MZ_Libs.EngineLib.magick_engine import GraphicsMagickEngine, MagickCliEngine
from MZ_Libs.EngineLib.pillow_engine import PillowEngine

from conftest import draw_calibration


class TestConstruction:
    """Tests for handle construction."""

    def test_from_path(self, tmp_path):
        handle = ImageHandle(tmp_path / "photo.png")

        assert handle.source == tmp_path / "photo.png"
        assert handle.canvas is None
        assert handle.directives == []

    def test_from_canvas(self):
        handle = ImageHandle(width=30, height=20, color="red")

        assert handle.source is None
        assert (handle.canvas.width, handle.canvas.height, handle.canvas.color) == (30, 20, "red")

    def test_canvas_default_color(self):
        assert ImageHandle(width=3, height=3).canvas.color == "white"

    def test_requires_a_source(self):
        with pytest.raises(ValueError, match="requires"):
            ImageHandle()

    def test_rejects_both_sources(self, tmp_path):
        with pytest.raises(ValueError, match="not both"):
            ImageHandle(tmp_path / "photo.png", width=10, height=10)

    def test_canvas_needs_both_dimensions(self):
        with pytest.raises(ValueError):
            ImageHandle(width=10)

    @pytest.mark.parametrize("width, height", [(0, 10), (10, -1)])
    def test_canvas_size_must_be_positive(self, width, height):
        with pytest.raises(ValueError, match="positive"):
            ImageHandle(width=width, height=height)

    def test_repr(self):
        text = repr(ImageHandle(width=4, height=2, color="red").mirrorize("north"))

        assert "4x2 red" in text
        assert "pillow" in text
        assert f"directives={len(get_template(Direction.NORTH))}" in text


class TestOperations:
    """Tests for chainable operations."""

    def setup_method(self):
        self.handle = ImageHandle(width=200, height=200)

    def test_operations_return_handle(self):
        handle = self.handle
        assert handle.gravity("East") is handle
        assert handle.resize(10, 10) is handle
        assert handle.crop(5, 5) is handle
        assert handle.fill("red") is handle
        assert handle.draw_rectangle(0, 0, 1, 1) is handle
        assert handle.out("-flip") is handle
        assert handle.mirrorize() is handle

    def test_exact_resize(self):
        self.handle.resize(200, 150, "!")
        assert self.handle.command_args() == ["-resize", "200x150!"]

    def test_percent_resize_uses_width_for_height(self):
        self.handle.resize(50, option="%")
        assert self.handle.command_args() == ["-resize", "50%x50%"]

    def test_resize_needs_a_size(self):
        with pytest.raises(ValueError):
            self.handle.resize(None)

    def test_crop_always_has_offset(self):
        self.handle.crop(150, 100)
        assert self.handle.command_args() == ["-crop", "150x100+0+0"]

    def test_crop_with_offset(self):
        self.handle.crop(70, 70, 10, 5)
        assert self.handle.command_args() == ["-crop", "70x70+10+5"]

    def test_fill_and_draw(self):
        self.handle.fill("rgb(255,0,0)").draw_rectangle(100, 0, 200, 200)

        assert self.handle.command_args() == [
            "-fill", "rgb(255,0,0)", "-draw", "rectangle 100,0 200,200",
        ]

    def test_out_parses_tokens(self):
        self.handle.out("-gravity", "East", "+append", "-quality", "90")

        kinds = [directive.kind for directive in self.handle.directives]
        assert kinds == [DirectiveKind.GRAVITY, DirectiveKind.APPEND, DirectiveKind.RAW, DirectiveKind.RAW]
        assert self.handle.command_args() == ["-gravity", "East", "+append", "-quality", "90"]

    def test_mirrorize_after_operations(self):
        self.handle.resize(200, 150, "!").mirrorize("south")

        template = [token for directive in get_template(Direction.SOUTH) for token in directive.to_args()]
        assert self.handle.command_args() == ["-resize", "200x150!"] + template


class TestEngineSelection:
    """Tests for choosing the engine from options."""

    def test_default_is_pillow(self):
        handle = ImageHandle(width=1, height=1)

        assert isinstance(handle.engine, PillowEngine)
        assert handle.image_magick

    def test_engine_option_dict(self):
        handle = ImageHandle(width=1, height=1, options={"engine": "imagemagick"})

        assert type(handle.engine) is MagickCliEngine
        assert handle.image_magick

    def test_engine_options_instance(self):
        options = EngineOptions(engine="graphicsmagick", app_path="/opt/gm")
        handle = ImageHandle(width=1, height=1, options=options)

        assert isinstance(handle.engine, GraphicsMagickEngine)
        assert handle.options is options
        assert not handle.image_magick

    def test_unknown_engine(self):
        with pytest.raises(ValueError, match="Unknown engine"):
            ImageHandle(width=1, height=1, options={"engine": "gimp"})

    def test_subclass_image_magick_flag(self):
        Magick = subclass(image_magick=True)
        handle = Magick(width=1, height=1)

        assert issubclass(Magick, ImageHandle)
        assert type(handle.engine) is MagickCliEngine

    def test_subclass_graphicsmagick(self):
        Graphics = subclass(image_magick=False)
        handle = Graphics(width=1, height=1).mirrorize("north")

        assert isinstance(handle.engine, GraphicsMagickEngine)
        assert handle.directives == []

    def test_subclass_defaults_can_be_overridden(self):
        Graphics = subclass(image_magick=False)
        handle = Graphics(width=1, height=1, options={"engine": "pillow"})

        assert isinstance(handle.engine, PillowEngine)

    def test_subclass_validates_options(self):
        with pytest.raises(ValueError):
            subclass(engine="gimp")

    def test_subclass_does_not_change_base(self):
        subclass(image_magick=False)
        assert ImageHandle.default_options == {}


class TestExecution:
    """Tests for rendering through the Pillow engine."""

    def test_write_png(self, tmp_path):
        output = ImageHandle(width=20, height=10, color="red").write(tmp_path / "out.png")

        assert output == tmp_path / "out.png"
        with Image.open(output) as image:
            assert image.size == (20, 10)

    def test_write_jpeg(self, tmp_path):
        output = ImageHandle(width=20, height=10, color="blue").write(tmp_path / "out.jpg")

        with Image.open(output) as image:
            assert image.format == "JPEG"
            assert image.mode == "RGB"

    def test_size(self):
        assert ImageHandle(width=200, height=200).resize(50, option="%").size() == (100, 100)

    def test_color_at(self, sample_colors):
        handle = draw_calibration(200, 200)

        assert handle.color_at(50, 50) == sample_colors["yellow"]
        assert handle.color_at(150, 50) == sample_colors["red"]
        assert handle.color_at(50, 150) == sample_colors["green"]
        assert handle.color_at(150, 150) == sample_colors["blue"]

    def test_color_at_outside_image(self):
        with pytest.raises(ValueError, match="outside"):
            ImageHandle(width=10, height=10).color_at(10, 0)

    def test_file_source(self, tmp_path):
        path = tmp_path / "green.png"
        Image.new("RGB", (8, 6), (0, 255, 0)).save(path)

        handle = ImageHandle(path).mirrorize("east")

        assert handle.size() == (8, 6)
        assert handle.color_at(0, 0) == (0, 255, 0)
