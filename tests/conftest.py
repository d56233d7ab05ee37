"""
Pytest configuration and shared fixtures for Mirrorize tests.

This module provides the four-color calibration image used by the
mirroring scenarios, and helpers to name sampled colors.
"""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from MZ_Libs.EngineLib.image_handle import ImageHandle

COLORS = {
    "yellow": (255, 255, 0),
    "red": (255, 0, 0),
    "green": (0, 255, 0),
    "blue": (0, 0, 255),
}


def rgb(name):
    r, g, b = COLORS[name]
    return f"rgb({r},{g},{b})"


def color_name(value):
    """Name of a sampled (r, g, b) color, or None if it is not a test color."""
    for name, color in COLORS.items():
        if tuple(value[:3]) == color:
            return name
    return None


def draw_calibration(width, height, options=None):
    """
    Handle for a canvas split into four colored quadrants:

     __________________
    |_yellow_|__red___|
    |_green__|__blue__|
    """
    half_width, half_height = width // 2, height // 2
    return (
        ImageHandle(width=width, height=height, color=rgb("yellow"), options=options)
        .fill(rgb("red")).draw_rectangle(half_width, 0, width, height)
        .fill(rgb("green")).draw_rectangle(0, half_height, half_width, height)
        .fill(rgb("blue")).draw_rectangle(half_width, half_height, width, height)
    )


@pytest.fixture
def calibration_image(tmp_path):
    """
    Provide a 200x200 calibration PNG on disk.

    Returns:
        Path to the image
    """
    path = tmp_path / "original.png"
    draw_calibration(200, 200).write(path)
    return path


@pytest.fixture
def noise_image(tmp_path):
    """
    Provide a 64x48 PNG of seeded random pixels, so every mirrored piece
    is distinguishable from the others.

    Returns:
        (path, numpy array of shape (48, 64, 4))
    """
    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(48, 64, 4), dtype=np.uint8)
    pixels[..., 3] = 255

    path = tmp_path / "noise.png"
    Image.fromarray(pixels).save(path)
    return path, pixels


@pytest.fixture
def sample_colors():
    """Provide the calibration colors as a name -> (r, g, b) mapping."""
    return dict(COLORS)
