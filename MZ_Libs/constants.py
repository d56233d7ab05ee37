"""
Constants and configuration values for Mirrorize.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the library.
"""

# Directions
DEFAULT_DIRECTION = "west"

# Gravity
DEFAULT_GRAVITY = "NorthWest"

# Engine names
ENGINE_PILLOW = "pillow"
ENGINE_IMAGEMAGICK = "imagemagick"
ENGINE_GRAPHICSMAGICK = "graphicsmagick"
DEFAULT_ENGINE = ENGINE_PILLOW
SUPPORTED_ENGINES = (ENGINE_PILLOW, ENGINE_IMAGEMAGICK, ENGINE_GRAPHICSMAGICK)

# Executables, in lookup order
IMAGEMAGICK_EXECUTABLES = ("magick", "convert")
GRAPHICSMAGICK_EXECUTABLE = "gm"

# Canvas defaults
DEFAULT_CANVAS_COLOR = "white"
DEFAULT_FILL_COLOR = "black"
DEFAULT_IMAGE_MODE = "RGBA"

# File naming
DEFAULT_OUTPUT_FORMAT = "PNG"
TEMP_RENDER_NAME = "render.png"

# Process exit codes for the command line tool
EXIT_OK = 0
EXIT_FAILURE = 1

# Option field names
FIELD_ENGINE = "engine"
FIELD_IMAGE_MAGICK = "image_magick"
