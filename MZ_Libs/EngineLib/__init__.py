"""
EngineLib - Image handles and directive engines

This module provides the chainable image handle, its engine options and
the engines (Pillow, ImageMagick, GraphicsMagick) that execute queued
directives.
"""

from MZ_Libs.EngineLib.engine_options import EngineOptions
from MZ_Libs.EngineLib.directive_handlers import (
    DirectiveHandlerRegistry,
    get_default_registry,
    register_default_handlers,
)
from MZ_Libs.EngineLib.pillow_engine import EngineState, Layer, PillowEngine
from MZ_Libs.EngineLib.magick_engine import GraphicsMagickEngine, MagickCliEngine
from MZ_Libs.EngineLib.image_handle import (
    CanvasSpec,
    ImageHandle,
    create_engine,
    subclass,
)

__all__ = [
    "EngineOptions",
    "DirectiveHandlerRegistry",
    "get_default_registry",
    "register_default_handlers",
    "EngineState",
    "Layer",
    "PillowEngine",
    "GraphicsMagickEngine",
    "MagickCliEngine",
    "CanvasSpec",
    "ImageHandle",
    "create_engine",
    "subclass",
]
