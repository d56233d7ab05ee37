"""
DirectiveLib - Directive vocabulary and the mirrorize composer

This module provides typed engine directives, token parsing, the per
direction mirror templates and the composer that queues them on a handle.
"""

from MZ_Libs.DirectiveLib.directive_models import (
    Direction,
    Directive,
    DirectiveKind,
    Geometry,
    Gravity,
)
from MZ_Libs.DirectiveLib.directive_parser import (
    parse_directives,
    parse_geometry,
    parse_index_spec,
)
from MZ_Libs.DirectiveLib.mirror_templates import get_template, iter_templates
from MZ_Libs.DirectiveLib.mirrorize import MirrorizeMixin, mirrorize

__all__ = [
    "Direction",
    "Directive",
    "DirectiveKind",
    "Geometry",
    "Gravity",
    "parse_directives",
    "parse_geometry",
    "parse_index_spec",
    "get_template",
    "iter_templates",
    "MirrorizeMixin",
    "mirrorize",
]
