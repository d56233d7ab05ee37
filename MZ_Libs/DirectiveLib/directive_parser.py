"""
Token parsing for engine directives.

Turns engine argv tokens (as passed to ``ImageHandle.out``) into typed
directives, and geometry strings into Geometry values.

Functions:
    parse_geometry: Parse ``WxH+X+Y`` style geometry
    parse_index_spec: Expand an index spec like ``0-3`` or ``1,2``
    parse_directives: Parse a token sequence into directives
"""

import re
from typing import Iterable, List, Sequence

from MZ_Libs.DirectiveLib.directive_models import (
    Directive,
    DirectiveKind,
    Geometry,
    Gravity,
)

GEOMETRY_PATTERN = re.compile(
    r"^(?P<width>\d+(?:\.\d+)?)?(?P<width_percent>%)?"
    r"(?:x(?P<height>\d+(?:\.\d+)?)?(?P<height_percent>%)?)?"
    r"(?P<x>[+-]\d+)?(?P<y>[+-]\d+)?"
    r"(?P<flags>[!%<>^]*)$"
)

# Tokens that take no argument
_BARE_TOKENS = {
    "+repage": DirectiveKind.REPAGE,
    "(": DirectiveKind.OPEN_GROUP,
    ")": DirectiveKind.CLOSE_GROUP,
    "+clone": DirectiveKind.CLONE,
    "-flip": DirectiveKind.FLIP,
    "-flop": DirectiveKind.FLOP,
    "+swap": DirectiveKind.SWAP,
}

# Tokens followed by exactly one argument
_ARGUMENT_TOKENS = {
    "-gravity": DirectiveKind.GRAVITY,
    "-crop": DirectiveKind.CROP,
    "-clone": DirectiveKind.CLONE,
    "-rotate": DirectiveKind.ROTATE,
    "-delete": DirectiveKind.DELETE,
    "-resize": DirectiveKind.RESIZE,
    "-fill": DirectiveKind.FILL,
    "-draw": DirectiveKind.DRAW,
}


def parse_geometry(text: str) -> Geometry:
    """
    Parse an engine geometry string.

    Accepts forms such as ``200x150!``, ``150x100+0+0``, ``50%x100%+0+0``
    and ``50%``. A single percent value applies to both dimensions.

    Args:
        text: Geometry string

    Returns:
        Parsed Geometry

    Raises:
        ValueError: If the text is not a valid geometry
    """
    text = str(text).strip()
    match = GEOMETRY_PATTERN.match(text)
    if not text or match is None:
        raise ValueError(f"Invalid geometry: {text!r}")

    parts = match.groupdict()
    flags = parts["flags"] or ""

    width = float(parts["width"]) if parts["width"] else None
    height = float(parts["height"]) if parts["height"] else None
    percent = bool(parts["width_percent"] or parts["height_percent"] or "%" in flags)

    if width is None and height is None:
        raise ValueError(f"Geometry has no size: {text!r}")

    if percent and height is None and "x" not in text:
        height = width

    has_offset = parts["x"] is not None
    x = int(parts["x"]) if parts["x"] else 0
    y = int(parts["y"]) if parts["y"] else 0

    return Geometry(
        width=width,
        height=height,
        x=x,
        y=y,
        percent=percent,
        exact="!" in flags,
        has_offset=has_offset,
    )


def parse_index_spec(spec: str, count: int) -> List[int]:
    """
    Expand an index spec against a list of ``count`` images.

    Supports single indexes, comma separated lists and inclusive ranges
    (``0-3``). Negative indexes count from the end of the list.

    Raises:
        ValueError: If the spec is malformed or an index is out of range
    """
    indexes: List[int] = []

    for part in str(spec).split(","):
        part = part.strip()
        if not part:
            raise ValueError(f"Invalid index spec: {spec!r}")

        match = re.match(r"^(-?\d+)(?:-(-?\d+))?$", part)
        if match is None:
            raise ValueError(f"Invalid index spec: {spec!r}")

        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) is not None else start
        if start < 0:
            start += count
        if end < 0:
            end += count

        if not (0 <= start < count and 0 <= end < count):
            raise ValueError(
                f"Index spec {spec!r} out of range for {count} image(s)"
            )

        step = 1 if end >= start else -1
        indexes.extend(range(start, end + step, step))

    return indexes


def _build_directive(kind: DirectiveKind, argument: str) -> Directive:
    if kind is DirectiveKind.GRAVITY:
        return Directive(kind, Gravity.parse(argument))
    if kind in (DirectiveKind.CROP, DirectiveKind.RESIZE):
        return Directive(kind, parse_geometry(argument))
    if kind is DirectiveKind.ROTATE:
        try:
            return Directive(kind, float(argument))
        except ValueError:
            raise ValueError(f"Invalid rotation angle: {argument!r}")
    return Directive(kind, argument)


def parse_directives(tokens: Iterable[str]) -> List[Directive]:
    """
    Parse engine tokens into directives.

    Known tokens become typed directives. Anything else is kept verbatim as a
    RAW directive so it can still be passed through to a command line engine.

    Args:
        tokens: Engine argv tokens

    Returns:
        Directives in token order

    Raises:
        ValueError: If a known token is missing its argument or the argument
            is malformed
    """
    items: Sequence[str] = [str(token) for token in tokens]
    directives: List[Directive] = []

    index = 0
    while index < len(items):
        token = items[index]

        if token in _BARE_TOKENS:
            directives.append(Directive(_BARE_TOKENS[token]))
            index += 1
        elif token in ("-append", "+append"):
            directives.append(Directive(DirectiveKind.APPEND, token == "-append"))
            index += 1
        elif token in _ARGUMENT_TOKENS:
            if index + 1 >= len(items):
                raise ValueError(f"Directive {token} requires an argument")
            directives.append(_build_directive(_ARGUMENT_TOKENS[token], items[index + 1]))
            index += 2
        else:
            directives.append(Directive(DirectiveKind.RAW, (token,)))
            index += 1

    return directives
