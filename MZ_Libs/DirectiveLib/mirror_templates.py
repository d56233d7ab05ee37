"""
Mirror directive templates.

Each direction maps to a fixed directive sequence that crops the kept part
of the canvas, mirrors clones of it and reassembles them into an image of
the original size.

Every template:
- starts by setting a known gravity and ends by restoring NorthWest, so
  templates chain with each other and with later crops;
- resets page bookkeeping (``+repage``) right after its crop, so crops
  issued before the template do not leak stale offsets into it.

Halves (north, south, west, east) keep one half and append its mirror.
Quadrants (the diagonals) keep one quadrant, derive three clones from it
(flop, flip, 180 degree rotation) at stack indexes 1, 2 and 3, build two
rows, drop the four pieces and stack the rows. The row order is chosen so
the kept quadrant stays unflipped in its own corner.

Functions:
    get_template: Directive sequence for a direction
    iter_templates: All (direction, template) pairs
"""

from typing import Dict, Iterator, Tuple

from MZ_Libs.DirectiveLib.directive_models import (
    Direction,
    Directive,
    Geometry,
    Gravity,
    append,
    clone,
    close_group,
    crop,
    delete,
    flip,
    flop,
    gravity,
    open_group,
    repage,
    rotate,
    swap,
)

Template = Tuple[Directive, ...]

# Stack indexes after the quadrant clones have been made
QUADRANT = 0
QUADRANT_FLOP = 1
QUADRANT_FLIP = 2
QUADRANT_ROTATED = 3

TOP_HALF = Geometry(width=100, height=50, percent=True, has_offset=True)
LEFT_HALF = Geometry(width=50, height=100, percent=True, has_offset=True)
QUARTER = Geometry(width=50, height=50, percent=True, has_offset=True)


def _half(anchor: Gravity, size: Geometry, mirror: Directive, vertical: bool, kept_last: bool) -> Template:
    directives = [
        gravity(anchor),
        crop(size),
        repage(),
        open_group(), clone(), mirror, close_group(),
    ]
    if kept_last:
        directives.append(swap())
    directives.extend([append(vertical), gravity(Gravity.NORTH_WEST)])
    return tuple(directives)


def _row(left: int, right: int) -> Template:
    return (open_group(), clone(left), clone(right), append(vertical=False), close_group())


def _quadrant(anchor: Gravity, top_row: Tuple[int, int], bottom_row: Tuple[int, int]) -> Template:
    return (
        gravity(anchor),
        crop(QUARTER),
        repage(),
        open_group(), clone(QUADRANT), flop(), close_group(),
        open_group(), clone(QUADRANT), flip(), close_group(),
        open_group(), clone(QUADRANT), rotate(180), close_group(),
        *_row(*top_row),
        *_row(*bottom_row),
        delete(f"{QUADRANT}-{QUADRANT_ROTATED}"),
        append(vertical=True),
        gravity(Gravity.NORTH_WEST),
    )


MIRROR_TEMPLATES: Dict[Direction, Template] = {
    Direction.NORTH: _half(Gravity.NORTH_WEST, TOP_HALF, flip(), vertical=True, kept_last=False),
    Direction.SOUTH: _half(Gravity.SOUTH, TOP_HALF, flip(), vertical=True, kept_last=True),
    Direction.WEST: _half(Gravity.NORTH_WEST, LEFT_HALF, flop(), vertical=False, kept_last=False),
    Direction.EAST: _half(Gravity.EAST, LEFT_HALF, flop(), vertical=False, kept_last=True),
    Direction.NORTHWEST: _quadrant(
        Gravity.NORTH_WEST,
        top_row=(QUADRANT, QUADRANT_FLOP),
        bottom_row=(QUADRANT_FLIP, QUADRANT_ROTATED),
    ),
    Direction.NORTHEAST: _quadrant(
        Gravity.NORTH_EAST,
        top_row=(QUADRANT_FLOP, QUADRANT),
        bottom_row=(QUADRANT_ROTATED, QUADRANT_FLIP),
    ),
    Direction.SOUTHWEST: _quadrant(
        Gravity.SOUTH_WEST,
        top_row=(QUADRANT_FLIP, QUADRANT_ROTATED),
        bottom_row=(QUADRANT, QUADRANT_FLOP),
    ),
    Direction.SOUTHEAST: _quadrant(
        Gravity.SOUTH_EAST,
        top_row=(QUADRANT_ROTATED, QUADRANT_FLIP),
        bottom_row=(QUADRANT_FLOP, QUADRANT),
    ),
}


def get_template(direction: Direction) -> Template:
    """
    Get the directive sequence for a direction.

    Args:
        direction: A Direction member

    Returns:
        Tuple of directives, in the order they must be issued
    """
    return MIRROR_TEMPLATES[direction]


def iter_templates() -> Iterator[Tuple[Direction, Template]]:
    for direction in Direction:
        yield direction, MIRROR_TEMPLATES[direction]
