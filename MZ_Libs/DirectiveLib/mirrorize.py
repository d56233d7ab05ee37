"""
The mirrorize directive composer.

Appends the mirror template for a direction to an image handle's pending
directive queue. Nothing is executed here; the engine runs the queue when
the handle is written or inspected.

Classes:
    MirrorizeMixin: Adds ``mirrorize`` to an image handle class

Functions:
    mirrorize: Append the mirror directives for a direction to a handle
"""

import logging
from typing import Any, Optional, Union

from MZ_Libs.DirectiveLib.directive_models import Direction
from MZ_Libs.DirectiveLib.mirror_templates import get_template

logger = logging.getLogger(__name__)


def mirrorize(
    handle: Any,
    direction: Optional[Union[str, Direction]] = None,
    strict: bool = False,
) -> Any:
    """
    Mirror an image along a direction, kaleidoscope style.

    The kept part of the image is named by the direction: ``north`` keeps the
    top half and mirrors it downwards, ``southeast`` keeps the bottom-right
    quadrant and mirrors it into the other three, and so on.

    Args:
        handle: Image handle exposing ``image_magick`` (bool) and a
                ``directives`` list
        direction: One of north, south, west, east, northwest, northeast,
                   southwest, southeast (case-insensitive). None or empty
                   means west.
        strict: Raise on an unrecognized direction instead of ignoring it

    Returns:
        The same handle, for chaining

    Raises:
        ValueError: If strict is set and the direction is unrecognized
    """
    # Only the directive stack engines understand clone/append/swap
    if not handle.image_magick:
        logger.debug(f"mirrorize({direction!r}) skipped: engine has no directive stack")
        return handle

    resolved = Direction.parse(direction)
    if resolved is None:
        valid = ", ".join(Direction.names())
        if strict:
            raise ValueError(f"Unknown direction: {direction}. Valid directions: {valid}")
        logger.warning(f"Ignoring unknown mirrorize direction {direction!r}. Valid directions: {valid}")
        return handle

    template = get_template(resolved)
    handle.directives.extend(template)

    logger.debug(f"mirrorize({resolved.value}) queued {len(template)} directives")
    return handle


class MirrorizeMixin:
    """
    Gives an image handle class a chainable ``mirrorize`` method.

    The host class must provide ``image_magick`` and ``directives``.
    """

    def mirrorize(
        self,
        direction: Optional[Union[str, Direction]] = None,
        strict: bool = False,
    ):
        return mirrorize(self, direction, strict=strict)
