"""
Directive Handler Registry.

This module provides a centralized registry mapping directive kinds to the
functions that execute them in-process. The Pillow engine looks every
queued directive up here.

Classes:
    DirectiveHandlerRegistry: Registry for directive handlers

Functions:
    get_default_registry: Get the global default registry (singleton)
    register_default_handlers: Register all built-in Pillow handlers
"""

from typing import Any, Callable, Dict, List, Optional
import logging

from MZ_Libs.DirectiveLib.directive_models import Directive, DirectiveKind

logger = logging.getLogger(__name__)

# Type alias for handler function: (engine state, directive) -> None
HandlerFunction = Callable[[Any, Directive], None]


class DirectiveHandlerRegistry:
    """
    Registry for directive handlers.

    Example:
        >>> registry = DirectiveHandlerRegistry()
        >>> registry.register(DirectiveKind.FLIP, handle_flip)
        >>> registry.execute(state, flip())
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._handlers: Dict[DirectiveKind, HandlerFunction] = {}
        self._descriptions: Dict[DirectiveKind, str] = {}

    def register(
        self,
        kind: DirectiveKind,
        handler: HandlerFunction,
        description: str = "",
    ) -> None:
        """
        Register a directive handler.

        Args:
            kind: The directive kind handled
            handler: Callable accepting (state, directive)
            description: Human-readable description of the handler

        Raises:
            ValueError: If kind is not a DirectiveKind or handler is not callable
            RuntimeError: If kind is already registered
        """
        if not isinstance(kind, DirectiveKind):
            raise ValueError(f"kind must be a DirectiveKind, got {type(kind)}")

        if not callable(handler):
            raise ValueError(f"handler must be callable, got {type(handler)}")

        if kind in self._handlers:
            raise RuntimeError(
                f"Directive kind '{kind.value}' is already registered. "
                f"Use unregister() first to replace it."
            )

        self._handlers[kind] = handler
        self._descriptions[kind] = str(description)

        logger.debug(f"Registered handler for directive kind: {kind.value}")

    def unregister(self, kind: DirectiveKind) -> bool:
        """
        Unregister a directive handler.

        Returns:
            True if unregistered, False if kind was not registered
        """
        if kind in self._handlers:
            del self._handlers[kind]
            del self._descriptions[kind]
            logger.debug(f"Unregistered handler for directive kind: {kind.value}")
            return True

        return False

    def get_handler(self, kind: DirectiveKind) -> HandlerFunction:
        """
        Get the handler for a directive kind.

        Raises:
            KeyError: If kind is not registered
        """
        if kind not in self._handlers:
            available = ", ".join(self.list_kinds())
            raise KeyError(
                f"No handler registered for directive kind '{getattr(kind, 'value', kind)}'. "
                f"Available kinds: {available}"
            )

        return self._handlers[kind]

    def has_handler(self, kind: DirectiveKind) -> bool:
        return kind in self._handlers

    def execute(self, state: Any, directive: Directive) -> None:
        """
        Execute a directive against engine state.

        Raises:
            KeyError: If the directive kind is not registered
            Exception: Any exception raised by the handler
        """
        handler = self.get_handler(directive.kind)
        handler(state, directive)

    def list_kinds(self) -> List[str]:
        """
        Get names of all registered directive kinds.

        Returns:
            Sorted list of kind names
        """
        return sorted(kind.value for kind in self._handlers)

    def get_description(self, kind: DirectiveKind) -> str:
        """
        Raises:
            KeyError: If kind is not registered
        """
        if kind not in self._descriptions:
            raise KeyError(f"No description for directive kind: {getattr(kind, 'value', kind)}")

        return self._descriptions[kind]

    def clear(self) -> None:
        """Clear all registered handlers. Use with caution."""
        self._handlers.clear()
        self._descriptions.clear()
        logger.warning("Directive handler registry cleared")


# Global singleton registry
_default_registry: Optional[DirectiveHandlerRegistry] = None


def get_default_registry() -> DirectiveHandlerRegistry:
    """
    Get the global default registry (singleton).

    Creates the registry on first call and registers default handlers.
    """
    global _default_registry

    if _default_registry is None:
        _default_registry = DirectiveHandlerRegistry()
        register_default_handlers(_default_registry)

    return _default_registry


def register_default_handlers(registry: DirectiveHandlerRegistry) -> None:
    """
    Register all built-in Pillow directive handlers.

    RAW directives are left unregistered; the Pillow engine rejects them.

    Args:
        registry: The registry to register handlers with
    """
    from MZ_Libs.EngineLib import pillow_engine

    handlers = [
        (DirectiveKind.GRAVITY, pillow_engine.handle_gravity, "Set the anchor for geometry directives"),
        (DirectiveKind.CROP, pillow_engine.handle_crop, "Crop every image in the current list"),
        (DirectiveKind.REPAGE, pillow_engine.handle_repage, "Reset page offsets left by a crop"),
        (DirectiveKind.OPEN_GROUP, pillow_engine.handle_open_group, "Start a nested image list"),
        (DirectiveKind.CLOSE_GROUP, pillow_engine.handle_close_group, "Move a nested list into its parent"),
        (DirectiveKind.CLONE, pillow_engine.handle_clone, "Copy images from the parent list"),
        (DirectiveKind.FLIP, pillow_engine.handle_flip, "Mirror top to bottom"),
        (DirectiveKind.FLOP, pillow_engine.handle_flop, "Mirror left to right"),
        (DirectiveKind.ROTATE, pillow_engine.handle_rotate, "Rotate clockwise by degrees"),
        (DirectiveKind.APPEND, pillow_engine.handle_append, "Join the current list into one image"),
        (DirectiveKind.SWAP, pillow_engine.handle_swap, "Swap the last two images"),
        (DirectiveKind.DELETE, pillow_engine.handle_delete, "Remove images by index"),
        (DirectiveKind.RESIZE, pillow_engine.handle_resize, "Resize every image in the current list"),
        (DirectiveKind.FILL, pillow_engine.handle_fill, "Set the drawing color"),
        (DirectiveKind.DRAW, pillow_engine.handle_draw, "Draw a primitive"),
    ]

    for kind, handler, description in handlers:
        registry.register(kind, handler, description=description)

    logger.info("Registered default directive handlers")
