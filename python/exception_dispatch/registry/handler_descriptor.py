"""Handler descriptor type consumed by the dispatch table builder.

This module defines the HandlerDescriptor dataclass that carries a handler
function together with its raw declaration data.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class HandlerDescriptor:
    """A handler function plus its raw declaration data.

    Contains everything the builder needs to compute a handler's coverage:
    - function: The handler callable (its identity is the handler identity)
    - exceptions: Explicitly declared exception classes, may be empty
    - media_types: Declared media type strings, may be empty
    - parameter_types: The function's parameter types (fallback coverage)

    Attributes:
        function: The handler callable.
        exceptions: Explicit exception classes, in declaration order.
        media_types: Media type strings, in declaration order.
        parameter_types: Parameter annotation types, in signature order.
        name: Display name used in errors and logs.

    Example:
        >>> def on_io_error(error: OSError) -> None: ...
        >>> descriptor = HandlerDescriptor(
        ...     function=on_io_error,
        ...     parameter_types=(OSError,),
        ... )
        >>> descriptor.declares_exceptions()
        False
    """

    function: Callable[..., Any]
    exceptions: tuple[type, ...] = ()
    media_types: tuple[str, ...] = ()
    parameter_types: tuple[Any, ...] = ()
    name: str = field(default="")

    def __post_init__(self) -> None:
        # Normalize lists handed in by callers to tuples so descriptors hash
        object.__setattr__(self, "exceptions", tuple(self.exceptions))
        object.__setattr__(self, "media_types", tuple(self.media_types))
        object.__setattr__(self, "parameter_types", tuple(self.parameter_types))
        if not self.name:
            object.__setattr__(self, "name", _qualified_name(self.function))

    def declares_exceptions(self) -> bool:
        """Check if exception types were declared explicitly.

        Returns:
            True if the explicit exception list is non-empty.
        """
        return len(self.exceptions) > 0

    def declares_media_types(self) -> bool:
        """Check if media types were declared.

        Returns:
            True if at least one media type string was declared.
        """
        return len(self.media_types) > 0

    def same_function(self, other: HandlerDescriptor) -> bool:
        """Check if both descriptors refer to the same handler function."""
        return self is other or self.function == other.function

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HandlerDescriptor:
        """Create a HandlerDescriptor from plain dictionary data.

        Args:
            data: Dictionary with ``function`` and optional ``exceptions``,
                ``media_types`` (or ``produces``), ``parameter_types`` and
                ``name`` keys.

        Returns:
            HandlerDescriptor instance.
        """
        media_types = data.get("media_types") or data.get("produces") or ()
        if isinstance(media_types, str):
            media_types = (media_types,)
        return cls(
            function=data["function"],
            exceptions=tuple(data.get("exceptions") or ()),
            media_types=tuple(media_types),
            parameter_types=tuple(data.get("parameter_types") or ()),
            name=data.get("name") or "",
        )

    def __str__(self) -> str:
        return self.name


def _qualified_name(function: Callable[..., Any]) -> str:
    underlying = getattr(function, "__func__", function)
    module = getattr(underlying, "__module__", None)
    qualname = getattr(underlying, "__qualname__", None) or repr(underlying)
    if module and module not in ("builtins", "__main__"):
        return f"{module}.{qualname}"
    return qualname


def descriptors_from(
    items: Sequence[HandlerDescriptor | dict[str, Any]],
) -> list[HandlerDescriptor]:
    """Coerce a mixed sequence of descriptors and dicts into descriptors."""
    return [
        item if isinstance(item, HandlerDescriptor) else HandlerDescriptor.from_dict(item)
        for item in items
    ]
