"""Discovery of exception handler functions declared on a container class.

The container's MRO is walked from the most derived class upward. Each
member name is considered once, so a handler overridden in a subclass is
registered a single time using the most derived definition. An override
without the decorator inherits the nearest declaration for that name.

Example:
    >>> class BaseAdvice:
    ...     @exception_handler
    ...     def on_error(self, error: OSError): ...
    ...
    >>> class Advice(BaseAdvice):
    ...     def on_error(self, error: OSError): ...
    ...
    >>> [d.name for d in discover_handlers(Advice)]
    ['Advice.on_error']
"""

from __future__ import annotations

import inspect
import types
import typing
from typing import Any, Union

from ..logging import log_debug, log_trace
from .declaration import ExceptionHandlerDeclaration, declaration_of
from .handler_descriptor import HandlerDescriptor


def discover_handlers(container: Any) -> list[HandlerDescriptor]:
    """Collect handler descriptors from a container class or instance.

    Args:
        container: Class declaring handlers, or an instance of one. For an
            instance the descriptors hold bound methods.

    Returns:
        Descriptors in discovery order: most derived class first, then
        declaration order within each class.
    """
    container_type = container if isinstance(container, type) else type(container)
    seen: set[str] = set()
    descriptors: list[HandlerDescriptor] = []

    for klass in container_type.__mro__:
        if klass is object:
            continue
        for name in vars(klass):
            if name in seen:
                continue
            seen.add(name)

            declaration = _nearest_declaration(container_type, klass, name)
            if declaration is None:
                continue

            function = getattr(container, name)
            if not callable(function):
                continue
            descriptor = HandlerDescriptor(
                function=function,
                exceptions=declaration.exceptions,
                media_types=declaration.media_types,
                parameter_types=parameter_types_of(function),
                name=f"{klass.__qualname__}.{name}",
            )
            log_trace(
                "Discovered exception handler",
                {"container": container_type.__qualname__, "function": descriptor.name},
            )
            descriptors.append(descriptor)

    log_debug(
        f"Discovered {len(descriptors)} exception handlers",
        {"container": container_type.__qualname__},
    )
    return descriptors


def _nearest_declaration(
    container_type: type, defining_class: type, name: str
) -> ExceptionHandlerDeclaration | None:
    """First declaration for name from defining_class upward in the MRO."""
    mro = container_type.__mro__
    for klass in mro[mro.index(defining_class) :]:
        if name not in vars(klass):
            continue
        declaration = declaration_of(vars(klass)[name])
        if declaration is not None:
            return declaration
    return None


def parameter_types_of(function: Any) -> tuple[Any, ...]:
    """Return the annotated parameter types of a function in signature order.

    ``Optional[X]``, ``X | None`` and other unions contribute each member.
    Annotations that cannot be evaluated are kept as they are declared.
    """
    underlying = inspect.unwrap(getattr(function, "__func__", function))
    try:
        hints = typing.get_type_hints(underlying)
    except Exception:
        # Forward references that cannot be evaluated
        hints = dict(getattr(underlying, "__annotations__", {}))

    try:
        parameters = inspect.signature(underlying).parameters
    except (TypeError, ValueError):
        return ()

    result: list[Any] = []
    for name in parameters:
        if name not in hints:
            continue
        for hint in _flatten(hints[name]):
            if hint not in result:
                result.append(hint)
    return tuple(result)


def _flatten(hint: Any) -> list[Any]:
    origin = typing.get_origin(hint)
    if origin is Union or origin is types.UnionType:
        members: list[Any] = []
        for arg in typing.get_args(hint):
            members.extend(_flatten(arg))
        return members
    if hint is type(None):
        return []
    return [hint]
