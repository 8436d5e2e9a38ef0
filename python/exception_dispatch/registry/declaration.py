"""Declarative marking of exception handler functions.

Example:
    >>> class GlobalAdvice:
    ...     @exception_handler(FileNotFoundError, media_types=["application/json"])
    ...     def missing_file(self, error):
    ...         ...
    ...
    ...     @exception_handler
    ...     def any_os_error(self, error: OSError):
    ...         ...
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar, overload

HANDLER_ATTRIBUTE = "__exception_handler__"

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class ExceptionHandlerDeclaration:
    """Raw declaration data attached to a handler function.

    Attributes:
        exceptions: Explicitly declared exception classes (may be empty).
        media_types: Declared media type strings (may be empty).
    """

    exceptions: tuple[type, ...] = ()
    media_types: tuple[str, ...] = ()


@overload
def exception_handler(function: F, /) -> F: ...


@overload
def exception_handler(
    *exceptions: type[BaseException],
    media_types: Sequence[str] = (),
    produces: str | Sequence[str] | None = None,
) -> Callable[[F], F]: ...


def exception_handler(
    *exceptions: Any,
    media_types: Sequence[str] = (),
    produces: str | Sequence[str] | None = None,
) -> Any:
    """Mark a function as an exception handler.

    Can be used bare (``@exception_handler``), in which case the handled
    exception types are taken from the function's parameter annotations,
    or with explicit exception classes and media types.

    Args:
        *exceptions: Exception classes handled by the function.
        media_types: Media types the handler can produce.
        produces: Alias for media_types accepting a single string.

    Returns:
        The decorator, or the decorated function when used bare.
    """
    if len(exceptions) == 1 and _is_function_like(exceptions[0]):
        return _mark(exceptions[0], ExceptionHandlerDeclaration())

    declared_media: list[str] = list(media_types)
    if produces is not None:
        declared_media.extend([produces] if isinstance(produces, str) else produces)

    declaration = ExceptionHandlerDeclaration(
        exceptions=tuple(exceptions),
        media_types=tuple(declared_media),
    )

    def decorator(function: F) -> F:
        return _mark(function, declaration)

    return decorator


def declaration_of(member: Any) -> ExceptionHandlerDeclaration | None:
    """Return the declaration attached to a class member, if any.

    Understands plain functions as well as staticmethod and classmethod
    wrappers in either decorator order.
    """
    for candidate in (member, getattr(member, "__func__", None)):
        declaration = getattr(candidate, HANDLER_ATTRIBUTE, None)
        if isinstance(declaration, ExceptionHandlerDeclaration):
            return declaration
    return None


def _is_function_like(obj: Any) -> bool:
    if isinstance(obj, (staticmethod, classmethod)):
        return True
    return callable(obj) and not isinstance(obj, type)


def _mark(function: F, declaration: ExceptionHandlerDeclaration) -> F:
    # staticmethod/classmethod objects: mark the wrapped function
    target = getattr(function, "__func__", function)
    setattr(target, HANDLER_ATTRIBUTE, declaration)
    return function
