"""
exception-dispatch

Resolves raised exceptions to the handler functions declared on a class,
taking the requested response media type into account.

Example:
    >>> from exception_dispatch import ExceptionHandlerResolver, MediaType, exception_handler
    >>>
    >>> class GlobalAdvice:
    ...     @exception_handler
    ...     def on_os_error(self, error: OSError): ...
    ...
    ...     @exception_handler(FileNotFoundError, media_types=["application/json"])
    ...     def on_missing_file(self, error): ...
    >>>
    >>> resolver = ExceptionHandlerResolver.for_container(GlobalAdvice)
    >>> resolver.resolve_by_exception(FileNotFoundError(), MediaType.APPLICATION_JSON).name
    'GlobalAdvice.on_missing_file'
    >>> resolver.resolve_by_exception(FileNotFoundError(), "text/plain").name
    'GlobalAdvice.on_os_error'
    >>> resolver.resolve_by_exception(RuntimeError()) is None
    True
"""

from __future__ import annotations

from exception_dispatch.cache import ConcurrentLruCache
from exception_dispatch.exceptions import (
    AmbiguousMappingError,
    ConfigurationError,
    ExceptionDispatchError,
    InvalidMediaTypeError,
    NoExceptionTypesError,
)
from exception_dispatch.logging import (
    log_debug,
    log_error,
    log_info,
    log_trace,
    log_warn,
)
from exception_dispatch.media_type import MediaType
from exception_dispatch.ordering import CandidateComparator, hierarchy_distance
from exception_dispatch.registry import (
    DispatchTable,
    DispatchTableBuilder,
    ExceptionHandlerDeclaration,
    HandlerDescriptor,
    MappingKey,
    discover_handlers,
    exception_handler,
)
from exception_dispatch.resolver import ExceptionHandlerResolver
from exception_dispatch.types import DEFAULT_CACHE_CAPACITY, LogContext, ResolverConfig

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Resolution
    "ExceptionHandlerResolver",
    "CandidateComparator",
    "hierarchy_distance",
    "ConcurrentLruCache",
    # Registry
    "HandlerDescriptor",
    "MappingKey",
    "DispatchTable",
    "DispatchTableBuilder",
    "ExceptionHandlerDeclaration",
    "exception_handler",
    "discover_handlers",
    # Media types
    "MediaType",
    # Configuration
    "ResolverConfig",
    "DEFAULT_CACHE_CAPACITY",
    # Errors
    "ExceptionDispatchError",
    "ConfigurationError",
    "NoExceptionTypesError",
    "InvalidMediaTypeError",
    "AmbiguousMappingError",
    # Logging
    "LogContext",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]


def version() -> str:
    """Return the package version.

    Example:
        >>> import exception_dispatch
        >>> exception_dispatch.version()
        '0.1.0'
    """
    return __version__
