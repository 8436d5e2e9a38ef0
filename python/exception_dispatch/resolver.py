"""Exception handler resolution.

The ExceptionHandlerResolver answers "which handler function should process
this exception for this media type?" for one container of handlers.

Resolution Contract:
1. Candidates are table keys whose exception class is the raised class or
   one of its ancestors, and whose media type is compatible with the
   requested one.
2. The closest class wins; equal classes are decided by media type
   specificity.
3. For a live exception, a miss on its class continues with its cause
   (``raise ... from ...``), then the cause's cause, and so on.
4. No match is None, never an exception.

Every single-class lookup is memoized in a bounded LRU cache, including
lookups that found nothing.

Usage:
    resolver = ExceptionHandlerResolver.for_container(GlobalAdvice)

    handler = resolver.resolve_by_exception(error, MediaType.APPLICATION_JSON)
    if handler is not None:
        handler.function(error)
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .cache import ConcurrentLruCache
from .logging import log_debug, log_info, log_trace
from .media_type import MediaType
from .ordering import CandidateComparator
from .registry.builder import DispatchTable, DispatchTableBuilder
from .registry.discovery import discover_handlers
from .registry.handler_descriptor import HandlerDescriptor
from .registry.mapping_key import MappingKey
from .types import ResolverConfig


class ExceptionHandlerResolver:
    """Resolves exceptions to handler functions of one container.

    The dispatch table is built and validated once in the constructor and
    never changes afterwards. All public methods are safe to call from
    multiple threads without external locking.

    Attributes:
        name: Display name used in logs (the container name if known).
        config: The resolver configuration.
    """

    def __init__(
        self,
        descriptors: Iterable[HandlerDescriptor] = (),
        config: ResolverConfig | None = None,
        *,
        name: str | None = None,
    ) -> None:
        """Build and validate the dispatch table.

        Args:
            descriptors: Handler descriptors to register.
            config: Resolver configuration, defaults to ResolverConfig().
            name: Display name used in logs.

        Raises:
            ConfigurationError: If the declarations are invalid or ambiguous.
        """
        self._config = config or ResolverConfig()
        self._name = name or "anonymous"
        self._table = DispatchTableBuilder.from_descriptors(descriptors)
        self._default_media_type = self._config.parsed_default_media_type()
        self._cache: ConcurrentLruCache[MappingKey, HandlerDescriptor | None] = (
            ConcurrentLruCache(self._config.cache_capacity, self._find_best_match)
        )
        log_info(
            "Exception handler resolver ready",
            {
                "container": self._name,
                "mappings": len(self._table),
                "cache_capacity": self._config.cache_capacity,
            },
        )

    @classmethod
    def for_container(
        cls,
        container: Any,
        config: ResolverConfig | None = None,
    ) -> ExceptionHandlerResolver:
        """Create a resolver for the handlers declared on a class.

        Handlers inherited from base classes are included; overridden ones
        are registered once.

        Args:
            container: Class (or instance) declaring @exception_handler functions.
            config: Resolver configuration.

        Returns:
            The resolver.

        Raises:
            ConfigurationError: If the declarations are invalid or ambiguous.
        """
        container_type = container if isinstance(container, type) else type(container)
        return cls(discover_handlers(container), config, name=container_type.__qualname__)

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> ResolverConfig:
        return self._config

    @property
    def mappings(self) -> DispatchTable:
        """Read-only view of the dispatch table."""
        return self._table

    def has_mappings(self) -> bool:
        """Whether the container declares any exception mappings."""
        return len(self._table) > 0

    def handled_exception_types(self) -> list[type[BaseException]]:
        """Distinct registered exception classes, in table order.

        Used for debugging and introspection.
        """
        result: list[type[BaseException]] = []
        for key in self._table:
            if key.exception_type not in result:
                result.append(key.exception_type)
        return result

    def resolve_by_type(
        self,
        exception_type: type[BaseException],
        media_type: MediaType | str | None = None,
    ) -> HandlerDescriptor | None:
        """Find the handler for an exception class, without a cause chain.

        Useful when no exception instance is available, e.g. for tooling.

        Args:
            exception_type: The exception class.
            media_type: Requested media type; the configured default when None.

        Returns:
            The best matching handler, or None.

        Raises:
            TypeError: If exception_type is not an exception class.
            InvalidMediaTypeError: If media_type is a string that does not parse.
        """
        if not (isinstance(exception_type, type) and issubclass(exception_type, BaseException)):
            raise TypeError(f"Expected an exception class, got {exception_type!r}")
        return self._cache.get(MappingKey(exception_type, self._media_type(media_type)))

    def resolve_by_exception(
        self,
        exception: BaseException,
        media_type: MediaType | str | None = None,
    ) -> HandlerDescriptor | None:
        """Find the handler for a raised exception, walking its cause chain.

        Args:
            exception: The exception instance.
            media_type: Requested media type; the configured default when None.

        Returns:
            The handler for the first exception in the chain that has one,
            or None.

        Raises:
            TypeError: If exception is not an exception instance.
            InvalidMediaTypeError: If media_type is a string that does not parse.
        """
        if not isinstance(exception, BaseException):
            raise TypeError(f"Expected an exception instance, got {exception!r}")

        requested = self._media_type(media_type)
        current: BaseException | None = exception
        visited: set[int] = set()

        while current is not None and id(current) not in visited:
            visited.add(id(current))
            handler = self._cache.get(MappingKey(type(current), requested))
            if handler is not None:
                return handler

            current = self._next_in_chain(current)
            if current is not None:
                log_trace(
                    "No handler at this level, trying cause",
                    {"container": self._name, "exception_type": type(current).__qualname__},
                )

        log_debug(
            "No exception handler found",
            {
                "container": self._name,
                "exception_type": type(exception).__qualname__,
                "media_type": requested,
            },
        )
        return None

    def cache_info(self) -> dict[str, int]:
        """Cache capacity, size and hit/miss counters."""
        return self._cache.info()

    def _media_type(self, media_type: MediaType | str | None) -> MediaType:
        if media_type is None:
            return self._default_media_type
        if isinstance(media_type, MediaType):
            return media_type
        return MediaType.parse(media_type)

    def _next_in_chain(self, exception: BaseException) -> BaseException | None:
        if exception.__cause__ is not None:
            return exception.__cause__
        if self._config.follow_context and not exception.__suppress_context__:
            return exception.__context__
        return None

    def _find_best_match(self, key: MappingKey) -> HandlerDescriptor | None:
        """Scan the table for the best handler of one class and media type.

        Cache loader; runs only on a cache miss.
        """
        candidates = [
            mapped
            for mapped in self._table
            if issubclass(key.exception_type, mapped.exception_type)
            and mapped.media_type.is_compatible_with(key.media_type)
        ]
        log_trace(
            "Computed exception handler candidates",
            {
                "container": self._name,
                "exception_type": key.exception_type.__qualname__,
                "media_type": key.media_type,
                "candidates": len(candidates),
            },
        )
        if not candidates:
            return None
        if len(candidates) > 1:
            candidates = CandidateComparator(key.exception_type).sort(candidates)
        return self._table[candidates[0]]

    def __repr__(self) -> str:
        return f"ExceptionHandlerResolver({self._name!r}, mappings={len(self._table)})"
