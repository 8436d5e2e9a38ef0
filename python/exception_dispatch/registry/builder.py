"""Dispatch table builder.

Expands handler descriptors into an immutable mapping from
``(exception type, media type)`` keys to exactly one handler, failing fast on
declarations that are incomplete or ambiguous.

Build Contract:
1. Exception coverage comes from the explicit list, or else from every
   parameter type that is an exception class. Empty coverage is an error.
2. Media type strings are parsed; none declared means ``*/*``.
3. Every exception type × media type pair becomes one key.
4. A key claimed by two different functions is an error. The same function
   claiming a key twice is not.

Usage:
    builder = DispatchTableBuilder()
    builder.add(descriptor)
    table = builder.build()

    # Or in one go
    table = DispatchTableBuilder.from_descriptors(descriptors)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import GenericAlias, MappingProxyType
from typing import Any

from ..exceptions import (
    AmbiguousMappingError,
    ConfigurationError,
    InvalidMediaTypeError,
    NoExceptionTypesError,
)
from ..logging import log_debug, log_error, log_info
from ..media_type import MediaType
from .handler_descriptor import HandlerDescriptor
from .mapping_key import MappingKey


class DispatchTable(Mapping[MappingKey, HandlerDescriptor]):
    """Read-only mapping from MappingKey to HandlerDescriptor.

    Iteration follows insertion order: handlers in the order they were
    supplied, then exception types, then media types.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: dict[MappingKey, HandlerDescriptor]) -> None:
        self._entries: Mapping[MappingKey, HandlerDescriptor] = MappingProxyType(dict(entries))

    def __getitem__(self, key: MappingKey) -> HandlerDescriptor:
        return self._entries[key]

    def __iter__(self) -> Iterator[MappingKey]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def handlers(self) -> list[HandlerDescriptor]:
        """Distinct handler descriptors, in table order."""
        result: list[HandlerDescriptor] = []
        for descriptor in self._entries.values():
            if not any(descriptor.same_function(d) for d in result):
                result.append(descriptor)
        return result

    def __repr__(self) -> str:
        return f"DispatchTable({len(self)} mappings)"


EMPTY_TABLE = DispatchTable({})


class DispatchTableBuilder:
    """Accumulates handler descriptors and freezes them into a DispatchTable.

    A builder is single-use in spirit: build() may be called again after
    further add() calls, but every call validates all descriptors from
    scratch and returns a new table.
    """

    def __init__(self) -> None:
        self._descriptors: list[HandlerDescriptor] = []

    @classmethod
    def from_descriptors(cls, descriptors: Iterable[HandlerDescriptor]) -> DispatchTable:
        """Build a table from descriptors in one call.

        Raises:
            ConfigurationError: If any declaration is invalid or ambiguous.
        """
        return cls().add_all(descriptors).build()

    def add(self, descriptor: HandlerDescriptor) -> DispatchTableBuilder:
        """Queue a descriptor for the next build.

        Returns:
            Self for method chaining.
        """
        self._descriptors.append(descriptor)
        return self

    def add_all(self, descriptors: Iterable[HandlerDescriptor]) -> DispatchTableBuilder:
        for descriptor in descriptors:
            self.add(descriptor)
        return self

    def build(self) -> DispatchTable:
        """Validate every queued descriptor and produce the table.

        Returns:
            The immutable dispatch table.

        Raises:
            NoExceptionTypesError: A handler covers no exception type.
            InvalidMediaTypeError: A declared media type does not parse.
            AmbiguousMappingError: Two handlers claim the same key.
        """
        entries: dict[MappingKey, HandlerDescriptor] = {}
        try:
            for descriptor in self._descriptors:
                for key in self.mapping_keys(descriptor):
                    self._add_mapping(entries, key, descriptor)
        except ConfigurationError as e:
            log_error(f"Invalid exception handler declarations: {e.message}", e.metadata)
            raise

        table = DispatchTable(entries)
        log_info(
            "Dispatch table built",
            {"handlers": len(self._descriptors), "mappings": len(table)},
        )
        return table

    def mapping_keys(self, descriptor: HandlerDescriptor) -> list[MappingKey]:
        """Expand one descriptor into its mapping keys.

        Raises:
            NoExceptionTypesError: If no exception type can be derived.
            InvalidMediaTypeError: If a media type string does not parse.
        """
        exception_types = self.exception_types(descriptor)
        media_types = self.media_types(descriptor)
        return [
            MappingKey(exception_type, media_type)
            for exception_type in exception_types
            for media_type in media_types
        ]

    @staticmethod
    def exception_types(descriptor: HandlerDescriptor) -> list[type[BaseException]]:
        """Derive the exception classes a handler covers.

        Explicit declarations win; otherwise every exception-typed parameter
        counts.
        """
        if descriptor.declares_exceptions():
            invalid = [e for e in descriptor.exceptions if not _is_exception_class(e)]
            if invalid:
                raise NoExceptionTypesError(
                    descriptor.name,
                    reason=f"not exception classes: {', '.join(map(repr, invalid))}",
                )
            candidates: Iterable[Any] = descriptor.exceptions
        else:
            candidates = (t for t in descriptor.parameter_types if _is_exception_class(t))

        result: list[type[BaseException]] = []
        for exception_type in candidates:
            if exception_type not in result:
                result.append(exception_type)

        if not result:
            raise NoExceptionTypesError(descriptor.name)
        return result

    @staticmethod
    def media_types(descriptor: HandlerDescriptor) -> list[MediaType]:
        """Parse the media types a handler covers, defaulting to ``*/*``."""
        if not descriptor.declares_media_types():
            return [MediaType.ALL]

        result: list[MediaType] = []
        for text in descriptor.media_types:
            try:
                media_type = MediaType.parse(text)
            except InvalidMediaTypeError as e:
                raise InvalidMediaTypeError(
                    text, reason=e.reason, function=descriptor.name
                ) from e
            if media_type not in result:
                result.append(media_type)
        return result

    @staticmethod
    def _add_mapping(
        entries: dict[MappingKey, HandlerDescriptor],
        key: MappingKey,
        descriptor: HandlerDescriptor,
    ) -> None:
        existing = entries.get(key)
        if existing is not None:
            if existing.same_function(descriptor):
                return
            raise AmbiguousMappingError(key, existing, descriptor)

        entries[key] = descriptor
        log_debug("Mapped exception handler", {"key": key, "function": descriptor.name})


def _is_exception_class(obj: Any) -> bool:
    # list[str] passes isinstance(..., type) on Python 3.10
    if not isinstance(obj, type) or isinstance(obj, GenericAlias):
        return False
    return issubclass(obj, BaseException)
