"""Dispatch table key: an exception class paired with a media type."""

from __future__ import annotations

from dataclasses import dataclass

from ..media_type import MediaType


@dataclass(frozen=True)
class MappingKey:
    """Immutable ``(exception_type, media_type)`` pair.

    Equality is class identity for the exception type and value equality
    for the media type.
    """

    exception_type: type[BaseException]
    media_type: MediaType

    def __str__(self) -> str:
        return f"{_type_name(self.exception_type)} @ {self.media_type}"


def _type_name(cls: type) -> str:
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"
