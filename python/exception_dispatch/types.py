"""Pydantic models for exception-dispatch.

This module provides the validated configuration and logging context models,
using Pydantic v2 for validation and serialization.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from .exceptions import InvalidMediaTypeError
from .media_type import MediaType

DEFAULT_CACHE_CAPACITY = 24
"""Number of (exception type, media type) lookups kept by the resolver cache."""

CONFIG_SECTION = "exception_dispatch"


class ResolverConfig(BaseModel):
    """Configuration for an ExceptionHandlerResolver.

    Example:
        >>> config = ResolverConfig(cache_capacity=64)
        >>> resolver = ExceptionHandlerResolver.for_container(MyAdvice, config)
    """

    model_config = {"extra": "forbid", "frozen": True}

    cache_capacity: int = Field(
        default=DEFAULT_CACHE_CAPACITY,
        gt=0,
        description="Maximum number of cached lookups before LRU eviction.",
    )
    default_media_type: str = Field(
        default=str(MediaType.ALL),
        description="Media type used when a resolution call passes none.",
    )
    follow_context: bool = Field(
        default=False,
        description=(
            "Also walk implicit __context__ links when an exception has no "
            "explicit __cause__ and its context is not suppressed."
        ),
    )

    @field_validator("default_media_type")
    @classmethod
    def _check_media_type(cls, value: str) -> str:
        try:
            MediaType.parse(value)
        except InvalidMediaTypeError as e:
            raise ValueError(e.message) from e
        return value

    def parsed_default_media_type(self) -> MediaType:
        """Return default_media_type as a MediaType."""
        return MediaType.parse(self.default_media_type)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ResolverConfig:
        """Create a config from a plain dictionary.

        Accepts either the bare settings or a dictionary with an
        ``exception_dispatch`` section.

        Args:
            data: Configuration dictionary.

        Returns:
            ResolverConfig instance.

        Example:
            >>> ResolverConfig.from_dict({"cache_capacity": 8}).cache_capacity
            8
        """
        if data is None:
            data = {}
        section = data.get(CONFIG_SECTION, data)
        return cls.model_validate(section or {})

    @classmethod
    def from_yaml(cls, path: str | Path) -> ResolverConfig:
        """Load a config from a YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            ResolverConfig instance.
        """
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is not None and not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {path}, got {type(data).__name__}")
        return cls.from_dict(data)


class LogContext(BaseModel):
    """Context fields for structured logging.

    Example:
        >>> context = LogContext(
        ...     container="GlobalAdvice",
        ...     exception_type="FileNotFoundError",
        ...     media_type="application/json",
        ... )
        >>> log_debug("Resolved handler", context)
    """

    container: str | None = Field(
        default=None,
        description="Name of the class declaring the handlers.",
    )
    function: str | None = Field(
        default=None,
        description="Qualified name of the handler function.",
    )
    exception_type: str | None = Field(
        default=None,
        description="Exception class being resolved.",
    )
    media_type: str | None = Field(
        default=None,
        description="Requested media type.",
    )
    operation: str | None = Field(
        default=None,
        description="Current operation name.",
    )


__all__ = [
    "DEFAULT_CACHE_CAPACITY",
    "ResolverConfig",
    "LogContext",
]
