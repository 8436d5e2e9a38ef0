"""Error classes for exception-dispatch.

All construction-time failures derive from ConfigurationError. They signal a
defect in the code declaring the handlers, never a transient condition, so
callers should not retry them.

Example:
    >>> from exception_dispatch import ConfigurationError, ExceptionHandlerResolver
    >>>
    >>> try:
    ...     resolver = ExceptionHandlerResolver.for_container(MyAdvice)
    ... except ConfigurationError as e:
    ...     print(e.to_dict())
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .registry.handler_descriptor import HandlerDescriptor
    from .registry.mapping_key import MappingKey


class ExceptionDispatchError(Exception):
    """Base class for all exception-dispatch errors.

    Attributes:
        message: Human-readable error message
        metadata: Additional error context
    """

    def __init__(self, message: str, *, metadata: dict[str, Any] | None = None) -> None:
        """Initialize the error.

        Args:
            message: Error message
            metadata: Additional context
        """
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for structured logging.

        Returns:
            Dictionary with error details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "metadata": self.metadata,
        }


class ConfigurationError(ExceptionDispatchError):
    """Invalid or ambiguous handler declarations.

    Raised while building the dispatch table. The resolver is never
    constructed in a partially valid state.
    """

    pass


class NoExceptionTypesError(ConfigurationError):
    """A handler function covers no exception type.

    Neither an explicit exception list nor an exception-typed parameter
    was found.

    Example:
        >>> raise NoExceptionTypesError("Advice.handle")
    """

    def __init__(self, function: str, *, reason: str | None = None) -> None:
        message = f"No exception types mapped to {function}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, metadata={"function": function})
        self.function = function


class InvalidMediaTypeError(ConfigurationError):
    """A media type string could not be parsed.

    Raised by MediaType.parse without a function, and re-raised by the
    builder naming the handler that declared it.

    Example:
        >>> raise InvalidMediaTypeError("json", reason="does not contain '/'")
    """

    def __init__(
        self,
        media_type: str,
        *,
        reason: str | None = None,
        function: str | None = None,
    ) -> None:
        message = f"Invalid media type [{media_type}]"
        if reason:
            message = f"{message}: {reason}"
        if function:
            message = f"{message} declared on exception handler {function}"
        super().__init__(
            message,
            metadata={"media_type": media_type, "reason": reason, "function": function},
        )
        self.media_type = media_type
        self.reason = reason
        self.function = function


class AmbiguousMappingError(ConfigurationError):
    """Two different handler functions claim the same mapping key."""

    def __init__(
        self,
        key: MappingKey,
        existing: HandlerDescriptor,
        candidate: HandlerDescriptor,
    ) -> None:
        message = (
            f"Ambiguous exception handler mapped for [{key}]: "
            f"{{{existing.name}, {candidate.name}}}"
        )
        super().__init__(
            message,
            metadata={
                "key": str(key),
                "existing": existing.name,
                "candidate": candidate.name,
            },
        )
        self.key = key
        self.existing = existing
        self.candidate = candidate


__all__ = [
    "ExceptionDispatchError",
    "ConfigurationError",
    "NoExceptionTypesError",
    "InvalidMediaTypeError",
    "AmbiguousMappingError",
]
