"""Media type value type used as the second half of every mapping key.

A MediaType is an immutable, hashable ``type/subtype;param=value`` value with
the two comparisons the resolver needs:

- is_compatible_with(): symmetric, wildcard and structured-suffix aware
- is_more_specific(): partial order used to break ties between candidates

Example:
    >>> json = MediaType.parse("application/json")
    >>> MediaType.ALL.is_compatible_with(json)
    True
    >>> json.is_more_specific(MediaType.ALL)
    True
    >>> MediaType.parse("application/*+json").is_compatible_with(
    ...     MediaType.parse("application/problem+json"))
    True
"""

from __future__ import annotations

import codecs
import string
from collections.abc import Mapping
from typing import ClassVar

from .exceptions import InvalidMediaTypeError

WILDCARD = "*"

# RFC 7230 token characters
TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")

PARAM_CHARSET = "charset"
PARAM_QUALITY = "q"


def _is_token(value: str) -> bool:
    return bool(value) and all(c in TOKEN_CHARS for c in value)


def _is_quoted(value: str) -> bool:
    return len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'"


def _quote(value: str) -> str:
    if _is_token(value):
        return value
    return '"' + value.replace('"', '\\"') + '"'


def _split_parameters(text: str) -> list[str]:
    """Split on ';' outside of quoted strings."""
    parts: list[str] = []
    current: list[str] = []
    quoted = False
    escaped = False
    for char in text:
        if escaped:
            escaped = False
        elif char == "\\" and quoted:
            escaped = True
        elif char == '"':
            quoted = not quoted
        elif char == ";" and not quoted:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


class MediaType:
    """An immutable media type such as ``application/json;charset=utf-8``.

    Type, subtype and parameter names are case-insensitive and stored in
    lower case. Two media types are equal when type, subtype and the set of
    parameters are equal.
    """

    __slots__ = ("_type", "_subtype", "_parameters", "_hash")

    ALL: ClassVar[MediaType]
    APPLICATION_JSON: ClassVar[MediaType]
    APPLICATION_PROBLEM_JSON: ClassVar[MediaType]
    APPLICATION_XML: ClassVar[MediaType]
    TEXT_PLAIN: ClassVar[MediaType]
    TEXT_HTML: ClassVar[MediaType]

    def __init__(
        self,
        type: str,
        subtype: str = WILDCARD,
        parameters: Mapping[str, str] | None = None,
    ) -> None:
        """Create a media type, validating every component.

        Raises:
            InvalidMediaTypeError: If a component is not a valid token,
                the charset is unknown or the quality is out of range.
        """
        text = f"{type}/{subtype}"
        type_ = type.strip().lower()
        subtype = subtype.strip().lower()
        if not _is_token(type_):
            raise InvalidMediaTypeError(text, reason=f"invalid token character in type '{type}'")
        if not _is_token(subtype):
            raise InvalidMediaTypeError(
                text, reason=f"invalid token character in subtype '{subtype}'"
            )
        if type_ == WILDCARD and subtype != WILDCARD:
            raise InvalidMediaTypeError(
                text, reason="wildcard type is legal only in '*/*' (all media types)"
            )

        params: dict[str, str] = {}
        for name, value in (parameters or {}).items():
            key = name.strip().lower()
            if not _is_token(key):
                raise InvalidMediaTypeError(text, reason=f"invalid parameter name '{name}'")
            params[key] = self._check_parameter(text, key, value.strip())

        object.__setattr__(self, "_type", type_)
        object.__setattr__(self, "_subtype", subtype)
        object.__setattr__(self, "_parameters", params)
        object.__setattr__(
            self, "_hash", hash((type_, subtype, frozenset(params.items())))
        )

    @staticmethod
    def _check_parameter(text: str, name: str, value: str) -> str:
        if _is_quoted(value):
            value = value[1:-1].replace('\\"', '"')
        elif not _is_token(value):
            raise InvalidMediaTypeError(
                text, reason=f"invalid value '{value}' for parameter '{name}'"
            )

        if name == PARAM_CHARSET:
            try:
                codecs.lookup(value)
            except LookupError as e:
                raise InvalidMediaTypeError(text, reason=f"unsupported charset '{value}'") from e
            return value.lower()

        if name == PARAM_QUALITY:
            try:
                quality = float(value)
            except ValueError as e:
                raise InvalidMediaTypeError(text, reason=f"invalid quality value '{value}'") from e
            if not 0.0 <= quality <= 1.0:
                raise InvalidMediaTypeError(
                    text, reason=f"quality value must be between 0.0 and 1.0, got '{value}'"
                )
        return value

    @classmethod
    def parse(cls, text: str) -> MediaType:
        """Parse a media type string.

        Args:
            text: Text such as ``application/json`` or ``text/*;q=0.5``.
                A lone ``*`` is read as ``*/*``.

        Returns:
            The parsed MediaType.

        Raises:
            InvalidMediaTypeError: If the text is not a valid media type.
        """
        if not isinstance(text, str) or not text.strip():
            raise InvalidMediaTypeError(str(text), reason="media type must not be empty")

        parts = _split_parameters(text)
        full_type = parts[0].strip()
        if full_type == WILDCARD:
            full_type = f"{WILDCARD}/{WILDCARD}"

        slash = full_type.find("/")
        if slash == -1:
            raise InvalidMediaTypeError(text, reason="does not contain '/'")
        if slash == len(full_type) - 1:
            raise InvalidMediaTypeError(text, reason="does not contain subtype after '/'")
        type_, subtype = full_type[:slash], full_type[slash + 1 :]

        parameters: dict[str, str] = {}
        for part in parts[1:]:
            part = part.strip()
            if not part:
                continue
            name, sep, value = part.partition("=")
            if not sep:
                raise InvalidMediaTypeError(text, reason=f"parameter '{part}' has no value")
            parameters[name] = value

        try:
            return cls(type_, subtype, parameters)
        except InvalidMediaTypeError as e:
            raise InvalidMediaTypeError(text, reason=e.reason) from e

    @classmethod
    def parse_list(cls, texts: str) -> list[MediaType]:
        """Parse a comma-separated list such as an Accept header value."""
        return [cls.parse(t) for t in texts.split(",") if t.strip()]

    @property
    def type(self) -> str:
        return self._type

    @property
    def subtype(self) -> str:
        return self._subtype

    @property
    def parameters(self) -> dict[str, str]:
        """A copy of the parameters."""
        return dict(self._parameters)

    @property
    def subtype_suffix(self) -> str | None:
        """The structured syntax suffix, e.g. ``json`` for ``problem+json``."""
        plus = self._subtype.rfind("+")
        if plus != -1 and plus < len(self._subtype) - 1:
            return self._subtype[plus + 1 :]
        return None

    @property
    def quality(self) -> float:
        return float(self._parameters.get(PARAM_QUALITY, "1"))

    @property
    def is_wildcard_type(self) -> bool:
        return self._type == WILDCARD

    @property
    def is_wildcard_subtype(self) -> bool:
        """True for ``*`` and ``*+suffix`` subtypes."""
        return self._subtype == WILDCARD or self._subtype.startswith(f"{WILDCARD}+")

    def includes(self, other: MediaType) -> bool:
        """Whether this media type includes the other one.

        Unlike is_compatible_with this is not symmetric: ``text/*`` includes
        ``text/plain`` but not the other way around.
        """
        if self.is_wildcard_type:
            return True
        if self._type != other._type:
            return False
        if self._subtype == other._subtype:
            return True
        if self.is_wildcard_subtype:
            suffix = self.subtype_suffix
            if self._subtype == WILDCARD or suffix is None:
                return True
            return suffix == other._subtype or suffix == other.subtype_suffix
        return False

    def is_compatible_with(self, other: MediaType | None) -> bool:
        """Whether the two media types overlap.

        Symmetric: ``text/*`` is compatible with ``text/plain`` and vice
        versa. Parameters are ignored.
        """
        if other is None:
            return False
        if self.is_wildcard_type or other.is_wildcard_type:
            return True
        if self._type != other._type:
            return False
        if self._subtype == other._subtype:
            return True
        if self.is_wildcard_subtype or other.is_wildcard_subtype:
            this_suffix = self.subtype_suffix
            other_suffix = other.subtype_suffix
            if self._subtype == WILDCARD or other._subtype == WILDCARD:
                return True
            if self.is_wildcard_subtype and this_suffix is not None:
                return this_suffix == other._subtype or this_suffix == other_suffix
            if other.is_wildcard_subtype and other_suffix is not None:
                return self._subtype == other_suffix or other_suffix == this_suffix
        return False

    def is_more_specific(self, other: MediaType) -> bool:
        """Whether this media type is more specific than the other.

        Checked in order: higher quality, concrete type over wildcard type,
        concrete subtype over wildcard subtype, and for the same type and
        subtype more parameters. Anything else is not more specific.
        """
        if self.quality != other.quality:
            return self.quality > other.quality

        if self.is_wildcard_type != other.is_wildcard_type:
            return other.is_wildcard_type
        if self.is_wildcard_subtype != other.is_wildcard_subtype:
            return other.is_wildcard_subtype
        if self._type == other._type and self._subtype == other._subtype:
            return len(self._parameters) > len(other._parameters)
        return False

    def is_less_specific(self, other: MediaType) -> bool:
        return other.is_more_specific(self)

    def with_parameters(self, **parameters: str) -> MediaType:
        """Return a copy with the given parameters added or replaced."""
        merged = {**self._parameters, **parameters}
        return MediaType(
            self._type, self._subtype, {k: _quote(v) for k, v in merged.items()}
        )

    def without_parameters(self) -> MediaType:
        if not self._parameters:
            return self
        return MediaType(self._type, self._subtype)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MediaType):
            return NotImplemented
        return (
            self._type == other._type
            and self._subtype == other._subtype
            and self._parameters == other._parameters
        )

    def __hash__(self) -> int:
        return self._hash

    def __str__(self) -> str:
        text = f"{self._type}/{self._subtype}"
        for name, value in self._parameters.items():
            text += f";{name}={_quote(value)}"
        return text

    def __repr__(self) -> str:
        return f"MediaType({str(self)!r})"

    def __reduce__(self) -> tuple[object, ...]:
        return (MediaType.parse, (str(self),))


MediaType.ALL = MediaType(WILDCARD, WILDCARD)
MediaType.APPLICATION_JSON = MediaType("application", "json")
MediaType.APPLICATION_PROBLEM_JSON = MediaType("application", "problem+json")
MediaType.APPLICATION_XML = MediaType("application", "xml")
MediaType.TEXT_PLAIN = MediaType("text", "plain")
MediaType.TEXT_HTML = MediaType("text", "html")


__all__ = ["MediaType", "WILDCARD"]
