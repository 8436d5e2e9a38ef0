"""MediaType tests.

These tests verify:
- Parsing of valid and invalid media type strings
- Equality and hashing
- Compatibility including wildcards and structured suffixes
- Specificity ordering
"""

from __future__ import annotations

import pytest

from exception_dispatch import InvalidMediaTypeError, MediaType


class TestParse:
    """Test MediaType.parse()."""

    def test_basic(self):
        """Type and subtype are split and lower-cased."""
        media_type = MediaType.parse("Application/JSON")

        assert media_type.type == "application"
        assert media_type.subtype == "json"
        assert media_type.parameters == {}

    def test_lone_wildcard_means_all(self):
        """A bare '*' is read as '*/*'."""
        assert MediaType.parse("*") == MediaType.ALL

    def test_parameters(self):
        """Parameters are parsed, names lower-cased, quotes removed."""
        media_type = MediaType.parse('text/plain; Charset=UTF-8; format="flowed text"')

        assert media_type.parameters == {"charset": "utf-8", "format": "flowed text"}

    def test_quoted_semicolon_is_not_a_separator(self):
        """A ';' inside a quoted value stays part of the value."""
        media_type = MediaType.parse('text/plain;title="a;b"')

        assert media_type.parameters == {"title": "a;b"}

    def test_quality(self):
        """The q parameter is exposed as quality."""
        assert MediaType.parse("text/html;q=0.5").quality == 0.5
        assert MediaType.parse("text/html").quality == 1.0

    def test_trailing_semicolon_is_ignored(self):
        """An empty parameter segment is skipped."""
        assert MediaType.parse("application/json;") == MediaType.APPLICATION_JSON

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   ",
            "json",
            "application/",
            "*/json",
            "application/js on",
            "text/plain;charset",
            "text/plain;charset=no-such-charset",
            "text/html;q=2",
            "text/html;q=high",
            "text/plain;na me=value",
        ],
    )
    def test_invalid(self, text):
        """Malformed media types raise InvalidMediaTypeError."""
        with pytest.raises(InvalidMediaTypeError) as exc_info:
            MediaType.parse(text)

        assert exc_info.value.function is None

    def test_invalid_names_the_text(self):
        """The error message includes the offending text."""
        with pytest.raises(InvalidMediaTypeError, match=r"\[json\]"):
            MediaType.parse("json")

    def test_parse_list(self):
        """Comma-separated values are parsed in order."""
        media_types = MediaType.parse_list("application/json, text/*;q=0.8,")

        assert media_types == [MediaType.APPLICATION_JSON, MediaType.parse("text/*;q=0.8")]


class TestValueSemantics:
    """Test equality, hashing and rendering."""

    def test_equality_ignores_case_and_parameter_order(self):
        """Equal media types compare and hash equal."""
        first = MediaType.parse("text/plain;charset=utf-8;format=fixed")
        second = MediaType.parse("TEXT/Plain;format=fixed;charset=UTF-8")

        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_parameters_matter(self):
        """Different parameters mean different media types."""
        assert MediaType.parse("text/plain;charset=utf-8") != MediaType.TEXT_PLAIN

    def test_str(self):
        """str() renders type/subtype and parameters."""
        assert str(MediaType.parse("text/plain;charset=UTF-8")) == "text/plain;charset=utf-8"
        assert str(MediaType.ALL) == "*/*"

    def test_str_quotes_non_token_values(self):
        """Values that are not tokens are rendered quoted."""
        media_type = MediaType.parse('text/plain;format="flowed text"')

        assert str(media_type) == 'text/plain;format="flowed text"'
        assert MediaType.parse(str(media_type)) == media_type

    def test_immutable(self):
        """Attributes cannot be reassigned."""
        with pytest.raises(AttributeError):
            MediaType.TEXT_PLAIN._type = "image"  # type: ignore[misc]

    def test_with_parameters(self):
        """with_parameters() returns a new value, leaving the original alone."""
        media_type = MediaType.TEXT_PLAIN.with_parameters(charset="UTF-8")

        assert media_type.parameters == {"charset": "utf-8"}
        assert MediaType.TEXT_PLAIN.parameters == {}
        assert media_type.without_parameters() == MediaType.TEXT_PLAIN


class TestCompatibility:
    """Test is_compatible_with() and includes()."""

    @pytest.mark.parametrize(
        ("first", "second"),
        [
            ("*/*", "application/json"),
            ("application/json", "*/*"),
            ("text/*", "text/plain"),
            ("text/plain", "text/*"),
            ("application/json", "application/json;charset=utf-8"),
            ("application/*+json", "application/problem+json"),
            ("application/*+json", "application/json"),
            ("application/json", "application/*+json"),
        ],
    )
    def test_compatible(self, first, second):
        """Wildcards and suffixes make media types compatible."""
        assert MediaType.parse(first).is_compatible_with(MediaType.parse(second))

    @pytest.mark.parametrize(
        ("first", "second"),
        [
            ("application/json", "text/plain"),
            ("text/*", "application/json"),
            ("application/json", "application/xml"),
            ("application/*+xml", "application/problem+json"),
        ],
    )
    def test_incompatible(self, first, second):
        """Different concrete types are not compatible."""
        assert not MediaType.parse(first).is_compatible_with(MediaType.parse(second))

    def test_none_is_incompatible(self):
        """None is never compatible."""
        assert MediaType.ALL.is_compatible_with(None) is False

    def test_includes_is_asymmetric(self):
        """text/* includes text/plain but not the other way around."""
        wildcard = MediaType.parse("text/*")

        assert wildcard.includes(MediaType.TEXT_PLAIN)
        assert not MediaType.TEXT_PLAIN.includes(wildcard)
        assert MediaType.ALL.includes(wildcard)


class TestSpecificity:
    """Test is_more_specific()."""

    def test_concrete_beats_wildcard_type(self):
        """A concrete media type is more specific than */*."""
        assert MediaType.APPLICATION_JSON.is_more_specific(MediaType.ALL)
        assert not MediaType.ALL.is_more_specific(MediaType.APPLICATION_JSON)

    def test_concrete_subtype_beats_wildcard_subtype(self):
        """text/plain is more specific than text/*."""
        wildcard = MediaType.parse("text/*")

        assert MediaType.TEXT_PLAIN.is_more_specific(wildcard)
        assert wildcard.is_less_specific(MediaType.TEXT_PLAIN)

    def test_more_parameters_is_more_specific(self):
        """For the same type and subtype, more parameters win."""
        with_charset = MediaType.parse("text/plain;charset=utf-8")

        assert with_charset.is_more_specific(MediaType.TEXT_PLAIN)
        assert not MediaType.TEXT_PLAIN.is_more_specific(with_charset)

    def test_quality_first(self):
        """Higher quality wins over concreteness."""
        low = MediaType.parse("text/plain;q=0.3")

        assert MediaType.ALL.is_more_specific(low)

    def test_unrelated_concrete_types_are_not_ordered(self):
        """Neither of two different concrete types is more specific."""
        assert not MediaType.APPLICATION_JSON.is_more_specific(MediaType.TEXT_PLAIN)
        assert not MediaType.TEXT_PLAIN.is_more_specific(MediaType.APPLICATION_JSON)
