"""ResolverConfig tests."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from exception_dispatch import DEFAULT_CACHE_CAPACITY, MediaType, ResolverConfig


class TestDefaults:
    """Test default values."""

    def test_defaults(self):
        """Capacity 24, */* default media type, causes only."""
        config = ResolverConfig()

        assert config.cache_capacity == DEFAULT_CACHE_CAPACITY == 24
        assert config.default_media_type == "*/*"
        assert config.parsed_default_media_type() == MediaType.ALL
        assert config.follow_context is False


class TestValidation:
    """Test field validation."""

    @pytest.mark.parametrize("capacity", [0, -5])
    def test_capacity_must_be_positive(self, capacity):
        """Non-positive capacities fail validation."""
        with pytest.raises(ValidationError):
            ResolverConfig(cache_capacity=capacity)

    def test_invalid_default_media_type(self):
        """A malformed default media type fails validation."""
        with pytest.raises(ValidationError, match="Invalid media type"):
            ResolverConfig(default_media_type="json")

    def test_unknown_fields_rejected(self):
        """Typos in settings are reported."""
        with pytest.raises(ValidationError):
            ResolverConfig(cache_size=10)

    def test_frozen(self):
        """Configs cannot be changed after creation."""
        config = ResolverConfig()

        with pytest.raises(ValidationError):
            config.cache_capacity = 10


class TestLoading:
    """Test from_dict() and from_yaml()."""

    def test_from_dict(self):
        """Bare settings are accepted."""
        config = ResolverConfig.from_dict({"cache_capacity": 8, "follow_context": True})

        assert config.cache_capacity == 8
        assert config.follow_context is True

    def test_from_dict_section(self):
        """Settings nested under exception_dispatch are accepted."""
        config = ResolverConfig.from_dict(
            {"exception_dispatch": {"default_media_type": "application/json"}}
        )

        assert config.parsed_default_media_type() == MediaType.APPLICATION_JSON

    def test_from_dict_none(self):
        """None yields the defaults."""
        assert ResolverConfig.from_dict(None) == ResolverConfig()

    def test_from_yaml(self, tmp_path):
        """YAML files are loaded through the same section rules."""
        path = tmp_path / "dispatch.yaml"
        path.write_text(
            "exception_dispatch:\n  cache_capacity: 48\n  default_media_type: text/html\n",
            encoding="utf-8",
        )

        config = ResolverConfig.from_yaml(path)

        assert config.cache_capacity == 48
        assert config.default_media_type == "text/html"

    def test_from_empty_yaml(self, tmp_path):
        """An empty file yields the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert ResolverConfig.from_yaml(path) == ResolverConfig()

    def test_from_yaml_requires_mapping(self, tmp_path):
        """A YAML list is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Expected a mapping"):
            ResolverConfig.from_yaml(path)
