"""pytest configuration and fixtures for exception_dispatch tests.

This module provides shared fixtures for testing the resolver, including
ready-built resolvers for the example containers in tests.handlers.advice
and commonly used media types.
"""

from __future__ import annotations

import pytest

from exception_dispatch import ExceptionHandlerResolver, MediaType, ResolverConfig
from tests.handlers.advice import HierarchyAdvice, IoAdvice, MediaAdvice


@pytest.fixture
def io_resolver() -> ExceptionHandlerResolver:
    """Resolver for OSError (any media type) and FileNotFoundError (JSON)."""
    return ExceptionHandlerResolver.for_container(IoAdvice)


@pytest.fixture
def hierarchy_resolver() -> ExceptionHandlerResolver:
    """Resolver with one handler per level of the payment hierarchy."""
    return ExceptionHandlerResolver.for_container(HierarchyAdvice)


@pytest.fixture
def media_resolver() -> ExceptionHandlerResolver:
    """Resolver with the same exception registered under several media types."""
    return ExceptionHandlerResolver.for_container(MediaAdvice)


@pytest.fixture
def small_cache_config() -> ResolverConfig:
    """Config with a cache small enough to force evictions."""
    return ResolverConfig(cache_capacity=2)


@pytest.fixture
def json_media_type() -> MediaType:
    return MediaType.APPLICATION_JSON


@pytest.fixture
def text_media_type() -> MediaType:
    return MediaType.TEXT_PLAIN
