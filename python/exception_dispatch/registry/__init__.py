r"""Exception handler registry.

This package turns handler declarations into the immutable dispatch table
used by the resolver.

Pieces:
- exception_handler: decorator marking handler functions on a class
- discover_handlers: collects HandlerDescriptors from a class and its bases
- DispatchTableBuilder: validates descriptors and builds the DispatchTable

Usage:
    from exception_dispatch.registry import DispatchTableBuilder, discover_handlers

    table = DispatchTableBuilder.from_descriptors(discover_handlers(GlobalAdvice))
"""

from __future__ import annotations

from .builder import EMPTY_TABLE, DispatchTable, DispatchTableBuilder
from .declaration import ExceptionHandlerDeclaration, declaration_of, exception_handler
from .discovery import discover_handlers, parameter_types_of
from .handler_descriptor import HandlerDescriptor, descriptors_from
from .mapping_key import MappingKey

__all__ = [
    # Core types
    "HandlerDescriptor",
    "MappingKey",
    "DispatchTable",
    "EMPTY_TABLE",
    # Declaration and discovery
    "exception_handler",
    "ExceptionHandlerDeclaration",
    "declaration_of",
    "discover_handlers",
    "parameter_types_of",
    "descriptors_from",
    # Builder
    "DispatchTableBuilder",
]
