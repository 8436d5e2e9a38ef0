"""Candidate ordering for exception handler resolution.

Candidates are ordered by:
1. Hierarchy distance from the raised class to the registered class
   (closer first). Distance is the registered class's position in the raised
   class's MRO, so it equals the number of superclass steps for single
   inheritance and stays a strict order under multiple inheritance.
2. Media type specificity when distances are equal (more specific first).
3. Dispatch table order for anything still tied (sorting is stable).
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .registry.mapping_key import MappingKey


def hierarchy_distance(exception_type: type, registered_type: type) -> int:
    """Number of MRO steps from exception_type up to registered_type.

    A virtual subclass (registered through an ABC) is placed after every
    real ancestor.

    Returns:
        0 for the same class, growing towards BaseException.
    """
    mro = exception_type.__mro__
    try:
        return mro.index(registered_type)
    except ValueError:
        return len(mro)


class CandidateComparator:
    """Orders mapping keys matching a raised exception class.

    Example:
        >>> comparator = CandidateComparator(FileNotFoundError)
        >>> ordered = comparator.sort([os_error_key, file_not_found_key])
        >>> ordered[0] is file_not_found_key
        True
    """

    def __init__(self, exception_type: type) -> None:
        self._exception_type = exception_type

    def compare(self, first: MappingKey, second: MappingKey) -> int:
        first_distance = hierarchy_distance(self._exception_type, first.exception_type)
        second_distance = hierarchy_distance(self._exception_type, second.exception_type)
        if first_distance != second_distance:
            return -1 if first_distance < second_distance else 1

        if first.media_type == second.media_type:
            return 0
        if first.media_type.is_more_specific(second.media_type):
            return -1
        if second.media_type.is_more_specific(first.media_type):
            return 1
        return 0

    def sort(self, candidates: Iterable[MappingKey]) -> list[MappingKey]:
        """Return candidates best match first; ties keep their input order."""
        return sorted(candidates, key=cmp_to_key(self.compare))
