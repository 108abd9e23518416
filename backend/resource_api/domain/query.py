"""Query descriptor types shared by the translator and the repositories.

A ``QueryDescriptor`` is built fresh for each request from its query
string, parameterizes exactly one data-access call, and is then discarded.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortField:
    field: str
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True)
class ReservedKeys:
    """Query-string keys that control the query instead of filtering it."""

    select: str = "select"
    populate: str = "populate"
    sort: str = "sort"
    limit: str = "limit"
    skip: str = "skip"

    def as_set(self) -> frozenset:
        return frozenset((self.select, self.populate, self.sort, self.limit, self.skip))

    @classmethod
    def from_settings(cls, settings) -> "ReservedKeys":
        return cls(
            select=settings.query_select_key,
            populate=settings.query_populate_key,
            sort=settings.query_sort_key,
            limit=settings.query_limit_key,
            skip=settings.query_skip_key,
        )


DEFAULT_RESERVED_KEYS = ReservedKeys()


@dataclass(frozen=True)
class QueryDescriptor:
    """Structured form of a request's query string.

    ``select`` entries prefixed with ``-`` are exclusions; an empty
    ``select`` means every field.
    """

    filter: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    select: Tuple[str, ...] = ()
    populate: Tuple[str, ...] = ()
    sort: Tuple[SortField, ...] = ()
    limit: Optional[int] = None
    skip: Optional[int] = None

    @property
    def included_fields(self) -> Tuple[str, ...]:
        return tuple(name for name in self.select if not name.startswith("-"))

    @property
    def excluded_fields(self) -> Tuple[str, ...]:
        return tuple(name[1:] for name in self.select if name.startswith("-"))

    def is_empty(self) -> bool:
        return not (
            self.filter or self.select or self.populate or self.sort
        ) and self.limit is None and self.skip is None


EMPTY_QUERY = QueryDescriptor()
