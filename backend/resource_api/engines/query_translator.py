"""Query-string translation: turns raw query parameters into a QueryDescriptor.

Usage:
    from resource_api.engines.query_translator import translate

    query = translate(
        {"name": "Alice", "sort": "-age", "limit": "10", "_": "1712"},
        valid_fields={"id", "name", "age"},
    )
    # query.filter == {"name": "Alice"}; "_" is dropped
    # query.sort == (SortField("age", SortDirection.DESC),)
"""

import re
from types import MappingProxyType
from typing import AbstractSet, Iterable, List, Mapping, Optional

from resource_api.domain.query import (
    DEFAULT_RESERVED_KEYS,
    QueryDescriptor,
    ReservedKeys,
    SortDirection,
    SortField,
)

# List values accept commas, whitespace, or both: "name,-age" or "name -age"
_LIST_SEPARATOR = re.compile(r"[\s,]+")


def translate(
    raw_params: Mapping[str, str],
    valid_fields: AbstractSet[str],
    keys: ReservedKeys = DEFAULT_RESERVED_KEYS,
) -> QueryDescriptor:
    """Build a QueryDescriptor from a request's query-string mapping.

    Unknown keys and tokens are dropped rather than rejected, so incidental
    parameters such as cache-busting tokens never break a request. A
    non-numeric or negative limit/skip yields no constraint.

    Args:
        raw_params: Flat key -> string mapping taken from the query string.
        valid_fields: Field names declared on the target model.
        keys: Names of the reserved control keys.

    Returns:
        A QueryDescriptor whose field names all belong to ``valid_fields``.
    """
    reserved = keys.as_set()

    filters = {
        key: value
        for key, value in raw_params.items()
        if key not in reserved and key in valid_fields
    }

    return QueryDescriptor(
        filter=MappingProxyType(filters),
        select=tuple(_parse_select(raw_params.get(keys.select), valid_fields)),
        populate=tuple(_unique(
            name for name in _split(raw_params.get(keys.populate)) if name in valid_fields
        )),
        sort=tuple(_parse_sort(raw_params.get(keys.sort), valid_fields)),
        limit=_parse_count(raw_params.get(keys.limit)),
        skip=_parse_count(raw_params.get(keys.skip)),
    )


def _split(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [token for token in _LIST_SEPARATOR.split(value.strip()) if token]


def _unique(names: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for name in names:
        if name not in seen:
            seen.add(name)
            result.append(name)
    return result


def _parse_select(value: Optional[str], valid_fields: AbstractSet[str]) -> List[str]:
    tokens = []
    seen = set()
    for token in _split(value):
        excluded = token.startswith("-")
        name = token.lstrip("+-")
        if name not in valid_fields or name in seen:
            continue
        seen.add(name)
        tokens.append(f"-{name}" if excluded else name)
    return tokens


def _parse_sort(value: Optional[str], valid_fields: AbstractSet[str]) -> List[SortField]:
    fields = []
    seen = set()
    for token in _split(value):
        direction = SortDirection.DESC if token.startswith("-") else SortDirection.ASC
        name = token.lstrip("+-")
        if name not in valid_fields or name in seen:
            continue
        seen.add(name)
        fields.append(SortField(name, direction))
    return fields


def _parse_count(value: Optional[str]) -> Optional[int]:
    """Parse a non-negative integer; anything else means "no constraint"."""
    if value is None:
        return None
    digits = value.strip()
    # int() alone would also take "1_0", "+5" and non-ASCII digits
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(digits)
