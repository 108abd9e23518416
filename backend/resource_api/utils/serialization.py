"""Record serialization honoring a query's select and populate lists."""

from typing import Any, Dict, Iterable, Optional

from sqlalchemy import inspect

from resource_api.domain.query import EMPTY_QUERY, QueryDescriptor
from resource_api.registry import RegisteredModel


def selected_columns(entry: RegisteredModel, query: QueryDescriptor = EMPTY_QUERY) -> list[str]:
    """Column names a response includes, primary key first.

    Inclusions win over exclusions. The primary key is always present
    unless it is explicitly excluded. A many-to-one relation selects its
    foreign-key column.
    """
    included = _resolved(entry, query.included_fields)
    excluded = set(_resolved(entry, query.excluded_fields))

    if included:
        names = [name for name in included if name != entry.primary_key]
        if entry.primary_key not in excluded:
            names.insert(0, entry.primary_key)
        return names

    mapper_order = [attr.key for attr in inspect(entry.model).column_attrs]
    return [name for name in mapper_order if name in entry.columns and name not in excluded]


def _resolved(entry: RegisteredModel, names: Iterable[str]) -> list[str]:
    keys = (entry.resolve_column(name) for name in names)
    return [key for key in keys if key is not None]


def _columns_of(record: Any) -> Dict[str, Any]:
    return {attr.key: getattr(record, attr.key) for attr in inspect(record).mapper.column_attrs}


def record_to_dict(
    record: Any,
    entry: RegisteredModel,
    query: Optional[QueryDescriptor] = None,
) -> Dict[str, Any]:
    """Convert an ORM record into a plain dict.

    Relations appear only when populated, each expanded to its referenced
    record's columns (a list for one-to-many relations).
    """
    query = query or EMPTY_QUERY
    data = {name: getattr(record, name) for name in selected_columns(entry, query)}

    for relation in query.populate:
        if relation not in entry.relations:
            continue
        value = getattr(record, relation)
        if value is None:
            data[relation] = None
        elif isinstance(value, (list, set, tuple)):
            data[relation] = [_columns_of(related) for related in value]
        else:
            data[relation] = _columns_of(value)
    return data


def records_to_dicts(
    records: Iterable[Any],
    entry: RegisteredModel,
    query: Optional[QueryDescriptor] = None,
) -> list[Dict[str, Any]]:
    return [record_to_dict(record, entry, query) for record in records]
