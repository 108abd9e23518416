"""Model registry: maps resource names to SQLAlchemy models and their field allow-lists.

Field names are read from the mapper once, at registration, so request
handling never introspects a live schema. Callers may pass an explicit
``fields`` allow-list to narrow what a resource exposes to query strings.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Iterator, Mapping, Optional, Type

from sqlalchemy import inspect
from sqlalchemy.orm import MANYTOONE

from resource_api.database import Base
from resource_api.domain.errors import ModelNotRegisteredError


@dataclass(frozen=True)
class RegisteredModel:
    name: str
    model: Type[Base]
    columns: FrozenSet[str]
    relations: FrozenSet[str]
    primary_key: str
    # many-to-one relation -> its single local foreign-key column
    join_columns: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def fields(self) -> FrozenSet[str]:
        """Names accepted in filter/select/populate/sort."""
        return self.columns | self.relations

    def resolve_column(self, name: str) -> Optional[str]:
        """Column key stored for ``name``, or None if it has no single column.

        A many-to-one relation resolves to its foreign-key column, so
        filtering or sorting on ``owner`` compares the stored owner id.
        """
        if name in self.columns:
            return name
        return self.join_columns.get(name)


def _join_columns(mapper, relations: FrozenSet[str]) -> Dict[str, str]:
    joins = {}
    for relation in relations:
        prop = mapper.relationships[relation]
        if prop.direction is not MANYTOONE or prop.uselist:
            continue
        local = list(prop.local_columns)
        if len(local) == 1:
            joins[relation] = mapper.get_property_by_column(local[0]).key
    return joins


def describe_model(name: str, model: Type[Base], fields: Optional[Iterable[str]] = None) -> RegisteredModel:
    mapper = inspect(model)
    columns = frozenset(attr.key for attr in mapper.column_attrs)
    relations = frozenset(rel.key for rel in mapper.relationships)

    if fields is not None:
        allowed = frozenset(fields)
        unknown = allowed - columns - relations
        if unknown:
            raise ValueError(f"{model.__name__} has no fields {sorted(unknown)}")
        columns &= allowed
        relations &= allowed

    pk_columns = mapper.primary_key
    if len(pk_columns) != 1:
        raise ValueError(f"{model.__name__} must have exactly one primary key column")
    primary_key = mapper.get_property_by_column(pk_columns[0]).key

    return RegisteredModel(
        name=name,
        model=model,
        columns=columns,
        relations=relations,
        primary_key=primary_key,
        join_columns=MappingProxyType(_join_columns(mapper, relations)),
    )


class ModelRegistry:
    """Name -> RegisteredModel lookup, read-only once the app is serving."""

    def __init__(self):
        self._models: Dict[str, RegisteredModel] = {}

    def register(self, name: str, model: Type[Base], fields: Optional[Iterable[str]] = None) -> RegisteredModel:
        if name in self._models:
            raise ValueError(f"Model name '{name}' is already registered")
        entry = describe_model(name, model, fields)
        self._models[name] = entry
        return entry

    def get(self, name: str) -> RegisteredModel:
        try:
            return self._models[name]
        except KeyError:
            raise ModelNotRegisteredError(name) from None

    def names(self) -> list[str]:
        return sorted(self._models)

    def __contains__(self, name: str) -> bool:
        return name in self._models

    def __iter__(self) -> Iterator[RegisteredModel]:
        return iter(self._models.values())

    def __len__(self) -> int:
        return len(self._models)
