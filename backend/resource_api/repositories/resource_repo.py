"""Generic data access for any registered model, driven by a QueryDescriptor."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import asc, desc, inspect
from sqlalchemy.orm import Query, Session, defer, load_only, selectinload

from resource_api.domain.errors import InvalidFieldError
from resource_api.domain.query import EMPTY_QUERY, QueryDescriptor, SortDirection
from resource_api.registry import RegisteredModel

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


class ResourceRepository:
    """Thin data-access layer over SQLAlchemy for one registered model.

    Methods only modify the session (add/delete/flush); the caller decides
    when to commit or roll back.
    """

    def __init__(self, db: Session, entry: RegisteredModel):
        self.db = db
        self.entry = entry
        self.model = entry.model

    # ── reads ────────────────────────────────────────────────────────

    def find(self, query: QueryDescriptor = EMPTY_QUERY) -> List[Any]:
        q = self._shaped(self._filtered(query.filter), query)

        for sort_field in query.sort:
            column = getattr(self.model, self._column_key(sort_field.field, "sort"))
            q = q.order_by(desc(column) if sort_field.direction is SortDirection.DESC else asc(column))

        if query.skip:
            q = q.offset(query.skip)
        # limit 0 means "no limit", as in the query-string convention
        if query.limit:
            q = q.limit(query.limit)
        return q.all()

    def count(self, filters: Mapping[str, str] = EMPTY_QUERY.filter) -> int:
        return self._filtered(filters).count()

    def find_by_id(self, record_id: Any, query: QueryDescriptor = EMPTY_QUERY) -> Optional[Any]:
        """Return the record, or None when it is missing or the id is malformed."""
        key = self._coerce_id(record_id)
        if key is None:
            return None
        pk = getattr(self.model, self.entry.primary_key)
        return self._shaped(self.db.query(self.model), query).filter(pk == key).first()

    # ── writes ───────────────────────────────────────────────────────

    def create(self, data: Mapping[str, Any]) -> Any:
        """Add a record built from the known columns of ``data`` (caller must commit)."""
        record = self.model(**self._known_columns(data))
        self.db.add(record)
        self.db.flush()
        return record

    def save(self, record: Any, changes: Mapping[str, Any]) -> Any:
        """Apply column changes to an attached record and flush (caller must commit)."""
        for name, value in self._known_columns(changes).items():
            if name == self.entry.primary_key:
                continue
            setattr(record, name, value)
        self.db.flush()
        return record

    def find_by_id_and_remove(self, record_id: Any) -> Optional[Any]:
        record = self.find_by_id(record_id)
        if record is not None:
            self.db.delete(record)
            self.db.flush()
        return record

    def remove(self, filters: Mapping[str, str] = EMPTY_QUERY.filter) -> int:
        """Delete every record matching ``filters``; an empty filter matches all."""
        return self._filtered(filters).delete(synchronize_session=False)

    # ── helpers ──────────────────────────────────────────────────────

    def _filtered(self, filters: Mapping[str, str]) -> Query:
        q = self.db.query(self.model)
        for name, raw in filters.items():
            key = self._column_key(name, "filter")
            q = q.filter(getattr(self.model, key) == self._coerce(key, raw))
        return q

    def _shaped(self, q: Query, query: QueryDescriptor) -> Query:
        included = self._resolved(query.included_fields)
        if included:
            # populated relations need their local join columns loaded
            included += self._join_columns(query.populate)
        excluded = [
            key for key in self._resolved(query.excluded_fields)
            if key != self.entry.primary_key
        ]
        if included:
            q = q.options(load_only(*(getattr(self.model, name) for name in included)))
        elif excluded:
            q = q.options(*(defer(getattr(self.model, name)) for name in excluded))

        for relation in query.populate:
            if relation in self.entry.relations:
                q = q.options(selectinload(getattr(self.model, relation)))
        return q

    def _join_columns(self, relations) -> List[str]:
        mapper = inspect(self.model)
        names = []
        for relation in relations:
            if relation not in self.entry.relations:
                continue
            for column in mapper.relationships[relation].local_columns:
                names.append(mapper.get_property_by_column(column).key)
        return names

    def _resolved(self, names) -> List[str]:
        keys = (self.entry.resolve_column(name) for name in names)
        return [key for key in keys if key is not None]

    def _column_key(self, name: str, usage: str) -> str:
        key = self.entry.resolve_column(name)
        if key is not None:
            return key
        if name in self.entry.relations:
            raise InvalidFieldError(name, f"only single-column many-to-one relations can be used to {usage}")
        raise InvalidFieldError(name, f"unknown field on {self.entry.name}")

    def _known_columns(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        return {name: value for name, value in data.items() if name in self.entry.columns}

    def _coerce_id(self, record_id: Any) -> Optional[Any]:
        try:
            return self._coerce(self.entry.primary_key, record_id)
        except InvalidFieldError:
            return None

    def _coerce(self, name: str, raw: Any) -> Any:
        """Convert a query-string value to the column's Python type."""
        if not isinstance(raw, str):
            return raw

        column = inspect(self.model).columns[name]
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            return raw

        try:
            if python_type is bool:
                lowered = raw.strip().lower()
                if lowered in _TRUE_VALUES:
                    return True
                if lowered in _FALSE_VALUES:
                    return False
                raise ValueError(f"not a boolean: {raw!r}")
            if python_type is datetime:
                return datetime.fromisoformat(raw)
            if python_type is date:
                return date.fromisoformat(raw)
            if python_type in (int, float, Decimal):
                return python_type(raw)
        except (ValueError, InvalidOperation) as e:
            raise InvalidFieldError(name, str(e)) from e
        return raw
