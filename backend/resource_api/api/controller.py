"""Resource controller factory: generic REST handlers for a registered model.

``create_controller("items")`` returns a controller whose seven handlers
(list, count, create, get, update, delete_by_id, remove) resolve the
``items`` model on every request, translate the query string, run exactly
one data-access operation (update runs a sequential read/write/read), and
map the outcome to an HTTP response:

- data-layer error -> 500 with the error payload
- missing record on get/update -> 404
- create/update -> 201, delete -> 204, reads -> 200
"""

from typing import Any, Dict, List, Union

from fastapi import Body, Depends, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from resource_api.api.errors import SUCCESS_STATUS, error_response
from resource_api.dependencies import get_db, get_model_registry, get_reserved_keys
from resource_api.domain.errors import RecordNotFoundError
from resource_api.domain.query import EMPTY_QUERY, QueryDescriptor, ReservedKeys
from resource_api.engines.query_translator import translate
from resource_api.logging_config import get_logger
from resource_api.registry import ModelRegistry, RegisteredModel
from resource_api.repositories.resource_repo import ResourceRepository
from resource_api.utils.serialization import record_to_dict, records_to_dicts

logger = get_logger(__name__)

NULL_LITERAL = "null"


def _query_for(request: Request, entry: RegisteredModel, keys: ReservedKeys) -> QueryDescriptor:
    """Translate the request's query string.

    A key repeated in the query string keeps its last value, so
    ``?tag=red&tag=blue`` filters on ``tag == "blue"``.
    """
    if not request.query_params:
        return EMPTY_QUERY
    return translate(dict(request.query_params), entry.fields, keys)


def _with_nulls(body: Dict[str, Any]) -> Dict[str, Any]:
    """Treat the literal string "null" as an explicit null."""
    return {key: None if value == NULL_LITERAL else value for key, value in body.items()}


def _json(operation: str, content: Any) -> JSONResponse:
    return JSONResponse(status_code=SUCCESS_STATUS[operation], content=jsonable_encoder(content))


class ModelController:
    """HTTP handlers bound to one model name.

    Handlers hold no state between requests; the model is looked up in the
    registry on each call.
    """

    def __init__(self, model_name: str):
        self.model_name = model_name

    def _repository(self, db: Session, registry: ModelRegistry) -> ResourceRepository:
        return ResourceRepository(db, registry.get(self.model_name))

    def _fail(self, operation: str, exc: Exception, db: Session, **context) -> JSONResponse:
        db.rollback()
        if isinstance(exc, RecordNotFoundError):
            logger.warning("resource_not_found", resource=self.model_name, operation=operation, **context)
        else:
            logger.error(
                "resource_operation_failed",
                resource=self.model_name,
                operation=operation,
                error=str(exc),
                error_type=type(exc).__name__,
                **context,
            )
        return error_response(exc)

    # ── handlers ─────────────────────────────────────────────────────

    def list(
        self,
        request: Request,
        db: Session = Depends(get_db),
        registry: ModelRegistry = Depends(get_model_registry),
        keys: ReservedKeys = Depends(get_reserved_keys),
    ) -> Response:
        """List records matching the query string."""
        logger.info("resource_list_requested", resource=self.model_name, params=dict(request.query_params))
        try:
            repo = self._repository(db, registry)
            query = _query_for(request, repo.entry, keys)
            records = repo.find(query)
            data = records_to_dicts(records, repo.entry, query)
        except Exception as e:
            return self._fail("list", e, db)

        logger.info("resource_list_completed", resource=self.model_name, count=len(data))
        return _json("list", data)

    def count(
        self,
        request: Request,
        db: Session = Depends(get_db),
        registry: ModelRegistry = Depends(get_model_registry),
        keys: ReservedKeys = Depends(get_reserved_keys),
    ) -> Response:
        """Count records matching the query-string filter."""
        try:
            repo = self._repository(db, registry)
            query = _query_for(request, repo.entry, keys)
            total = repo.count(query.filter)
        except Exception as e:
            return self._fail("count", e, db)

        logger.info("resource_count_completed", resource=self.model_name, count=total)
        return _json("count", total)

    def create(
        self,
        payload: Union[Dict[str, Any], List[Dict[str, Any]]] = Body(...),
        db: Session = Depends(get_db),
        registry: ModelRegistry = Depends(get_model_registry),
    ) -> Response:
        """Create one record, or several when the body is an array."""
        try:
            repo = self._repository(db, registry)
            if isinstance(payload, list):
                records = [repo.create(item) for item in payload]
            else:
                records = [repo.create(payload)]
            db.commit()
            data = records_to_dicts(records, repo.entry)
        except Exception as e:
            return self._fail("create", e, db)

        logger.info("resource_created", resource=self.model_name, count=len(data))
        return _json("create", data if isinstance(payload, list) else data[0])

    def get(
        self,
        id: str,
        request: Request,
        db: Session = Depends(get_db),
        registry: ModelRegistry = Depends(get_model_registry),
        keys: ReservedKeys = Depends(get_reserved_keys),
    ) -> Response:
        """Fetch one record by id, honoring select and populate."""
        try:
            repo = self._repository(db, registry)
            query = _query_for(request, repo.entry, keys)
            record = repo.find_by_id(id, query)
            if record is None:
                raise RecordNotFoundError(self.model_name, id)
            data = record_to_dict(record, repo.entry, query)
        except Exception as e:
            return self._fail("get", e, db, record_id=id)

        return _json("get", data)

    def update(
        self,
        id: str,
        payload: Dict[str, Any] = Body(...),
        db: Session = Depends(get_db),
        registry: ModelRegistry = Depends(get_model_registry),
    ) -> Response:
        """Read-modify-write update; the record is re-read after saving.

        No optimistic concurrency: a write landing between the read and the
        save is silently overwritten.
        """
        try:
            repo = self._repository(db, registry)
            record = repo.find_by_id(id)
            if record is None:
                raise RecordNotFoundError(self.model_name, id)
            repo.save(record, _with_nulls(payload))
            db.commit()

            saved_id = getattr(record, repo.entry.primary_key)
            refreshed = repo.find_by_id(saved_id)
            if refreshed is None:
                raise RecordNotFoundError(self.model_name, saved_id)
            data = record_to_dict(refreshed, repo.entry)
        except Exception as e:
            return self._fail("update", e, db, record_id=id)

        logger.info("resource_updated", resource=self.model_name, record_id=id, fields=sorted(payload))
        return _json("update", data)

    def delete_by_id(
        self,
        id: str,
        db: Session = Depends(get_db),
        registry: ModelRegistry = Depends(get_model_registry),
    ) -> Response:
        """Delete one record; a missing record is not an error."""
        try:
            repo = self._repository(db, registry)
            removed = repo.find_by_id_and_remove(id)
            db.commit()
        except Exception as e:
            return self._fail("delete_by_id", e, db, record_id=id)

        logger.info("resource_deleted", resource=self.model_name, record_id=id, found=removed is not None)
        return Response(status_code=SUCCESS_STATUS["delete_by_id"])

    def remove(
        self,
        request: Request,
        db: Session = Depends(get_db),
        registry: ModelRegistry = Depends(get_model_registry),
        keys: ReservedKeys = Depends(get_reserved_keys),
    ) -> Response:
        """Delete every record matching the query-string filter.

        Without a filter this removes all records of the model.
        """
        try:
            repo = self._repository(db, registry)
            query = _query_for(request, repo.entry, keys)
            deleted = repo.remove(query.filter)
            db.commit()
        except Exception as e:
            return self._fail("remove", e, db)

        logger.info("resource_removed", resource=self.model_name, filter=dict(query.filter), deleted=deleted)
        return Response(status_code=SUCCESS_STATUS["remove"])


def create_controller(model_name: str) -> ModelController:
    return ModelController(model_name)
