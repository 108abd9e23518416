"""Outcome -> HTTP status mapping for resource handlers.

Every data-layer failure maps to 500 with the error passed through
unsanitized, so driver messages reach API consumers. Only a missing record
gets its own status.
"""

from typing import Any, Dict

from fastapi.responses import JSONResponse

from resource_api.domain.errors import RecordNotFoundError

SUCCESS_STATUS: Dict[str, int] = {
    "list": 200,
    "count": 200,
    "create": 201,
    "get": 200,
    "update": 201,
    "delete_by_id": 204,
    "remove": 204,
}


def status_for_error(exc: Exception) -> int:
    if isinstance(exc, RecordNotFoundError):
        return 404
    return 500


def error_payload(exc: Exception) -> Dict[str, Any]:
    if isinstance(exc, RecordNotFoundError):
        return {"detail": "Not found"}
    return {"name": type(exc).__name__, "message": str(exc)}


def error_response(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_for_error(exc), content=error_payload(exc))
