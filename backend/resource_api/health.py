"""Health check endpoints.

- /health: application status only
- /health/detailed: database connectivity and registered resources
- /health/ready, /health/live: Kubernetes-style probes
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from resource_api.dependencies import get_db, get_model_registry
from resource_api.logging_config import get_logger
from resource_api.registry import ModelRegistry

router = APIRouter()
logger = get_logger(__name__)

SERVICE_NAME = "resource-api"
SERVICE_VERSION = "1.0.0"


def check_database(db: Session) -> Dict[str, Any]:
    """Run a trivial query to verify the database answers."""
    try:
        db.execute(text("SELECT 1"))
        return {"healthy": True, "message": "Database connected"}
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return {"healthy": False, "message": f"Database error: {str(e)}"}


def check_registry(registry: ModelRegistry) -> Dict[str, Any]:
    names = registry.names()
    if not names:
        return {"healthy": False, "message": "No resources registered", "resources": []}
    return {"healthy": True, "message": f"{len(names)} resources registered", "resources": names}


@router.get("/health")
def health_check() -> Dict[str, Any]:
    return {"status": "healthy", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@router.get("/health/detailed")
def detailed_health_check(
    db: Session = Depends(get_db),
    registry: ModelRegistry = Depends(get_model_registry),
) -> Dict[str, Any]:
    """Health status for every dependency; "degraded" if any check fails."""
    checks = {
        "database": check_database(db),
        "registry": check_registry(registry),
    }

    all_healthy = all(check["healthy"] for check in checks.values())
    overall_status = "healthy" if all_healthy else "degraded"

    logger.info(
        "health_check_performed",
        status=overall_status,
        database=checks["database"]["healthy"],
        registry=checks["registry"]["healthy"],
    )

    return {
        "status": overall_status,
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "checks": checks,
    }


@router.get("/health/ready")
def readiness_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Returns 200 if the app can serve traffic, 503 otherwise."""
    try:
        db.execute(text("SELECT 1"))
        return {"ready": True}
    except Exception:
        raise HTTPException(status_code=503, detail={"ready": False, "reason": "Database unavailable"})


@router.get("/health/live")
def liveness_check() -> Dict[str, Any]:
    return {"alive": True}
