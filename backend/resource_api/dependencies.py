"""FastAPI dependency functions backed by the application container."""

from functools import lru_cache
from typing import Iterator, Optional

from sqlalchemy.orm import Session

from resource_api.config import Settings
from resource_api.container import AppContainer
from resource_api.domain.query import ReservedKeys
from resource_api.registry import ModelRegistry

_container: Optional[AppContainer] = None


def get_container() -> AppContainer:
    global _container
    if _container is None:
        _container = AppContainer()
    return _container


@lru_cache
def get_settings() -> Settings:
    return get_container().settings()


def get_model_registry() -> ModelRegistry:
    return get_container().model_registry()


def get_reserved_keys() -> ReservedKeys:
    return get_container().reserved_keys()


def get_db() -> Iterator[Session]:
    """Yield a session from the container's session factory, closed after the request."""
    db = get_container().session_factory()()
    try:
        yield db
    finally:
        db.close()
