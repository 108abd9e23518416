"""Dependency Injection Container.

Centralized wiring of settings, database, and the model registry using
dependency-injector.

Usage::

    from resource_api.container import AppContainer

    container = AppContainer()
    registry = container.model_registry()
    keys = container.reserved_keys()
"""

from dependency_injector import containers, providers

from resource_api.config import Settings
from resource_api.database import Base, build_engine, build_session_factory
from resource_api.domain.query import ReservedKeys
from resource_api.models import build_default_registry


def _init_database(engine):
    """Initialize database schema."""
    Base.metadata.create_all(bind=engine)
    return engine


class AppContainer(containers.DeclarativeContainer):
    """Application container: configuration, database, registry."""

    # ══════════════════════════════════════════════════════════════════
    # CONFIGURATION
    # ══════════════════════════════════════════════════════════════════

    settings = providers.Singleton(Settings)

    reserved_keys = providers.Singleton(
        ReservedKeys.from_settings,
        settings=settings,
    )

    # ══════════════════════════════════════════════════════════════════
    # DATABASE
    # ══════════════════════════════════════════════════════════════════

    db_engine = providers.Singleton(
        build_engine,
        database_url=settings.provided.database_url,
        echo=settings.provided.debug,
    )

    db_initialized = providers.Resource(
        _init_database,
        engine=db_engine,
    )

    session_factory = providers.Singleton(
        build_session_factory,
        engine=db_engine,
    )

    # ══════════════════════════════════════════════════════════════════
    # RESOURCES
    # ══════════════════════════════════════════════════════════════════

    model_registry = providers.Singleton(build_default_registry)
