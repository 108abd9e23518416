"""Shared test fixtures.

Every test gets a fresh in-memory SQLite database so tests are fully isolated.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

import resource_api.models  # noqa: F401
from resource_api.database import Base
from resource_api.models import ItemModel, OwnerModel, build_default_registry
from resource_api.registry import ModelRegistry, RegisteredModel


@pytest.fixture()
def db_engine():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(db_engine) -> Session:
    session = sessionmaker(bind=db_engine)()
    yield session
    session.close()


@pytest.fixture()
def registry() -> ModelRegistry:
    return build_default_registry()


@pytest.fixture()
def items_entry(registry: ModelRegistry) -> RegisteredModel:
    return registry.get("items")


# ── Convenience fixtures ─────────────────────────────────────────────────

@pytest.fixture()
def sample_owner(db: Session) -> OwnerModel:
    owner = OwnerModel(name="Dana", email="dana@example.com")
    db.add(owner)
    db.commit()
    db.refresh(owner)
    return owner


@pytest.fixture()
def sample_items(db: Session, sample_owner: OwnerModel) -> list[ItemModel]:
    """Three items: two owned by Dana, one unowned."""
    items = [
        ItemModel(name="Alice", age=30, tag="red", owner_id=sample_owner.id),
        ItemModel(name="Bob", age=25, tag="blue", owner_id=sample_owner.id),
        ItemModel(name="Carol", age=35, tag="red", active=False),
    ]
    db.add_all(items)
    db.commit()
    for item in items:
        db.refresh(item)
    return items
