"""SQLAlchemy ORM models — imported here so Base.metadata sees them."""

from resource_api.models.item import ItemModel
from resource_api.models.owner import OwnerModel
from resource_api.registry import ModelRegistry

__all__ = [
    "ItemModel",
    "OwnerModel",
    "build_default_registry",
]


def build_default_registry() -> ModelRegistry:
    """Registry exposing the bundled models as REST resources."""
    registry = ModelRegistry()
    registry.register("owners", OwnerModel)
    registry.register("items", ItemModel)
    return registry
