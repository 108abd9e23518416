"""Data access repositories."""

from resource_api.repositories.resource_repo import ResourceRepository

__all__ = ["ResourceRepository"]
