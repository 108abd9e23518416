"""Pure query-translation logic."""

from resource_api.engines.query_translator import translate

__all__ = ["translate"]
