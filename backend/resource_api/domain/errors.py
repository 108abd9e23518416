"""Errors raised by the registry and the data-access layer.

The taxonomy is deliberately flat: the HTTP layer distinguishes only a
missing record (404); everything else is a server error.
"""


class ResourceError(Exception):
    """Base class for resource data-access failures."""


class ModelNotRegisteredError(ResourceError):
    def __init__(self, name: str):
        super().__init__(f"No model registered under name '{name}'")
        self.name = name


class RecordNotFoundError(ResourceError):
    def __init__(self, resource: str, record_id):
        super().__init__(f"{resource} {record_id} not found")
        self.resource = resource
        self.record_id = record_id


class InvalidFieldError(ResourceError):
    """A field name or value could not be applied to the model."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid field '{field}': {reason}")
        self.field = field
        self.reason = reason
