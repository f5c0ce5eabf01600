"""Custom exceptions for the application."""
from typing import Any, NamedTuple


class EntityNotFound(Exception):
    """Raised when an entity is not found in the database."""

    def __init__(self, entity_name: str, entity_id: Any):
        """
        Initialize the exception.

        Args:
            entity_name: Name of the entity that was not found
            entity_id: ID of the entity that was not found
        """
        super().__init__(f"{entity_name} with ID {entity_id} not found.")
        self.entity_name = entity_name
        self.entity_id = entity_id


class ConflictingEntityFound(Exception):
    """Raised when an entity with a conflicting field already exists."""

    def __init__(self, entity_name: str, field_name: str, field_value: Any):
        """
        Initialize the exception.

        Args:
            entity_name: Name of the entity
            field_name: Name of the conflicting field
            field_value: Value of the conflicting field
        """
        super().__init__(f"A {entity_name.lower()} with this {field_name} already exists.")
        self.entity_name = entity_name
        self.field_name = field_name
        self.field_value = field_value


class FieldError(NamedTuple):
    """A single violated rule on a named input field."""
    field: str
    message: str


class ValidationFailed(Exception):
    """Raised when an input payload breaks one or more field rules."""

    def __init__(self, errors: list[FieldError]):
        """
        Initialize the exception.

        Args:
            errors: Every violation found, in rule order
        """
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = list(errors)

    def as_dict(self) -> dict[str, list[str]]:
        """Group messages by field, preserving rule order."""
        grouped: dict[str, list[str]] = {}
        for error in self.errors:
            grouped.setdefault(error.field, []).append(error.message)
        return grouped
