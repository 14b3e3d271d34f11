"""Exceptions raised by the character manager.

Everything derives from Dnd35Error. Each error keeps a human-readable
``message`` and a ``details`` dict with whatever context the raiser had:
the offending field, dice expression, storage operation or character ID.

Unknown characters are not errors: loading one returns None and deleting
one does nothing.

Example:
    >>> raise DiceRollError("Invalid damage format", expression="banana")
"""

from __future__ import annotations

from typing import Any


class Dnd35Error(Exception):
    """Base class for character manager errors.

    Keyword context passed by subclasses is merged into ``details``;
    context left as None is dropped.

    Attributes:
        message: Human-readable description.
        details: Extra context for logs and callers.
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        **context: Any,
    ) -> None:
        self.message = message
        self.details = dict(details or {})
        self.details.update({key: value for key, value in context.items() if value is not None})
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} [{context}]"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, details={self.details!r})"


class ConfigurationError(Dnd35Error):
    """A setting is missing or invalid."""

    def __init__(self, message: str, *, config_key: str | None = None, **context: Any) -> None:
        super().__init__(message, config_key=config_key, **context)


class ValidationError(Dnd35Error):
    """User input was rejected.

    The message is meant for the user. The operation that raised it has
    not changed any state.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any = None,
        **context: Any,
    ) -> None:
        super().__init__(message, field_name=field_name, invalid_value=invalid_value, **context)


class RulesEngineError(Dnd35Error):
    """A rules calculation or roll could not be carried out."""


class DiceRollError(RulesEngineError, ValidationError):
    """A dice expression cannot be rolled.

    Raised for malformed damage strings, notation the dice library
    rejects and impossible dice such as zero sides or negative counts.
    Since the expression is user input, this is also a ValidationError.
    """

    def __init__(self, message: str, *, expression: str | None = None, **context: Any) -> None:
        super().__init__(message, expression=expression, **context)


class StorageError(Dnd35Error):
    """The persistence layer failed.

    Covers I/O errors, locked or corrupt databases and stored documents
    that no longer validate. The character involved must not be assumed
    saved.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        character_id: str | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message, operation=operation, character_id=character_id, **context)


__all__ = [
    "Dnd35Error",
    "ConfigurationError",
    "ValidationError",
    "RulesEngineError",
    "DiceRollError",
    "StorageError",
]
