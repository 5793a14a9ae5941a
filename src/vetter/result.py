"""Validation result - immutable snapshot of one validation."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of validating data against a rule set.

    The result is falsy when invalid, so you can write::

        result = validate(form, rules)
        if not result:
            return render("form.html", errors=result.errors)

    ``errors`` maps field names to messages in rule order; fields without
    errors are absent::

        {"name": ["The name field is required."],
         "password": ["Password must be at least 8 characters.",
                      "Password must contain a number."]}
    """

    errors: dict[str, list[str]]
    data: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        """True if validation passed with no errors."""
        return not self.errors

    def fails(self) -> bool:
        return bool(self.errors)

    def first(self, field_name: str) -> str | None:
        """First message for *field_name*, or ``None``."""
        messages = self.errors.get(field_name)
        return messages[0] if messages else None

    def __bool__(self) -> bool:
        """Falsy when invalid - enables ``if not result:`` pattern."""
        return self.is_valid
