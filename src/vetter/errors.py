"""Vetter exception hierarchy.

Only configuration problems are exceptions. Input that fails a rule is a
normal outcome and ends up as a message in the error accumulator instead.
"""

from dataclasses import dataclass


class VetterError(Exception):
    """Base for all vetter-specific errors."""


class ConfigurationError(VetterError):
    """Raised when a rule set (not the data being validated) is invalid.

    Aborts the whole ``validate()`` call.
    """


@dataclass(frozen=True, slots=True)
class RuleNotFound(ConfigurationError):  # noqa: N818 - reads like the condition it reports
    """A rule specification names a rule that is not registered."""

    name: str

    def __str__(self) -> str:
        return f"Validation rule [{self.name}] does not exist."


@dataclass(frozen=True, slots=True)
class RuleParameterError(ConfigurationError):
    """A rule received too few, too many, or malformed parameters."""

    rule: str
    detail: str

    def __str__(self) -> str:
        return f"Validation rule [{self.rule}]: {self.detail}"
