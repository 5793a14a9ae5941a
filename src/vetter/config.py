"""Validator configuration.

ValidatorConfig is a frozen dataclass - immutable after creation and safe to
share between sessions on different threads.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ValidatorConfig:
    """Validator configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ValidatorConfig(date_format="d/m/Y", password_strength="strong")
    """

    # Cross-field rules
    confirmation_suffix: str = "_confirmation"

    # Dates
    date_format: str = "Y-m-d"  # PHP-style letters, see vetter.dates
    clock: Callable[[], datetime] = datetime.now  # Resolves today/now/tomorrow/yesterday

    # Passwords
    password_min_length: int = 8
    password_strength: str = "weak"  # "weak" or "strong"

    # Parser
    json_params: bool = False  # Opt in to name:["a,b","c"] parameter lists
