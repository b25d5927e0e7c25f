"""Canned per-field rules.

These rules are attached to tracked fields (or loaded from YAML) and are
evaluated by the FieldRuleEngine:
- required: Field must have a non-empty value
- minLength/maxLength: String (or collection) length bounds
- range: Numeric min/max bounds
- pattern: Regex pattern matching
- email: Email address format
- oneOf: Value must be one of the allowed options
- Predicate: Arbitrary callable check

Empty values only ever fail Required; every other rule skips them so that
optional fields stay valid until a value is entered.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


# =============================================================================
# Format Patterns
# =============================================================================

# Email: Basic RFC 5322 compliant pattern
EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)


def is_empty(value: Any) -> bool:
    """Check if a value is considered empty."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, (list, tuple, set, dict)) and len(value) == 0:
        return True
    return False


def _format(template: str, display_name: str, **params: Any) -> str:
    return template.format(display_name=display_name, **params)


# =============================================================================
# Rules
# =============================================================================


@dataclass(frozen=True)
class Required:
    """Value must not be None, blank or an empty collection."""

    message: str = "{display_name} is required"
    code: str = "REQUIRED"

    def check(self, value: Any, entity: Any, display_name: str) -> str | None:
        if is_empty(value):
            return _format(self.message, display_name)
        return None


@dataclass(frozen=True)
class MinLength:
    """Length of a string or collection must be at least ``length``."""

    length: int
    message: str = "{display_name} must be at least {length} characters"
    code: str = "MIN_LENGTH"

    def check(self, value: Any, entity: Any, display_name: str) -> str | None:
        if is_empty(value) or not hasattr(value, "__len__"):
            return None
        if len(value) < self.length:
            return _format(self.message, display_name, length=self.length)
        return None


@dataclass(frozen=True)
class MaxLength:
    """Length of a string or collection must be at most ``length``."""

    length: int
    message: str = "{display_name} must be at most {length} characters"
    code: str = "MAX_LENGTH"

    def check(self, value: Any, entity: Any, display_name: str) -> str | None:
        if is_empty(value) or not hasattr(value, "__len__"):
            return None
        if len(value) > self.length:
            return _format(self.message, display_name, length=self.length)
        return None


@dataclass(frozen=True)
class Range:
    """Numeric value must fall within [min, max]; either bound may be None."""

    min: float | None = None
    max: float | None = None
    message: str = ""
    code: str = "OUT_OF_RANGE"

    def check(self, value: Any, entity: Any, display_name: str) -> str | None:
        if is_empty(value):
            return None

        # Convert to number if string
        num_value = value
        if isinstance(value, str):
            try:
                num_value = float(value)
            except ValueError:
                return f"{display_name} must be a number"
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            return f"{display_name} must be a number"

        too_low = self.min is not None and num_value < self.min
        too_high = self.max is not None and num_value > self.max
        if not (too_low or too_high):
            return None

        if self.message:
            return _format(self.message, display_name, min=self.min, max=self.max)
        if self.min is not None and self.max is not None:
            return f"{display_name} must be between {self.min} and {self.max}"
        if too_low:
            return f"{display_name} must be at least {self.min}"
        return f"{display_name} must be at most {self.max}"


@dataclass(frozen=True)
class Pattern:
    """String value must match ``regex`` (anchored at the start)."""

    regex: str
    message: str = "{display_name} format is invalid"
    code: str = "PATTERN_MISMATCH"
    _compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            compiled = re.compile(self.regex)
        except re.error as e:
            raise ValueError(f"Invalid pattern '{self.regex}': {e}") from e
        object.__setattr__(self, "_compiled", compiled)

    def check(self, value: Any, entity: Any, display_name: str) -> str | None:
        if is_empty(value) or not isinstance(value, str):
            return None
        if not self._compiled.match(value):
            return _format(self.message, display_name)
        return None


@dataclass(frozen=True)
class Email:
    """String value must look like an email address."""

    message: str = "{display_name} must be a valid email address"
    code: str = "INVALID_EMAIL"

    def check(self, value: Any, entity: Any, display_name: str) -> str | None:
        if is_empty(value):
            return None
        if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
            return _format(self.message, display_name)
        return None


@dataclass(frozen=True)
class OneOf:
    """Value must be one of ``options``."""

    options: tuple[Any, ...]
    message: str = "'{value}' is not a valid option for {display_name}"
    code: str = "INVALID_OPTION"

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", tuple(self.options))

    def check(self, value: Any, entity: Any, display_name: str) -> str | None:
        if is_empty(value):
            return None
        if value not in self.options:
            return _format(self.message, display_name, value=value)
        return None


@dataclass(frozen=True)
class Predicate:
    """Fails when ``fn(value, entity)`` returns a falsy value.

    Example:
        confirm = tracked(rules=[
            Predicate(lambda v, e: v == e.password, "Passwords do not match"),
        ])
    """

    fn: Callable[[Any, Any], Any]
    message: str
    code: str = "PREDICATE"

    def check(self, value: Any, entity: Any, display_name: str) -> str | None:
        if is_empty(value):
            return None
        if not self.fn(value, entity):
            return _format(self.message, display_name)
        return None
