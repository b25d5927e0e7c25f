"""Core types for the modelguard validation system.

This module defines the types shared by the model and its rule engines:
- Violation: one (field, message) record produced by a rule engine
- Rule: a single per-field check
- RuleEngine: anything that can evaluate a whole entity
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol

# Synthetic aggregate field announced when has_errors flips.
HAS_ERRORS = "has_errors"


@dataclass(frozen=True)
class Violation:
    """A single rule violation.

    Attributes:
        field: Field name this violation relates to, or None for entity-level
            violations (those are not tracked per field)
        message: Human-readable message
        code: Machine-readable code (e.g., "REQUIRED")
    """

    field: str | None
    message: str
    code: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "message": self.message,
            "code": self.code,
        }


class Rule(Protocol):
    """Protocol that per-field rules implement.

    Rules are stateless; they receive the field value and the owning entity
    (for rules that compare against other fields).
    """

    code: str
    message: str

    def check(self, value: Any, entity: Any, display_name: str) -> str | None:
        """Check a value.

        Args:
            value: Current field value
            entity: The entity being validated (read-only)
            display_name: Human-readable field name for messages

        Returns:
            The failure message, or None if the value passes.
        """
        ...


class RuleEngine(Protocol):
    """Protocol for whole-entity rule evaluation.

    Engines must not mutate the entity. The model never calls an engine
    from two threads on the same instance at once.
    """

    def evaluate(self, entity: Any) -> Iterable[Violation]:
        """Evaluate all rules against the entity.

        Returns:
            Violations in evaluation order. Empty means valid.
        """
        ...
