"""modelguard - observable, self-validating models.

Usage:
    from modelguard import ValidatableModel, tracked
    from modelguard.validation import MaxLength, Required

    class Contact(ValidatableModel):
        name = tracked(rules=[Required(), MaxLength(40)])

    contact = Contact()
    contact.subscribe_errors(on_errors_changed)
    contact.name = ""  # schedules a validation pass
"""

from modelguard.config import ModelSettings
from modelguard.executor import get_executor, shutdown_executor
from modelguard.model import ValidatableModel
from modelguard.notify import Notifier, PropertyChangedModel, TrackedField, tracked, tracked_fields
from modelguard.validation.types import HAS_ERRORS, RuleEngine, Violation

__all__ = [
    "HAS_ERRORS",
    "ModelSettings",
    "Notifier",
    "PropertyChangedModel",
    "RuleEngine",
    "TrackedField",
    "ValidatableModel",
    "Violation",
    "get_executor",
    "shutdown_executor",
    "tracked",
    "tracked_fields",
]
