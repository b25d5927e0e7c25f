"""modelguard validation system.

Rules are plain objects with a ``check`` method, attached to tracked fields
or loaded from YAML by name. Rule engines turn an entity into a sequence of
Violations; the ValidatableModel turns those into its per-field error map.

Usage:
    from modelguard.validation import (
        FieldRuleEngine,
        load_rules,
        register_builtin_rules,
    )

    # At application startup
    register_builtin_rules()
    engine = FieldRuleEngine(extra_rules=load_rules(Path("contact.yaml")))
"""

from modelguard.validation.engine import CompositeRuleEngine, FieldRuleEngine
from modelguard.validation.loader import load_rules, parse_rules
from modelguard.validation.registry import RuleRegistry, register_builtin_rules
from modelguard.validation.rules import (
    Email,
    MaxLength,
    MinLength,
    OneOf,
    Pattern,
    Predicate,
    Range,
    Required,
    is_empty,
)
from modelguard.validation.types import HAS_ERRORS, Rule, RuleEngine, Violation

__all__ = [
    # Types
    "HAS_ERRORS",
    "Rule",
    "RuleEngine",
    "Violation",
    # Rules
    "Email",
    "MaxLength",
    "MinLength",
    "OneOf",
    "Pattern",
    "Predicate",
    "Range",
    "Required",
    "is_empty",
    # Engines
    "CompositeRuleEngine",
    "FieldRuleEngine",
    # Registry / loading
    "RuleRegistry",
    "load_rules",
    "parse_rules",
    "register_builtin_rules",
]
