"""Rule registry for modelguard.

Provides registration and lookup of named rule factories, so rules can be
declared by name in YAML (see modelguard.validation.loader) as well as
attached directly to tracked fields.
"""

from collections.abc import Callable
from typing import Any

from modelguard.validation.rules import (
    Email,
    MaxLength,
    MinLength,
    OneOf,
    Pattern,
    Range,
    Required,
)
from modelguard.validation.types import Rule

# Factory signature: (params) -> Rule. Params come straight from YAML.
RuleFactory = Callable[[dict[str, Any]], Rule]


class RuleRegistry:
    """Registry for rule factories.

    Rules must be registered before they can be referenced by name.
    Built-in rules are registered by register_builtin_rules(); applications
    add their own at startup.

    Example:
        RuleRegistry.register("postcode", lambda params: Pattern(r"^\\d{5}$"))
        rule = RuleRegistry.create("postcode", {})
    """

    _factories: dict[str, RuleFactory] = {}

    @classmethod
    def register(cls, name: str, factory: RuleFactory) -> None:
        """Register a rule factory by name.

        Idempotent - re-registering the same name is a no-op.

        Args:
            name: Unique identifier for the rule (e.g., "maxLength")
            factory: Function that takes the rule params and returns a Rule
        """
        if name in cls._factories:
            return  # Already registered, no-op
        cls._factories[name] = factory

    @classmethod
    def get(cls, name: str) -> RuleFactory:
        """Get a registered rule factory by name.

        Raises:
            ValueError: If rule is not registered
        """
        if name not in cls._factories:
            raise ValueError(
                f"Rule '{name}' is not registered. "
                "Available rules: " + ", ".join(cls.list_registered())
            )
        return cls._factories[name]

    @classmethod
    def create(cls, name: str, params: dict[str, Any] | None = None) -> Rule:
        """Create a rule instance from its name and params."""
        factory = cls.get(name)
        try:
            return factory(params or {})
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid params for rule '{name}': {e}") from e

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a rule is registered."""
        return name in cls._factories

    @classmethod
    def list_registered(cls) -> list[str]:
        """List all registered rule names."""
        return sorted(cls._factories.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._factories.clear()


def _with_message(params: dict[str, Any]) -> dict[str, Any]:
    return {"message": params["message"]} if params.get("message") else {}


def _required(params: dict[str, Any]) -> Rule:
    return Required(**_with_message(params))


def _min_length(params: dict[str, Any]) -> Rule:
    return MinLength(int(params["length"]), **_with_message(params))


def _max_length(params: dict[str, Any]) -> Rule:
    return MaxLength(int(params["length"]), **_with_message(params))


def _range(params: dict[str, Any]) -> Rule:
    return Range(min=params.get("min"), max=params.get("max"), **_with_message(params))


def _pattern(params: dict[str, Any]) -> Rule:
    return Pattern(params["regex"], **_with_message(params))


def _email(params: dict[str, Any]) -> Rule:
    return Email(**_with_message(params))


def _one_of(params: dict[str, Any]) -> Rule:
    return OneOf(params["options"], **_with_message(params))


def register_builtin_rules() -> None:
    """Register the canned rules. Safe to call more than once."""
    RuleRegistry.register("required", _required)
    RuleRegistry.register("minLength", _min_length)
    RuleRegistry.register("maxLength", _max_length)
    RuleRegistry.register("range", _range)
    RuleRegistry.register("pattern", _pattern)
    RuleRegistry.register("email", _email)
    RuleRegistry.register("oneOf", _one_of)
