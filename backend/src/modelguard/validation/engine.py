"""Rule engines for modelguard.

FieldRuleEngine evaluates the rules declared on tracked fields (plus any
rules supplied separately, e.g. loaded from YAML) and then the entity's own
object-level rules, if it defines ``validate_model()``.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from modelguard.notify.fields import tracked_fields
from modelguard.validation.rules import Required
from modelguard.validation.types import Rule, RuleEngine, Violation


class FieldRuleEngine:
    """Evaluates per-field rules in field definition order.

    All failing rules of a field are reported, except that a failing
    Required stops further checks on that field (the other rules would only
    restate that the value is missing).

    Args:
        extra_rules: Additional rules keyed by field name, appended after the
            rules declared on the field. Keys that are not tracked fields are
            evaluated against ``getattr(entity, name, None)``.
    """

    def __init__(self, extra_rules: Mapping[str, Iterable[Rule]] | None = None):
        self.extra_rules: dict[str, tuple[Rule, ...]] = {
            name: tuple(rules) for name, rules in (extra_rules or {}).items()
        }

    def evaluate(self, entity: Any) -> Iterator[Violation]:
        fields = tracked_fields(entity)

        for name, tracked_field in fields.items():
            rules = tracked_field.rules + self.extra_rules.get(name, ())
            value = getattr(entity, name)
            yield from self._check_field(
                name, tracked_field.display_name, value, rules, entity
            )

        for name, rules in self.extra_rules.items():
            if name in fields:
                continue
            display_name = name.replace("_", " ").capitalize()
            value = getattr(entity, name, None)
            yield from self._check_field(name, display_name, value, rules, entity)

        # Object-level rules
        validate_model = getattr(entity, "validate_model", None)
        if callable(validate_model):
            yield from validate_model() or ()

    def _check_field(
        self,
        name: str,
        display_name: str,
        value: Any,
        rules: Iterable[Rule],
        entity: Any,
    ) -> Iterator[Violation]:
        for rule in rules:
            message = rule.check(value, entity, display_name)
            if message is None:
                continue
            yield Violation(field=name, message=message, code=rule.code)
            if isinstance(rule, Required):
                return


class CompositeRuleEngine:
    """Concatenates the results of several engines, in order."""

    def __init__(self, *engines: RuleEngine):
        self.engines = engines

    def evaluate(self, entity: Any) -> Iterator[Violation]:
        for engine in self.engines:
            yield from engine.evaluate(entity)
