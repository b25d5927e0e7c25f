"""Load per-field rules from YAML.

Example document:

    fields:
      email:
        required: true
        email: true
      name:
        maxLength: 40
      age:
        range: {min: 0, max: 130, message: "{display_name} looks wrong"}

Each rule key is resolved through the RuleRegistry. A value of ``true``
means "no params", ``false`` disables the rule, a mapping is passed as
params and a scalar is shorthand for the rule's main parameter.
"""

from pathlib import Path
from typing import Any

import yaml

from modelguard.validation.registry import RuleRegistry, register_builtin_rules
from modelguard.validation.types import Rule

# Rule name -> param that a scalar value is shorthand for
SHORTHAND_PARAMS = {
    "minLength": "length",
    "maxLength": "length",
    "pattern": "regex",
    "oneOf": "options",
}


def load_rules(source: str | Path) -> dict[str, list[Rule]]:
    """Load field rules from a YAML file path or a YAML string.

    Args:
        source: Path to a YAML file, or the YAML document itself

    Returns:
        Mapping of field name to its rules, in document order

    Raises:
        ValueError: If the document is malformed or names an unknown rule
    """
    if isinstance(source, Path):
        with open(source) as f:
            data = yaml.safe_load(f)
    else:
        data = yaml.safe_load(source)

    return parse_rules(data)


def parse_rules(data: Any) -> dict[str, list[Rule]]:
    """Resolve an already-parsed rules document."""
    register_builtin_rules()

    if not data:
        return {}
    if not isinstance(data, dict) or not isinstance(data.get("fields", {}), dict):
        raise ValueError("Rules document must be a mapping with a 'fields' mapping")

    result: dict[str, list[Rule]] = {}
    for field_name, rule_specs in (data.get("fields") or {}).items():
        if rule_specs is None:
            result[field_name] = []
            continue
        if not isinstance(rule_specs, dict):
            raise ValueError(
                f"Rules for field '{field_name}' must be a mapping, "
                f"got {type(rule_specs).__name__}"
            )
        result[field_name] = [
            RuleRegistry.create(rule_name, params)
            for rule_name, params in _iter_params(field_name, rule_specs)
        ]
    return result


def _iter_params(field_name: str, rule_specs: dict[str, Any]):
    for rule_name, spec in rule_specs.items():
        if spec is False:
            continue
        if spec is True or spec is None:
            yield rule_name, {}
        elif isinstance(spec, dict):
            yield rule_name, spec
        elif rule_name in SHORTHAND_PARAMS:
            yield rule_name, {SHORTHAND_PARAMS[rule_name]: spec}
        else:
            raise ValueError(
                f"Rule '{rule_name}' on field '{field_name}' needs a mapping of params"
            )
