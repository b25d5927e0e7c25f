"""Tests for the rule registry and the YAML rule loader."""

import textwrap
from pathlib import Path

import pytest

from modelguard.validation import (
    Email,
    FieldRuleEngine,
    MaxLength,
    OneOf,
    Pattern,
    Range,
    Required,
    RuleRegistry,
    load_rules,
    parse_rules,
    register_builtin_rules,
)


@pytest.fixture(autouse=True)
def setup_registry():
    """Register built-in rules before each test."""
    RuleRegistry.clear()
    register_builtin_rules()
    yield
    RuleRegistry.clear()


# =============================================================================
# RuleRegistry tests
# =============================================================================


class TestRuleRegistry:
    def test_builtins_registered(self):
        assert RuleRegistry.list_registered() == [
            "email",
            "maxLength",
            "minLength",
            "oneOf",
            "pattern",
            "range",
            "required",
        ]

    def test_create(self):
        assert RuleRegistry.create("maxLength", {"length": 5}) == MaxLength(5)
        assert RuleRegistry.create("required") == Required()

    def test_create_with_message(self):
        rule = RuleRegistry.create("required", {"message": "Need {display_name}"})
        assert rule.check(None, None, "a name") == "Need a name"

    def test_create_missing_param(self):
        with pytest.raises(ValueError, match="Invalid params for rule 'maxLength'"):
            RuleRegistry.create("maxLength", {})

    def test_get_unknown_raises(self):
        with pytest.raises(ValueError, match="not registered"):
            RuleRegistry.get("nonExistent")

    def test_register_idempotent(self):
        RuleRegistry.register("zip", lambda params: Pattern(r"^\d{5}$"))
        RuleRegistry.register("zip", lambda params: Required())  # should be no-op
        assert RuleRegistry.create("zip") == Pattern(r"^\d{5}$")

    def test_is_registered(self):
        assert not RuleRegistry.is_registered("zip")
        RuleRegistry.register("zip", lambda params: Pattern(r"^\d{5}$"))
        assert RuleRegistry.is_registered("zip")

    def test_clear(self):
        RuleRegistry.clear()
        assert RuleRegistry.list_registered() == []


# =============================================================================
# Loader tests
# =============================================================================


CONTACT_RULES = textwrap.dedent(
    """
    fields:
      name:
        required: true
        maxLength: 40
      email:
        required: false
        email: true
      age:
        range: {min: 0, max: 130, message: "{display_name} looks wrong"}
      status:
        oneOf: [active, inactive]
      notes:
    """
)


class TestLoadRules:
    def test_load_from_string(self):
        rules = load_rules(CONTACT_RULES)
        assert rules["name"] == [Required(), MaxLength(40)]
        assert rules["email"] == [Email()]
        assert rules["age"] == [Range(min=0, max=130, message="{display_name} looks wrong")]
        assert rules["status"] == [OneOf(["active", "inactive"])]
        assert rules["notes"] == []

    def test_load_from_path(self, tmp_path: Path):
        path = tmp_path / "contact.yaml"
        path.write_text(CONTACT_RULES)
        assert list(load_rules(path)) == ["name", "email", "age", "status", "notes"]

    def test_empty_document(self):
        assert load_rules("") == {}

    def test_pattern_shorthand(self):
        rules = parse_rules({"fields": {"zip": {"pattern": r"^\d{5}$"}}})
        assert rules["zip"] == [Pattern(r"^\d{5}$")]

    def test_registers_builtins_itself(self):
        RuleRegistry.clear()
        assert parse_rules({"fields": {"name": {"required": True}}}) == {"name": [Required()]}

    def test_unknown_rule(self):
        with pytest.raises(ValueError, match="'colour' is not registered"):
            parse_rules({"fields": {"name": {"colour": True}}})

    def test_scalar_without_shorthand(self):
        with pytest.raises(ValueError, match="needs a mapping of params"):
            parse_rules({"fields": {"age": {"range": 5}}})

    def test_field_rules_must_be_mapping(self):
        with pytest.raises(ValueError, match="must be a mapping"):
            parse_rules({"fields": {"name": ["required"]}})

    def test_document_must_be_mapping(self):
        with pytest.raises(ValueError, match="'fields' mapping"):
            parse_rules(["name"])

    def test_loaded_rules_feed_the_engine(self):
        from modelguard.notify import PropertyChangedModel, tracked

        class Contact(PropertyChangedModel):
            name = tracked()
            age = tracked()

        engine = FieldRuleEngine(extra_rules=load_rules(CONTACT_RULES))
        violations = list(engine.evaluate(Contact(age=200)))
        assert [(v.field, v.message) for v in violations] == [
            ("name", "Name is required"),
            ("age", "Age looks wrong"),
        ]
