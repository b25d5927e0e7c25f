"""Tracked field descriptor.

Declares observable fields on a PropertyChangedModel:

    class Contact(ValidatableModel):
        name = tracked(rules=[Required(), MaxLength(40)])
        email = tracked(rules=[Email()], display_name="E-mail")

Assigning a different value stores it and calls
``on_property_changed(<field name>)`` on the owning model.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from modelguard.validation.types import Rule

_MISSING = object()


class TrackedField:
    """Data descriptor backing a tracked field.

    Attributes:
        name: Attribute name on the owning class (set by __set_name__)
        default: Value returned before the field is first assigned
        rules: Per-field rules evaluated by FieldRuleEngine (never by the
            descriptor itself)
        display_name: Human-readable name used in rule messages
    """

    def __init__(
        self,
        default: Any = None,
        rules: Iterable[Rule] = (),
        display_name: str | None = None,
    ):
        self.default = default
        self.rules: tuple[Rule, ...] = tuple(rules)
        self._display_name = display_name
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @property
    def display_name(self) -> str:
        if self._display_name:
            return self._display_name
        return self.name.replace("_", " ").capitalize()

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        value = instance.__dict__.get(self.name, _MISSING)
        return self.default if value is _MISSING else value

    def __set__(self, instance: Any, value: Any) -> None:
        old = self.__get__(instance)
        instance.__dict__[self.name] = value
        if old is not value and old != value:
            instance.on_property_changed(self.name)

    def set_silently(self, instance: Any, value: Any) -> None:
        """Store a value without announcing a change."""
        instance.__dict__[self.name] = value

    def __repr__(self) -> str:
        return f"tracked({self.name!r}, rules={list(self.rules)!r})"


def tracked(
    default: Any = None,
    rules: Iterable[Rule] = (),
    display_name: str | None = None,
) -> Any:
    """Declare a tracked field. See TrackedField."""
    return TrackedField(default=default, rules=rules, display_name=display_name)


def tracked_fields(model: Any) -> dict[str, TrackedField]:
    """List tracked fields of a model class or instance in definition order.

    Inherited fields come first; a subclass redefining a field replaces it
    in place.
    """
    cls = model if isinstance(model, type) else type(model)
    fields: dict[str, TrackedField] = {}
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, TrackedField):
                fields[name] = attr
    return fields
