"""Self-validating observable model.

ValidatableModel re-validates itself whenever a tracked field changes and
keeps a per-field error map:

    class Contact(ValidatableModel):
        name = tracked(rules=[Required(), MaxLength(40)])
        email = tracked(rules=[Email()])

    contact = Contact(settings=ModelSettings(validate_on_change="sync"))
    contact.subscribe_errors(lambda field_name: print(contact.get_errors(field_name)))
    contact.name = ""        # -> ["Name is required"]

Concurrency:
    - One re-entrant lock per instance serialises validation passes and
      every read of the error map, so readers never see a half-applied pass
    - The lock is re-entrant so subscribers notified during a pass may query
      the model from the same thread
    - Background passes queue on the lock; they are never cancelled and the
      last pass to finish wins
"""

import logging
import threading
from collections.abc import Iterable
from concurrent.futures import Executor, Future
from typing import Any

from modelguard.config import ModelSettings
from modelguard.executor import get_executor
from modelguard.notify.notifier import FieldCallback, Notifier, PropertyChangedModel
from modelguard.validation.engine import FieldRuleEngine
from modelguard.validation.types import HAS_ERRORS, RuleEngine, Violation

logger = logging.getLogger(__name__)


class ValidatableModel(PropertyChangedModel):
    """A model that validates itself and reports errors per field.

    Args:
        rule_engine: Evaluates the model; defaults to FieldRuleEngine, which
            reads the rules declared on tracked fields
        settings: Change-cascade behaviour; defaults to ModelSettings.from_env()
        executor: Executor for validate_async; defaults to the shared pool
        **values: Initial tracked-field values (not validated until the
            first pass)
    """

    def __init__(
        self,
        rule_engine: RuleEngine | None = None,
        settings: ModelSettings | None = None,
        executor: Executor | None = None,
        **values: Any,
    ) -> None:
        self._lock = threading.RLock()
        self._errors: dict[str, list[str]] = {}
        self.errors_changed = Notifier()
        self.rule_engine = rule_engine if rule_engine is not None else FieldRuleEngine()
        self.settings = settings if settings is not None else ModelSettings.from_env()
        self._executor = executor
        super().__init__(**values)

    # =========================================================================
    # Error queries
    # =========================================================================

    @property
    def has_errors(self) -> bool:
        """True if any field currently has errors."""
        with self._lock:
            return bool(self._errors)

    @property
    def errors(self) -> dict[str, list[str]]:
        """Snapshot of the whole error map."""
        with self._lock:
            return {name: list(messages) for name, messages in self._errors.items()}

    def get_errors(self, field_name: str | None) -> list[str] | None:
        """Return the current errors of a field.

        Returns None when ``field_name`` is None or empty, or when the field
        has no errors.
        """
        if not field_name:
            return None
        with self._lock:
            messages = self._errors.get(field_name)
            return list(messages) if messages else None

    def subscribe_errors(self, callback: FieldCallback) -> FieldCallback:
        """Subscribe to errors-changed notifications (payload: field name)."""
        return self.errors_changed.subscribe(callback)

    def unsubscribe_errors(self, callback: FieldCallback) -> None:
        """Unsubscribe from errors-changed notifications."""
        self.errors_changed.unsubscribe(callback)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self, field_name: str | None = None) -> None:
        """Run one validation pass and notify fields whose errors changed.

        The rule engine always evaluates the whole model. When ``field_name``
        is given, only that field's entry is reconciled and notified; other
        fields are left as they are until an unfiltered pass.

        If the rule engine raises, the exception propagates and the error map
        keeps its pre-pass state. If a subscriber raises, every remaining
        notification is still sent and the first exception is re-raised at
        the end of the pass.
        """
        with self._lock:
            had_errors = bool(self._errors)
            new_errors = self._group(self.rule_engine.evaluate(self))

            changed: list[str] = []

            # Clearing pass: fields that no longer have errors
            for name in list(self._errors):
                if field_name is not None and name != field_name:
                    continue
                if name not in new_errors:
                    del self._errors[name]
                    changed.append(name)

            # Update pass: replace each field's messages wholesale
            for name, messages in new_errors.items():
                if field_name is not None and name != field_name:
                    continue
                if self._errors.get(name) == messages:
                    continue
                self._errors[name] = messages
                changed.append(name)

            logger.debug(
                "Validated %s (filter=%s): %d field(s) with errors, changed: %s",
                type(self).__name__,
                field_name,
                len(self._errors),
                changed,
            )

            # The map is fully reconciled before anyone is told. A failing
            # subscriber must not cost the remaining fields their notification.
            first_error: Exception | None = None
            announced_has_errors = had_errors
            for name in changed:
                try:
                    self.on_errors_changed(name)
                except Exception as e:
                    first_error = first_error or e
                if self.has_errors != announced_has_errors:
                    announced_has_errors = self.has_errors
                    try:
                        self.on_property_changed(HAS_ERRORS)
                    except Exception as e:
                        first_error = first_error or e
            if first_error is not None:
                raise first_error

    def validate_async(self, field_name: str | None = None) -> Future:
        """Schedule validate(field_name) on the executor.

        The returned future may be waited on (``future.result()``, or
        ``await asyncio.wrap_future(future)``) but does not have to be.
        Every failed pass is logged at ERROR, whether or not the caller also
        handles the exception from the future.
        """
        executor = self._executor or get_executor(self.settings.max_workers)
        future = executor.submit(self.validate, field_name)
        future.add_done_callback(self._log_failed_pass)
        return future

    def _log_failed_pass(self, future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(
                "Background validation of %s failed: %s",
                type(self).__name__,
                exc,
                exc_info=exc,
            )

    @staticmethod
    def _group(violations: Iterable[Violation]) -> dict[str, list[str]]:
        """Group violation messages by field, in evaluation order."""
        grouped: dict[str, list[str]] = {}
        for violation in violations:
            if not violation.field:
                # Entity-level violations have no field to report on
                logger.debug("Ignoring violation without field: %s", violation.message)
                continue
            grouped.setdefault(violation.field, []).append(violation.message)
        return grouped

    # =========================================================================
    # Notifications
    # =========================================================================

    def on_errors_changed(self, name: str) -> None:
        """Announce that the errors of ``name`` changed."""
        self.errors_changed.announce(name)

    def on_property_changed(self, name: str) -> None:
        """Announce the change, then re-validate (except for has_errors)."""
        super().on_property_changed(name)
        if name == HAS_ERRORS:
            return

        target = None if self.settings.raise_for_all else name
        mode = self.settings.validate_on_change
        if mode == "sync":
            self.validate(target)
        elif mode == "async":
            self.validate_async(target)

    def close(self) -> None:
        """Drop all subscribers."""
        self.property_changed.clear()
        self.errors_changed.clear()

