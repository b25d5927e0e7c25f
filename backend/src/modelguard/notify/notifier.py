"""Property-changed notification.

Free-threading safety:
    - Notifier uses a Lock to protect its subscriber collection
    - announce() snapshots the subscribers and dispatches outside the lock,
      so callbacks may subscribe or unsubscribe while being invoked
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from modelguard.notify.fields import tracked_fields

logger = logging.getLogger(__name__)

# Callback signature: (field_name) -> None
FieldCallback = Callable[[str], Any]


class Notifier:
    """Synchronous broadcast of field names to subscribers.

    Callers must not depend on the order in which subscribers are invoked.

    Example:
        notifier = Notifier()

        @notifier.subscribe
        def on_change(field_name: str) -> None:
            print(field_name, "changed")

        notifier.announce("email")
    """

    __slots__ = ("_lock", "_subscribers")

    def __init__(self) -> None:
        # dict used as an insertion-ordered set
        self._subscribers: dict[FieldCallback, None] = {}
        self._lock = threading.Lock()

    def subscribe(self, callback: FieldCallback) -> FieldCallback:
        """Register a callback. Registering it again is a no-op."""
        with self._lock:
            self._subscribers[callback] = None
        return callback

    def unsubscribe(self, callback: FieldCallback) -> None:
        """Remove a callback. Unknown callbacks are ignored."""
        with self._lock:
            self._subscribers.pop(callback, None)

    def announce(self, field_name: str) -> None:
        """Invoke every current subscriber with ``field_name``.

        A failing subscriber is logged and does not stop the others; once
        every subscriber has run, the first exception is re-raised.
        """
        with self._lock:
            subscribers = list(self._subscribers)

        first_error: Exception | None = None
        for callback in subscribers:
            try:
                callback(field_name)
            except Exception as e:
                logger.exception(
                    "Subscriber %r failed for field '%s'", callback, field_name
                )
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    def clear(self) -> None:
        """Drop all subscribers."""
        with self._lock:
            self._subscribers.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)


class PropertyChangedModel:
    """Base model that announces field changes.

    Tracked fields (see modelguard.notify.fields.tracked) call
    on_property_changed() after every mutation. Subclasses override
    on_property_changed() to react to changes; the base implementation only
    announces.
    """

    def __init__(self, **values: Any) -> None:
        self.property_changed = Notifier()

        fields = tracked_fields(self)
        for name, value in values.items():
            if name not in fields:
                raise TypeError(
                    f"{type(self).__name__}() got an unexpected field '{name}'"
                )
            # Initial values do not count as changes
            fields[name].set_silently(self, value)

    def on_property_changed(self, name: str) -> None:
        """Announce that ``name`` changed."""
        self.property_changed.announce(name)

    def subscribe(self, callback: FieldCallback) -> FieldCallback:
        """Subscribe to property-changed notifications."""
        return self.property_changed.subscribe(callback)

    def unsubscribe(self, callback: FieldCallback) -> None:
        """Unsubscribe from property-changed notifications."""
        self.property_changed.unsubscribe(callback)
