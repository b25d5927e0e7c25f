"""Property-changed notification for modelguard models.

Usage:
    from modelguard.notify import PropertyChangedModel, tracked

    class Contact(PropertyChangedModel):
        name = tracked()

    contact = Contact()
    contact.subscribe(lambda field_name: print(field_name, "changed"))
    contact.name = "Ada"
"""

from modelguard.notify.fields import TrackedField, tracked, tracked_fields
from modelguard.notify.notifier import FieldCallback, Notifier, PropertyChangedModel

__all__ = [
    "FieldCallback",
    "Notifier",
    "PropertyChangedModel",
    "TrackedField",
    "tracked",
    "tracked_fields",
]
