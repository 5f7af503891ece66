"""Snapshot and bulk-set operation of accessor objects."""

from __future__ import annotations

from typing import Any, Dict

from .accessor import field_table, is_accessor_bearing
from .mutator import bulk_update

__all__ = [
    "FieldSerializerMixin",
    "snapshot",
]


def snapshot(target: Any) -> Dict[str, Any]:
    """Return a new dict of every field's value, recursing into nested objects."""
    result: Dict[str, Any] = {}
    for name in field_table(target):
        value = getattr(target, name)()
        result[name] = snapshot(value) if is_accessor_bearing(value) else value
    return result


class FieldSerializerMixin:
    """Dual-purpose `values` / `to_object` operation."""

    def values(self, *args: Any) -> Any:
        """Return a snapshot dict, or bulk set from a mapping and return self.

        Raises:
            InvalidBulkUpdateError: if the argument is not a mapping.
            UnknownFieldError: if a key has no accessor and the policy is "raise".
        """
        if not args:
            return snapshot(self)
        if len(args) > 1:
            raise TypeError(f"values() takes at most 1 argument ({len(args)} given)")
        return bulk_update(self, args[0])

    def to_object(self, *args: Any) -> Any:
        """Alias of `values`."""
        return self.values(*args)
