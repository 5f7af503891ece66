r"""Read side of accessor objects: field tables, slots and getters.

This module implements the storage model shared by every accessor object:

  - A `FieldTable` (ordered name -> field variant) lives on the object, or on
    its class when accessors were composed onto a class.
  - Written values live in a per-instance slot mapping, never in attributes
    named after the fields.
  - `make_accessor` synthesizes the combined getter/setter for one field.
  - `FieldAccessorMixin` provides the read-only `get` operation.

Simple inheritance diagram (Doxygen dot):
\dot
digraph AccessorPattern {
    rankdir=LR;
    node [shape=rectangle];
    "FieldAccessorMixin" -> "FieldMutatorMixin";
}
\enddot
"""

from __future__ import annotations

import logging
from types import MethodType
from typing import Any, Callable, Dict, Iterator, Optional

from typing_extensions import Protocol, runtime_checkable

from ..fields import UNSET, FieldSpec
from ..settings import UnknownFieldPolicy, get_settings

__all__ = [
    "TABLE_ATTR",
    "SLOTS_ATTR",
    "FieldTable",
    "AccessorBearing",
    "is_accessor_bearing",
    "field_table",
    "own_table",
    "read_slot",
    "write_slot",
    "seed_slot",
    "make_accessor",
    "install_function",
    "FieldAccessorMixin",
]

logger = logging.getLogger(__name__)

TABLE_ATTR = "__accessor_table__"
SLOTS_ATTR = "__accessor_slots__"

Apply = Callable[[Any, Any, str], Any]
Factory = Callable[[Any], Any]


# -----------------------------------------------------------------------------
# Field Table
# -----------------------------------------------------------------------------


class FieldTable:
    """Ordered registry of the fields composed onto one object or class.

    Attributes:
        fields: Field name -> resolved variant, in declaration order.
        defaults: Initial values shared by instances of a composed class.
        unknown_fields: Policy for bulk writes naming unknown fields.
    """

    __slots__ = ("fields", "defaults", "unknown_fields")

    def __init__(
        self,
        fields: Optional[Dict[str, FieldSpec]] = None,
        defaults: Optional[Dict[str, Any]] = None,
        unknown_fields: Optional[UnknownFieldPolicy] = None,
    ):
        self.fields: Dict[str, FieldSpec] = dict(fields or {})
        self.defaults: Dict[str, Any] = dict(defaults or {})
        self.unknown_fields: UnknownFieldPolicy = (
            unknown_fields or get_settings().unknown_fields
        )

    def copy(self) -> "FieldTable":
        return FieldTable(self.fields, self.defaults, self.unknown_fields)

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __repr__(self) -> str:
        return f"FieldTable({list(self.fields)!r}, unknown_fields={self.unknown_fields!r})"


@runtime_checkable
class AccessorBearing(Protocol):
    """Capability shared by every object processed by the composer."""

    __accessor_table__: FieldTable

    def get(self, name: str, fallback: Any = None) -> Any: ...

    def set(self, name: str, value: Any) -> Any: ...

    def values(self, *args: Any) -> Any: ...


def is_accessor_bearing(obj: Any) -> bool:
    """Return True if `obj` is an instance carrying composed accessors."""
    return (
        not isinstance(obj, type)
        and isinstance(obj, AccessorBearing)
        and isinstance(getattr(obj, TABLE_ATTR), FieldTable)
    )


def field_table(obj: Any) -> FieldTable:
    """Return the table visible from `obj`, or an empty detached one."""
    table = getattr(obj, TABLE_ATTR, None)
    return table if isinstance(table, FieldTable) else FieldTable()


def own_table(
    target: Any, unknown_fields: Optional[UnknownFieldPolicy] = None
) -> FieldTable:
    """Return the table owned by `target` itself, creating it if needed.

    A table inherited from a class is copied first, so extending it never
    mutates the class (or base class) it came from.
    """
    table = vars(target).get(TABLE_ATTR)
    if not isinstance(table, FieldTable):
        inherited = getattr(target, TABLE_ATTR, None)
        if isinstance(inherited, FieldTable):
            table = inherited.copy()
        else:
            table = FieldTable(unknown_fields=unknown_fields)
        setattr(target, TABLE_ATTR, table)
    if unknown_fields is not None:
        table.unknown_fields = unknown_fields
    return table


# -----------------------------------------------------------------------------
# Per-instance Slots
# -----------------------------------------------------------------------------


def _slots(owner: Any) -> Dict[str, Any]:
    state = vars(owner)
    slots = state.get(SLOTS_ATTR)
    if slots is None:
        slots = state[SLOTS_ATTR] = {}
    return slots


def read_slot(owner: Any, name: str, factory: Optional[Factory] = None) -> Any:
    """Return the value stored for `name` on `owner`.

    Lookup order: the owner's own slot, the class-level default, a lazily
    built value from `factory` (stored on first access), else None.
    """
    slots = vars(owner).get(SLOTS_ATTR)
    if slots is not None and name in slots:
        return slots[name]
    defaults = field_table(owner).defaults
    if name in defaults:
        return defaults[name]
    if factory is not None:
        value = _slots(owner)[name] = factory(owner)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Built %r lazily for %s", name, type(owner).__name__)
        return value
    return None


def write_slot(owner: Any, name: str, value: Any) -> None:
    """Store `value` for `name` in the owner's own slot mapping."""
    _slots(owner)[name] = value


def seed_slot(owner: Any, name: str, value: Any) -> None:
    """Store an initial value unless it is `UNSET`."""
    if value is not UNSET:
        write_slot(owner, name, value)


# -----------------------------------------------------------------------------
# Accessor Synthesis
# -----------------------------------------------------------------------------


def make_accessor(
    name: str, apply: Optional[Apply] = None, factory: Optional[Factory] = None
) -> Callable[..., Any]:
    """Build the combined getter/setter for field `name`.

    Called with no argument the accessor returns the stored value. Called
    with exactly one argument (None included) it stores ``apply(owner,
    value, name)``, or the value itself when `apply` is None, and returns
    the owner so that writes chain.
    """

    def accessor(self: Any, *args: Any) -> Any:
        if not args:
            return read_slot(self, name, factory)
        if len(args) > 1:
            raise TypeError(
                f"accessor '{name}' takes at most 1 argument ({len(args)} given)"
            )
        value = args[0]
        write_slot(self, name, value if apply is None else apply(self, value, name))
        return self

    accessor.__name__ = name
    accessor.__qualname__ = f"accessor.{name}"
    return accessor


def install_function(target: Any, name: str, function: Callable[..., Any]) -> None:
    """Attach `function` to `target`: as a method on a class, bound otherwise."""
    if isinstance(target, type):
        setattr(target, name, function)
    else:
        setattr(target, name, MethodType(function, target))


# -----------------------------------------------------------------------------
# Base Mixin for Reading Fields
# -----------------------------------------------------------------------------


class FieldAccessorMixin:
    """Read-only convenience operations over composed fields."""

    def get(self, name: str, fallback: Any = None) -> Any:
        """Return the value of field `name`, or `fallback` if it has no accessor."""
        if name not in field_table(self):
            return fallback
        return getattr(self, name)()
