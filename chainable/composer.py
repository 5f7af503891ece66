r"""Accessor Composer.

`compose` synthesizes combined getter/setter functions ("accessors") for a
declarative field specification, either onto an existing object (mixin
mode) or onto a freshly allocated `AccessorObject` (construction mode):

    >>> person = compose({"name": VALUE, "age": [VALUE, 0]})
    >>> person.name("Ada").age(36).values()
    {'name': 'Ada', 'age': 36}

Accessors may also be composed onto a class; every instance then gets its
own values while sharing the class-level initial values:

    >>> class Point:
    ...     pass
    >>> _ = compose(Point, {"x": 0, "y": 0})
    >>> Point().x(3).values()
    {'x': 3, 'y': 0}

\dot
digraph Composer {
    rankdir=LR;
    node [shape=rectangle];
    "FieldAccessorMixin" -> "FieldMutatorMixin";
    "FieldMutatorMixin" -> "AccessorObject";
    "FieldSerializerMixin" -> "AccessorObject";
}
\enddot
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from collections.abc import Set as AbstractSet
from functools import partial
from typing import Any, Dict, Optional

from .fields import UNSET, FieldSpec, Nested, adapt_transformer, resolve_specification
from .mixin import (
    FieldAccessorMixin,
    FieldMutatorMixin,
    FieldSerializerMixin,
    field_table,
    install_function,
    make_accessor,
    own_table,
    seed_slot,
    update_nested,
    write_slot,
)
from .settings import resolve_unknown_fields
from .utils import InvalidRecipientError, get_type_name, log_debug

__all__ = [
    "AccessorObject",
    "compose",
    "create",
    "mixin",
]

logger = logging.getLogger(__name__)

_MISSING: Any = object()

_OPERATIONS = {
    "get": FieldAccessorMixin.get,
    "set": FieldMutatorMixin.set,
    "values": FieldSerializerMixin.values,
    "to_object": FieldSerializerMixin.to_object,
}


class AccessorObject(FieldSerializerMixin, FieldMutatorMixin):
    """Plain object allocated by the composer in construction mode."""

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value!r}" for name, value in self.values().items())
        return f"{type(self).__name__}({fields})"


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------


def _check_recipient(recipient: Any) -> None:
    """Raise `InvalidRecipientError` unless `recipient` can hold accessors."""
    if isinstance(recipient, type):
        rejected = (
            recipient.__module__ == "builtins"
            or issubclass(recipient, (Sequence, AbstractSet, Mapping))
            or getattr(recipient, "__dictoffset__", 1) == 0
        )
    else:
        rejected = isinstance(
            recipient, (str, bytes, bytearray, Sequence, AbstractSet, Mapping)
        ) or not hasattr(recipient, "__dict__")
    if rejected:
        raise InvalidRecipientError(
            'Accessor Object: "recipient" must be of type "Object"',
            [
                "Pass an instance or a class that accepts new attributes",
                "Omit the recipient to allocate a fresh AccessorObject",
            ],
            {
                "expected_type": "object with attributes",
                "actual_type": get_type_name(recipient),
            },
        )


# -----------------------------------------------------------------------------
# Installation
# -----------------------------------------------------------------------------


def _build_nested(spec: Nested, owner: Any) -> Any:
    return compose(spec.fields, unknown_fields=field_table(owner).unknown_fields)


def _install_field(recipient: Any, name: str, spec: FieldSpec) -> None:
    prototype = isinstance(recipient, type)
    table = own_table(recipient)

    if isinstance(spec, Nested):
        factory = partial(_build_nested, spec)
        accessor = make_accessor(name, partial(update_nested, factory=factory), factory)
    else:
        factory = None
        accessor = make_accessor(name, adapt_transformer(getattr(spec, "function", None)))

    install_function(recipient, name, accessor)
    table.fields[name] = spec
    table.defaults.pop(name, None)

    if prototype:
        if factory is None and spec.initial is not UNSET:
            table.defaults[name] = spec.initial
    elif factory is not None:
        write_slot(recipient, name, factory(recipient))
    else:
        seed_slot(recipient, name, spec.initial)


def _install_operations(recipient: Any) -> None:
    """Attach `get`, `set`, `values` and `to_object` unless inherited already."""
    owner_type = recipient if isinstance(recipient, type) else type(recipient)
    if issubclass(owner_type, FieldSerializerMixin) and issubclass(
        owner_type, FieldMutatorMixin
    ):
        return
    for name, function in _OPERATIONS.items():
        install_function(recipient, name, function)


# -----------------------------------------------------------------------------
# Entry Points
# -----------------------------------------------------------------------------


@log_debug
def compose(
    recipient: Any = None,
    specification: Any = _MISSING,
    *,
    unknown_fields: Optional[str] = None,
) -> Any:
    """Install accessors for `specification` on `recipient` and return it.

    With a single positional argument, that argument is the specification
    and a fresh `AccessorObject` is allocated (construction mode). A None
    recipient means the same.

    Parameters:
        recipient: Object or class to receive the accessors.
        specification: Mapping of field name to declaration; see `chainable.fields`.
        unknown_fields: "raise" or "ignore"; how bulk writes treat keys with
            no accessor. Defaults to the configured setting.

    Returns:
        The recipient, or the newly allocated object.

    Raises:
        InvalidRecipientError: if `recipient` cannot hold attributes.
        InvalidSpecificationError: if `specification` is malformed.

    Both checks happen before anything is installed.
    """
    if specification is _MISSING:
        recipient, specification = None, recipient
    if recipient is not None:
        _check_recipient(recipient)
    fields: Dict[str, FieldSpec] = resolve_specification(
        {} if specification is None else specification
    )
    policy = None if unknown_fields is None else resolve_unknown_fields(unknown_fields)

    if recipient is None:
        recipient = AccessorObject()
    own_table(recipient, policy)
    for name, spec in fields.items():
        _install_field(recipient, name, spec)
    _install_operations(recipient)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Composed %d field(s) onto %s: %s",
            len(fields),
            get_type_name(recipient),
            ", ".join(fields),
        )
    return recipient


def create(specification: Any = None, **options: Any) -> AccessorObject:
    """Construction mode: allocate an `AccessorObject` with accessors for `specification`."""
    return compose(None, specification, **options)


def mixin(recipient: Any, specification: Any = None, **options: Any) -> Any:
    """Mixin mode: install accessors on `recipient` in place and return it.

    Unlike `compose`, the recipient is mandatory; None is rejected.
    """
    if recipient is None:
        _check_recipient(recipient)
    return compose(recipient, specification, **options)
