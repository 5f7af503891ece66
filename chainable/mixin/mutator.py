r"""Write side of accessor objects: lazy fields, bulk and nested updates.

Behavior:
  - `set(name, value)` installs a pass-through accessor the first time an
    unknown name is written, then writes through it.
  - `bulk_update` writes every key of a mapping through its accessor; keys
    with no accessor follow the object's unknown-field policy.
  - `update_nested` is the processor installed for composite fields: it fans
    a partial mapping out across the nested object and stores that object.

Writes are applied in key order and never rolled back: keys written before
an error stay written.

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
from typing import Any, Callable, Mapping, Type

from ..fields import Scalar, validate_field_name
from ..utils import (
    AccessorError,
    InvalidBulkUpdateError,
    InvalidNestedUpdateError,
    UnknownFieldError,
    get_type_name,
)
from .accessor import (
    FieldAccessorMixin,
    field_table,
    install_function,
    make_accessor,
    own_table,
    read_slot,
)

__all__ = [
    "FieldMutatorMixin",
    "add_field",
    "bulk_update",
    "update_nested",
]

logger = logging.getLogger(__name__)


def add_field(target: Any, name: str) -> None:
    """Install a pass-through accessor for `name` on `target` itself."""
    validate_field_name(name)
    own_table(target).fields[name] = Scalar()
    install_function(target, name, make_accessor(name))
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Added pass-through field %r to %s", name, get_type_name(target))


def bulk_update(
    target: Any,
    update: Any,
    error: Type[AccessorError] = InvalidBulkUpdateError,
) -> Any:
    """Write each key of `update` through the matching accessor of `target`.

    Raises:
        InvalidBulkUpdateError: (or `error`) if `update` is not a mapping.
        UnknownFieldError: if a key has no accessor and the policy is "raise".
    """
    if not isinstance(update, Mapping):
        raise error(
            f"Bulk updates of {get_type_name(target)} require a mapping",
            ["Pass a dict of field name to value"],
            {"expected_type": "Mapping", "actual_type": get_type_name(update)},
        )
    table = field_table(target)
    for key, value in update.items():
        if key not in table:
            if table.unknown_fields == "ignore":
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(
                        "Ignored unknown field %r on %s", key, get_type_name(target)
                    )
                continue
            raise UnknownFieldError(
                f"No accessor for field '{key}' on {get_type_name(target)}",
                [
                    f"Known fields: {', '.join(table) or '(none)'}",
                    "Use set(name, value) to add a field",
                    "Compose with unknown_fields='ignore' to skip unknown keys",
                ],
                {"field": key, "known_fields": list(table)},
            )
        getattr(target, key)(value)
    return target


def update_nested(
    owner: Any, value: Any, name: str, factory: Callable[[Any], Any]
) -> Any:
    """Apply a partial mapping to the nested object of field `name`; return it."""
    if not isinstance(value, Mapping):
        raise InvalidNestedUpdateError(
            f"Accessor Object: nested field '{name}' requires a mapping",
            [f"Write {name}({{...}}) with the nested keys to change"],
            {
                "field": name,
                "expected_type": "Mapping",
                "actual_type": get_type_name(value),
            },
        )
    nested = read_slot(owner, name, factory)
    return bulk_update(nested, value, InvalidNestedUpdateError)


# -----------------------------------------------------------------------------
# Mixin for Mutating Fields
# -----------------------------------------------------------------------------


class FieldMutatorMixin(FieldAccessorMixin):
    """Write-side convenience operations over composed fields."""

    def set(self, name: str, value: Any) -> Any:
        """Write `value` to field `name`, creating a pass-through field if needed."""
        if name not in field_table(self):
            add_field(self, name)
        return getattr(self, name)(value)
