"""Public API for the accessor mixins package.

Exports:
    FieldAccessorMixin: read-side `get` over composed fields.
    FieldMutatorMixin: write-side `set` extending the accessor mixin.
    FieldSerializerMixin: `values` / `to_object` snapshot and bulk set.
"""

from .accessor import (
    SLOTS_ATTR,
    TABLE_ATTR,
    AccessorBearing,
    FieldAccessorMixin,
    FieldTable,
    field_table,
    install_function,
    is_accessor_bearing,
    make_accessor,
    own_table,
    read_slot,
    seed_slot,
    write_slot,
)
from .mutator import FieldMutatorMixin, add_field, bulk_update, update_nested
from .serializer import FieldSerializerMixin, snapshot

__all__ = [
    "FieldAccessorMixin",
    "FieldMutatorMixin",
    "FieldSerializerMixin",
    "AccessorBearing",
    "FieldTable",
    "TABLE_ATTR",
    "SLOTS_ATTR",
    "is_accessor_bearing",
    "field_table",
    "own_table",
    "read_slot",
    "write_slot",
    "seed_slot",
    "make_accessor",
    "install_function",
    "add_field",
    "bulk_update",
    "update_nested",
    "snapshot",
]
