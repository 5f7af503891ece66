from ._version import __version__
from .composer import AccessorObject, compose, create, mixin
from .fields import (
    RESERVED_NAMES,
    UNSET,
    VALUE,
    Nested,
    Scalar,
    Transformer,
    TransformerWithInitial,
    chain,
    coerce,
    typed,
    with_owner,
)
from .mixin import AccessorBearing, FieldTable, is_accessor_bearing
from .settings import ComposerSettings, LoggingSettings, get_settings, reset_settings
from .utils import (
    AccessorError,
    CoercionError,
    InvalidBulkUpdateError,
    InvalidNestedUpdateError,
    InvalidRecipientError,
    InvalidSpecificationError,
    UnknownFieldError,
)

__all__ = [
    "compose",
    "create",
    "mixin",
    "is_accessor_bearing",
    "AccessorObject",
    "AccessorBearing",
    "FieldTable",
    "VALUE",
    "UNSET",
    "RESERVED_NAMES",
    "Transformer",
    "TransformerWithInitial",
    "Nested",
    "Scalar",
    "with_owner",
    "typed",
    "coerce",
    "chain",
    "ComposerSettings",
    "LoggingSettings",
    "get_settings",
    "reset_settings",
    "AccessorError",
    "InvalidRecipientError",
    "InvalidSpecificationError",
    "InvalidNestedUpdateError",
    "InvalidBulkUpdateError",
    "UnknownFieldError",
    "CoercionError",
    "__version__",
]
