"""Exceptions and helpers shared by the composer and its mixins.

Exceptions:
    AccessorError: Base class carrying `suggestions` and `context` metadata.
    InvalidRecipientError: Raised when a recipient cannot hold accessors.
    InvalidSpecificationError: Raised for malformed field specifications.
    InvalidNestedUpdateError: Raised when a composite field gets a non-mapping.
    InvalidBulkUpdateError: Raised when a bulk write gets a non-mapping.
    UnknownFieldError: Raised when a bulk write names a field with no accessor.
    CoercionError: Raised when a transformer rejects or cannot convert a value.

Helpers:
    get_type_name(obj): Return a human-readable type name.
    get_func_name(func): Return a human-readable callable name.
    log_debug(func): Trace calls of `func` at DEBUG level.
    configure_logging(settings): Set the package logger level.
"""

import logging
from functools import partial, partialmethod, wraps
from inspect import isclass
from typing import Any, Callable, Dict, List, Optional, TypeVar

from typing_extensions import ParamSpec

from .settings import LoggingSettings

__all__ = [
    "AccessorError",
    "InvalidRecipientError",
    "InvalidSpecificationError",
    "InvalidNestedUpdateError",
    "InvalidBulkUpdateError",
    "UnknownFieldError",
    "CoercionError",
    "get_type_name",
    "get_func_name",
    "log_debug",
    "configure_logging",
]

P = ParamSpec("P")
"""Type variable for the parameters."""
R = TypeVar("R")
"""Type variable for the result value."""

# -----------------------------------------------------------------------------
# Logging Configuration
# -----------------------------------------------------------------------------

logger = logging.getLogger(__name__)


def configure_logging(settings: Optional[LoggingSettings] = None) -> logging.Logger:
    """Apply the configured level to the package logger and return it.

    Only the logging variables are read, so importing the package never
    depends on the other settings being valid.
    """
    settings = settings or LoggingSettings.from_env()
    package_logger = logging.getLogger(__package__)
    package_logger.setLevel(settings.log_level)
    if not any(isinstance(h, logging.NullHandler) for h in package_logger.handlers):
        package_logger.addHandler(logging.NullHandler())
    return package_logger


configure_logging()


def log_debug(func: Callable[P, R]) -> Callable[P, R]:
    """
    Decorator to log function calls in debug mode.

    If the environment variable 'CHAINABLE_QUIET' is set to 'TRUE',
    the function is returned undecorated.
    """
    if LoggingSettings.from_env().quiet:
        return func

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        if logger.isEnabledFor(logging.DEBUG):
            arg_str = ", ".join(repr(a) for a in args)
            kwarg_str = ", ".join(f"{k}={v!r}" for k, v in kwargs.items())
            all_args = ", ".join(filter(None, [arg_str, kwarg_str]))
            logger.debug("%s(%s)", get_func_name(func), all_args)
        return func(*args, **kwargs)

    return wrapper


# -----------------------------------------------------------------------------
# Exception Classes
# -----------------------------------------------------------------------------


class AccessorError(Exception):
    """Base exception for composer errors with structured context.

    Attributes:
        message: Human-readable error text.
        suggestions: List of short, imperative hints for remediation.
        context: Free-form key/value details safe to log and render.
    """

    def __init__(
        self,
        message: str,
        suggestions: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.suggestions = suggestions or []
        self.context = context or {}
        super().__init__(self._build_enhanced_message())

    def _build_enhanced_message(self) -> str:
        """Embed key context and suggestions into the exception string."""
        lines = [self.message]

        if self.context:
            if "expected_type" in self.context and "actual_type" in self.context:
                lines.append(f"  Expected: {self.context['expected_type']}")
                lines.append(f"  Actual: {self.context['actual_type']}")
            if "field" in self.context:
                lines.append(f"  Field: {self.context['field']}")

        if self.suggestions:
            lines.append("  Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"    • {suggestion}")

        return "\n".join(lines)


class InvalidRecipientError(AccessorError, TypeError):
    """Raised when the recipient is a sequence, a mapping or has no attributes."""


class InvalidSpecificationError(AccessorError, TypeError):
    """Raised when a field specification or a field name is malformed."""


class InvalidNestedUpdateError(AccessorError, TypeError):
    """Raised when a composite field is written with something other than a mapping."""


class InvalidBulkUpdateError(AccessorError, TypeError):
    """Raised when `values(...)` is given something other than a mapping."""


class UnknownFieldError(AccessorError, AttributeError):
    """Raised when a bulk write names a field that has no accessor."""


class CoercionError(AccessorError, ValueError):
    """Raised when a transformer cannot accept or convert a value."""


# -----------------------------------------------------------------------------
# Helper Functions
# -----------------------------------------------------------------------------


def get_type_name(obj: Any, qualname: bool = False) -> str:
    """Return a readable name for a type, or for the type of an instance.

    Args:
        obj: A class, or any object whose class should be named.
        qualname: If True, return the qualified name when available.
    """
    cls = obj if isclass(obj) else type(obj)
    if qualname and hasattr(cls, "__qualname__"):
        return getattr(cls, "__qualname__")
    return getattr(cls, "__name__", str(cls))


def get_func_name(func: Callable[..., Any], qualname: bool = False) -> str:
    """Return a readable name for a callable, resolving partials and wrappers."""
    if isinstance(func, (partial, partialmethod)):
        return get_func_name(func.func, qualname)
    while hasattr(func, "__wrapped__"):
        func = getattr(func, "__wrapped__")
    return getattr(func, "__qualname__" if qualname else "__name__", repr(func))
