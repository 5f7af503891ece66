r"""Field specification variants and transformer helpers.

A field specification maps field names to raw declarations. Each raw
declaration is resolved once, at composition time, into one of four
variants:

\dot
digraph FieldSpec {
    rankdir=LR;
    node [shape=rectangle];
    "raw value" -> "Transformer"            [label="callable"];
    "raw value" -> "TransformerWithInitial" [label="[fn|VALUE, initial]"];
    "raw value" -> "Nested"                 [label="mapping"];
    "raw value" -> "Scalar"                 [label="anything else"];
}
\enddot

Transformers are called with the proposed value and the field name; the
exact calling convention is fixed per transformer by `adapt_transformer`.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from functools import reduce
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from typeguard import TypeCheckError, check_type

from .utils import CoercionError, InvalidSpecificationError, get_func_name, get_type_name

__all__ = [
    "VALUE",
    "UNSET",
    "RESERVED_NAMES",
    "Transformer",
    "TransformerWithInitial",
    "Nested",
    "Scalar",
    "FieldSpec",
    "OwnerTransformer",
    "with_owner",
    "typed",
    "coerce",
    "chain",
    "adapt_transformer",
    "validate_field_name",
    "resolve_field",
    "resolve_specification",
]

logger = logging.getLogger(__name__)

#: Sentinel transformer meaning "store the value as-is".
VALUE = "value"

#: Names taken by the operations installed next to the field accessors.
RESERVED_NAMES = frozenset({"get", "set", "values", "to_object"})


class _Unset:
    """Marker for a field declared without an initial value."""

    _instance: ClassVar[Optional["_Unset"]] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()

#: Normalized transformer: ``apply(owner, value, name) -> stored value``.
Apply = Callable[[Any, Any, str], Any]


# -----------------------------------------------------------------------------
# Field Variants
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Transformer:
    """A field whose writes pass through `function`; no initial value."""

    function: Callable[..., Any]

    initial: ClassVar[Any] = UNSET


@dataclass(frozen=True)
class TransformerWithInitial:
    """A field with a transformer (or `VALUE` / None for pass-through) and an initial value."""

    function: Union[Callable[..., Any], str, None]
    initial: Any = None


@dataclass(frozen=True)
class Nested:
    """A composite field holding its own accessor object built from `fields`."""

    fields: Dict[str, "FieldSpec"] = field(default_factory=dict)

    initial: ClassVar[Any] = UNSET


@dataclass(frozen=True)
class Scalar:
    """A pass-through field, optionally seeded with `initial`."""

    initial: Any = UNSET


FieldSpec = Union[Transformer, TransformerWithInitial, Nested, Scalar]


# -----------------------------------------------------------------------------
# Transformer Calling Conventions
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class OwnerTransformer:
    """Transformer called as ``function(owner, value, name)``.

    The owner is the accessor object being written, so the transformer can
    read sibling fields through their accessors.
    """

    function: Callable[[Any, Any, str], Any]

    def __call__(self, owner: Any, value: Any, name: str) -> Any:
        return self.function(owner, value, name)


def with_owner(function: Callable[[Any, Any, str], Any]) -> OwnerTransformer:
    """Mark `function` as a transformer that receives the owning object first."""
    if not callable(function):
        raise InvalidSpecificationError(
            f"with_owner() expects a callable, got {get_type_name(function)}",
            ["Decorate a function taking (owner, value, name)"],
            {"expected_type": "callable", "actual_type": get_type_name(function)},
        )
    return OwnerTransformer(function)


def _is_pass_through(function: Any) -> bool:
    return function is None or (isinstance(function, str) and function == VALUE)


def _is_builtin(function: Any) -> bool:
    return inspect.isbuiltin(function) or inspect.ismethoddescriptor(function)


def _positional_arity(function: Callable[..., Any]) -> int:
    """Number of positional arguments `function` accepts (2 for ``*args``).

    Optional parameters of builtins (``str.strip``, ``round``) are not
    counted; their second argument never means a field name.
    """
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return 1
    optional_counts = not _is_builtin(function)
    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return 2
        if parameter.kind not in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            continue
        if parameter.default is inspect.Parameter.empty or optional_counts:
            count += 1
    return count


def adapt_transformer(function: Any) -> Optional[Apply]:
    """Normalize a transformer into ``apply(owner, value, name)``.

    Returns None for pass-through (`VALUE` or None).

    Conventions:
        - `OwnerTransformer` (see `with_owner`): ``fn(owner, value, name)``.
        - classes and callables without an inspectable signature: ``fn(value)``.
        - callables accepting two or more positional arguments, optional
          ones included: ``fn(value, name)``. Builtins count only their
          required arguments.
        - any other callable: ``fn(value)``.

    Raises:
        InvalidSpecificationError: if `function` is neither callable nor pass-through.
    """
    if _is_pass_through(function):
        return None
    if isinstance(function, OwnerTransformer):
        return function.function
    if not callable(function):
        raise InvalidSpecificationError(
            f"Transformer must be callable, got {get_type_name(function)}",
            [f"Use a callable or the {VALUE!r} sentinel in the transformer slot"],
            {"expected_type": "callable", "actual_type": get_type_name(function)},
        )

    if not inspect.isclass(function) and _positional_arity(function) >= 2:

        def apply(owner: Any, value: Any, name: str) -> Any:
            return function(value, name)

    else:

        def apply(owner: Any, value: Any, name: str) -> Any:
            return function(value)

    apply.__name__ = get_func_name(function)
    return apply


# -----------------------------------------------------------------------------
# Built-in Transformers
# -----------------------------------------------------------------------------


def typed(expected_type: Any) -> Callable[[Any, str], Any]:
    """Transformer accepting values that match the type hint `expected_type`.

    The check is done at runtime with typeguard; mismatches raise `CoercionError`.
    """

    def check(value: Any, name: str) -> Any:
        try:
            return check_type(value, expected_type)
        except TypeCheckError as exc:
            raise CoercionError(
                f"Field '{name}' rejected value: {exc}",
                [f"Pass a value of type {expected_type!r}"],
                {
                    "field": name,
                    "expected_type": repr(expected_type),
                    "actual_type": get_type_name(value),
                },
            ) from exc

    check.__name__ = f"typed[{expected_type!r}]"
    return check


def coerce(target_type: Any) -> Callable[[Any, str], Any]:
    """Transformer converting values into `target_type` with a pydantic TypeAdapter."""
    adapter = TypeAdapter(target_type)

    def convert(value: Any, name: str) -> Any:
        try:
            return adapter.validate_python(value)
        except PydanticValidationError as exc:
            raise CoercionError(
                f"Field '{name}' could not coerce value {value!r}",
                [f"Pass a value convertible to {target_type!r}"],
                {
                    "field": name,
                    "expected_type": repr(target_type),
                    "actual_type": get_type_name(value),
                    "errors": exc.errors(),
                },
            ) from exc

    convert.__name__ = f"coerce[{target_type!r}]"
    return convert


def chain(*functions: Any) -> OwnerTransformer:
    """Compose transformers left to right; each keeps its own calling convention."""
    steps = [step for step in map(adapt_transformer, functions) if step is not None]

    def chained(owner: Any, value: Any, name: str) -> Any:
        return reduce(lambda current, step: step(owner, current, name), steps, value)

    return OwnerTransformer(chained)


# -----------------------------------------------------------------------------
# Specification Resolution
# -----------------------------------------------------------------------------


def validate_field_name(name: Any) -> str:
    """Return `name` if usable as a field name; raise otherwise."""
    if not isinstance(name, str) or not name:
        raise InvalidSpecificationError(
            f"Field names must be non-empty strings, got {name!r}",
            ["Use string keys in the specification mapping"],
            {"expected_type": "str", "actual_type": get_type_name(name)},
        )
    if name in RESERVED_NAMES or name.startswith("__"):
        raise InvalidSpecificationError(
            f"Field name '{name}' is reserved",
            [
                f"Avoid {', '.join(sorted(RESERVED_NAMES))}",
                "Avoid names starting with a double underscore",
            ],
            {"field": name},
        )
    return name


def resolve_field(raw: Any) -> FieldSpec:
    """Resolve one raw declaration into its field variant.

    Variants built by the caller are checked here as well, so a bad
    transformer or nested field fails before anything is installed.
    """
    if isinstance(raw, (Transformer, TransformerWithInitial)):
        adapt_transformer(raw.function)
        return raw
    if isinstance(raw, Nested):
        return Nested(resolve_specification(raw.fields))
    if isinstance(raw, Scalar):
        return raw
    if _is_pass_through(raw):
        return Scalar()
    if (
        isinstance(raw, (list, tuple))
        and len(raw) == 2
        and (_is_pass_through(raw[0]) or callable(raw[0]))
    ):
        return TransformerWithInitial(raw[0], raw[1])
    if callable(raw):
        return Transformer(raw)
    if isinstance(raw, Mapping):
        return Nested(resolve_specification(raw))
    return Scalar(raw)


def resolve_specification(specification: Any) -> Dict[str, FieldSpec]:
    """Resolve a whole specification, preserving key order.

    Raises:
        InvalidSpecificationError: if `specification` is not a mapping or a
            field name is unusable.
    """
    if not isinstance(specification, Mapping):
        raise InvalidSpecificationError(
            'Accessor Object: "specification" must be a mapping',
            ["Pass a dict of field name to declaration"],
            {"expected_type": "Mapping", "actual_type": get_type_name(specification)},
        )
    resolved = {validate_field_name(name): resolve_field(raw) for name, raw in specification.items()}
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Resolved fields: %s",
            ", ".join(f"{name}={type(spec).__name__}" for name, spec in resolved.items()),
        )
    return resolved
