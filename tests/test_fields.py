"""Tests for field variants, resolution and transformer helpers."""

from typing import List

import pytest

from chainable import (
    UNSET,
    VALUE,
    CoercionError,
    InvalidSpecificationError,
    Nested,
    Scalar,
    Transformer,
    TransformerWithInitial,
    chain,
    coerce,
    compose,
    typed,
    with_owner,
)
from chainable.fields import adapt_transformer, resolve_field, resolve_specification


def shout(value):
    return str(value).upper()


# -------------------------------------------------------------------
# Resolution
# -------------------------------------------------------------------


class TestResolveField:
    """Each raw declaration maps to exactly one variant."""

    def test_callable(self):
        assert resolve_field(shout) == Transformer(shout)

    def test_class_is_a_transformer(self):
        assert resolve_field(int) == Transformer(int)

    @pytest.mark.parametrize("raw", [[VALUE, 5], (VALUE, 5)])
    def test_sentinel_pair(self, raw):
        assert resolve_field(raw) == TransformerWithInitial(VALUE, 5)

    def test_none_pair(self):
        assert resolve_field([None, 5]) == TransformerWithInitial(None, 5)

    def test_transformer_pair(self):
        assert resolve_field([shout, "a"]) == TransformerWithInitial(shout, "a")

    def test_mapping(self):
        assert resolve_field({"x": 1, "y": VALUE}) == Nested({"x": Scalar(1), "y": Scalar()})

    @pytest.mark.parametrize("raw", [VALUE, None])
    def test_bare_sentinel_has_no_initial(self, raw):
        assert resolve_field(raw) == Scalar()
        assert resolve_field(raw).initial is UNSET

    @pytest.mark.parametrize("raw", [0, False, "text", 1.5])
    def test_scalar(self, raw):
        assert resolve_field(raw) == Scalar(raw)

    @pytest.mark.parametrize("raw", [["a", "b"], [1, 2, 3], []])
    def test_other_lists_are_initial_values(self, raw):
        assert resolve_field(raw) == Scalar(raw)

    def test_variants_pass_through(self):
        spec = TransformerWithInitial(int, 1)
        assert resolve_field(spec) is spec

    def test_unset_is_falsy(self):
        assert not UNSET
        assert repr(UNSET) == "UNSET"


class TestResolveSpecification:
    """Whole specifications resolve in order and validate names."""

    def test_preserves_order(self):
        resolved = resolve_specification({"b": 1, "a": 2, "c": VALUE})
        assert list(resolved) == ["b", "a", "c"]

    def test_rejects_non_mapping(self):
        with pytest.raises(InvalidSpecificationError):
            resolve_specification([("a", 1)])

    def test_rejects_reserved_names_in_nested_specs(self):
        with pytest.raises(InvalidSpecificationError):
            resolve_specification({"outer": {"set": 1}})


# -------------------------------------------------------------------
# Calling conventions
# -------------------------------------------------------------------


class TestAdaptTransformer:
    """Transformers are normalized to apply(owner, value, name)."""

    @pytest.mark.parametrize("sentinel", [VALUE, None])
    def test_pass_through(self, sentinel):
        assert adapt_transformer(sentinel) is None

    def test_single_argument(self):
        assert adapt_transformer(shout)(None, "a", "f") == "A"

    def test_two_arguments_receive_name(self):
        apply = adapt_transformer(lambda value, name: f"{name}={value}")
        assert apply(None, 1, "f") == "f=1"

    def test_var_positional_receives_name(self):
        apply = adapt_transformer(lambda *args: args)
        assert apply(None, 1, "f") == (1, "f")

    def test_optional_name_parameter_receives_name(self):
        """A transformer declaring `name=None` still gets the field name."""
        received = []

        def record(value, name=None):
            received.append(name)
            return value

        actual = compose({"foo": record})
        assert actual.foo(1).foo() == 1
        assert received == ["foo"]

    def test_builtin_optional_arguments_are_not_filled(self):
        """Builtins with optional positionals receive the value only."""
        assert adapt_transformer(str.strip)(None, "  x  ", "f") == "x"
        assert adapt_transformer(round)(None, 2.6, "f") == 3

    def test_class_receives_value_only(self):
        assert adapt_transformer(int)(None, "12", "f") == 12

    def test_builtin_function(self):
        assert adapt_transformer(len)(None, "abc", "f") == 3

    def test_owner_transformer(self):
        owner = object()
        apply = adapt_transformer(with_owner(lambda o, value, name: (o, value, name)))
        assert apply(owner, 1, "f") == (owner, 1, "f")

    def test_rejects_non_callable(self):
        with pytest.raises(InvalidSpecificationError):
            adapt_transformer(3)

    def test_with_owner_rejects_non_callable(self):
        with pytest.raises(InvalidSpecificationError):
            with_owner("nope")

    def test_invalid_transformer_in_pair(self):
        """A pair's first item must be callable or the sentinel."""
        assert resolve_field([3, 4]) == Scalar([3, 4])


# -------------------------------------------------------------------
# Built-in transformers
# -------------------------------------------------------------------


class TestTyped:
    """typed() checks values against type hints."""

    def test_accepts_matching_value(self):
        actual = compose({"n": typed(int)})
        assert actual.n(3).n() == 3

    def test_rejects_mismatch(self):
        actual = compose({"n": [typed(int), 0]})
        with pytest.raises(CoercionError) as exc_info:
            actual.n("three")
        assert exc_info.value.context["field"] == "n"
        assert actual.n() == 0

    def test_generic_hint(self):
        actual = compose({"tags": typed(List[str])})
        assert actual.tags(["a"]).tags() == ["a"]
        with pytest.raises(ValueError):
            actual.tags("a")


class TestCoerce:
    """coerce() converts values with pydantic."""

    def test_converts(self):
        actual = compose({"n": coerce(int)})
        assert actual.n("42").n() == 42

    def test_rejects_unconvertible(self):
        actual = compose({"n": coerce(int)})
        with pytest.raises(CoercionError) as exc_info:
            actual.n("abc")
        assert exc_info.value.context["errors"]

    def test_generic_target(self):
        actual = compose({"ids": coerce(List[int])})
        assert actual.ids(["1", 2]).ids() == [1, 2]


class TestChain:
    """chain() applies transformers left to right."""

    def test_applies_in_order(self):
        actual = compose({"n": chain(str.strip, coerce(int))})
        assert actual.n(" 7 ").n() == 7

    def test_mixed_conventions(self):
        actual = compose(
            {
                "prefix": [VALUE, "id"],
                "key": chain(
                    shout,
                    with_owner(lambda owner, value, name: f"{owner.prefix()}:{value}"),
                    lambda value, name: f"{name}/{value}",
                ),
            }
        )
        assert actual.key("abc").key() == "key/id:ABC"

    def test_sentinel_steps_are_skipped(self):
        actual = compose({"n": chain(VALUE, int)})
        assert actual.n("5").n() == 5
