#!/usr/bin/env python
"""Example 01: Chainable Accessors.

`compose` turns a declarative field specification into combined
getter/setter functions. Each accessor reads when called with no argument
and writes (returning the object) when called with one.

This example demonstrates:
1. Construction mode with pass-through, initial and transformed fields
2. Mixin mode on an existing object and on a class
3. Composite fields and partial nested updates
4. Bulk writes, snapshots and the unknown-field policy
5. Owner-aware and built-in transformers
"""

from __future__ import annotations

from chainable import (
    VALUE,
    UnknownFieldError,
    chain,
    coerce,
    compose,
    typed,
    with_owner,
)

# =============================================================================
# Part 1: Construction Mode
# =============================================================================

print("=" * 60)
print("Part 1: Construction Mode")
print("=" * 60)

person = compose(
    {
        "name": VALUE,
        "age": [VALUE, 0],
        "tags": lambda value: list(value)[:3],
    }
)

print(f"Fresh object: {person.values()}")
person.name("Ada").age(36).tags("abcd")
print(f"After chained writes: {person.values()}")

# One argument always writes, None included
person.name(None)
print(f"name after writing None: {person.name()!r}")

# =============================================================================
# Part 2: Mixin Mode
# =============================================================================

print("\n" + "=" * 60)
print("Part 2: Mixin Mode")
print("=" * 60)


class Config:
    """A plain class that already has behavior of its own."""

    def describe(self) -> str:
        return f"Config(debug={self.debug()}, workers={self.workers()})"


config = compose(Config(), {"debug": False, "workers": [int, 4]})
print(config.workers("8").describe())


# Composing onto a class shares initial values, not written values
class Point:
    pass


compose(Point, {"x": 0, "y": 0})
a, b = Point(), Point()
a.x(3)
print(f"a={a.values()} b={b.values()}")

# =============================================================================
# Part 3: Composite Fields
# =============================================================================

print("\n" + "=" * 60)
print("Part 3: Composite Fields")
print("=" * 60)

server = compose({"host": "localhost", "tls": {"enabled": False, "cert": VALUE}})
server.tls({"enabled": True})
print(f"Partial nested update: {server.values()}")
print(f"Nested accessor: tls.enabled = {server.tls().enabled()}")

# =============================================================================
# Part 4: Bulk Writes
# =============================================================================

print("\n" + "=" * 60)
print("Part 4: Bulk Writes")
print("=" * 60)

server.values({"host": "example.org", "tls": {"cert": "/etc/cert.pem"}})
print(f"Snapshot: {server.to_object()}")

try:
    server.values({"port": 443})
except UnknownFieldError as exc:
    print(f"Rejected: {exc.message}")

lenient = compose({"host": VALUE}, unknown_fields="ignore")
print(f"Ignored unknown key: {lenient.values({'host': 'a', 'port': 1}).values()}")

# set() adds a pass-through field on the fly
print(f"set/get: {lenient.set('port', 1).get('port')}")

# =============================================================================
# Part 5: Transformers
# =============================================================================

print("\n" + "=" * 60)
print("Part 5: Transformers")
print("=" * 60)


@with_owner
def clamp_to_limit(owner, value, name):
    return min(value, owner.limit())


budget = compose(
    {
        "limit": [VALUE, 100],
        "spent": [chain(coerce(int), clamp_to_limit), 0],
        "label": typed(str),
    }
)
budget.spent("250").label("q3")
print(f"Clamped and coerced: {budget.values()}")
