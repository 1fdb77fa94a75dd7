"""
Predicate Library

Leaf matchers for schema specs. Every matcher implements a single method,
matches(value) -> bool, and is also callable. Plain user functions are
wrapped with predicate() when a spec is compiled, so built-ins and closures
are interchangeable inside a schema.

Built-ins fail closed: a value of the wrong shape yields False, never an
exception.
"""

from collections.abc import Mapping, Set
from typing import Any, Callable


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_collection(value: Any, include_mappings: bool = False) -> bool:
    """
    Check whether a value is a countable collection.

    Strings and bytes are scalars here. Mappings count only when
    include_mappings is set (size checks accept them, item iteration does not).
    """
    if isinstance(value, (str, bytes, bytearray)):
        return False
    if isinstance(value, Mapping):
        return include_mappings
    return isinstance(value, (list, tuple, Set))


def _same_value(value: Any, candidate: Any) -> bool:
    """Equality that keeps booleans apart from the numbers 0 and 1."""
    if isinstance(value, bool) or isinstance(candidate, bool):
        return type(value) is type(candidate) and value == candidate
    return value == candidate


class Predicate:
    """
    Base class for matchers.

    Override matches() to implement custom logic.
    """

    def matches(self, value: Any) -> bool:
        raise NotImplementedError

    def __call__(self, value: Any) -> bool:
        return self.matches(value)

    @property
    def name(self) -> str:
        return self.__class__.__name__


class FunctionPredicate(Predicate):
    """Adapts any callable returning a truthy value."""

    def __init__(self, fn: Callable[[Any], Any], description: str | None = None):
        self._fn = fn
        self._description = description or getattr(fn, "__name__", None) or repr(fn)

    def matches(self, value: Any) -> bool:
        return bool(self._fn(value))

    def __repr__(self) -> str:
        return self._description


class OneOf(Predicate):
    """Membership in a fixed set of values."""

    def __init__(self, values: tuple[Any, ...]):
        self.values = values
        try:
            self._lookup: frozenset | None = frozenset(values)
        except TypeError:
            # Unhashable members: fall back to an equality scan
            self._lookup = None
        self._has_bool = any(isinstance(v, bool) for v in values)

    def matches(self, value: Any) -> bool:
        if self._lookup is not None:
            try:
                found = value in self._lookup
            except TypeError:
                return False
            # True == 1 for hashing too, so bools need an exact recheck
            if not found or not (self._has_bool or isinstance(value, bool)):
                return found
        return any(_same_value(value, candidate) for candidate in self.values)

    def __repr__(self) -> str:
        return f"one_of({', '.join(repr(v) for v in self.values)})"


class MinCount(Predicate):
    def __init__(self, n: int):
        self.n = n

    def matches(self, value: Any) -> bool:
        return is_collection(value, include_mappings=True) and len(value) >= self.n

    def __repr__(self) -> str:
        return f"min_count({self.n})"


class MaxCount(Predicate):
    def __init__(self, n: int):
        self.n = n

    def matches(self, value: Any) -> bool:
        return is_collection(value, include_mappings=True) and len(value) <= self.n

    def __repr__(self) -> str:
        return f"max_count({self.n})"


class MapOf(Predicate):
    """Every key and value of a mapping satisfies its predicate."""

    def __init__(self, key_pred: Callable[[Any], Any], value_pred: Callable[[Any], Any]):
        self.key_pred = as_predicate(key_pred)
        self.value_pred = as_predicate(value_pred)

    def matches(self, value: Any) -> bool:
        if not isinstance(value, Mapping):
            return False
        return all(
            self.key_pred.matches(k) and self.value_pred.matches(v)
            for k, v in value.items()
        )

    def __repr__(self) -> str:
        return f"map_of({self.key_pred!r}, {self.value_pred!r})"


class InstanceOf(Predicate):
    """isinstance() check that never accepts bool unless asked for explicitly."""

    def __init__(self, *types: type, description: str | None = None):
        self.types = types
        self._description = description

    def matches(self, value: Any) -> bool:
        if isinstance(value, bool) and bool not in self.types:
            return False
        return isinstance(value, self.types)

    def __repr__(self) -> str:
        if self._description:
            return self._description
        return f"instance_of({', '.join(t.__name__ for t in self.types)})"


# =============================================================================
# Constructors
# =============================================================================

def predicate(fn: Callable[[Any], Any], description: str | None = None) -> Predicate:
    """Wrap a user callable as a matcher."""
    return FunctionPredicate(fn, description)


def as_predicate(fn: Callable[[Any], Any]) -> Predicate:
    if isinstance(fn, Predicate):
        return fn
    return FunctionPredicate(fn)


def one_of(*values: Any) -> Predicate:
    return OneOf(values)


def min_count(n: int) -> Predicate:
    return MinCount(n)


def max_count(n: int) -> Predicate:
    return MaxCount(n)


def map_of(key_pred: Callable[[Any], Any], value_pred: Callable[[Any], Any]) -> Predicate:
    return MapOf(key_pred, value_pred)


def instance_of(*types: type) -> Predicate:
    return InstanceOf(*types)


is_int = InstanceOf(int, description="int")
is_float = InstanceOf(float, description="float")
is_number = InstanceOf(int, float, description="number")
is_str = InstanceOf(str, description="str")
is_bool = InstanceOf(bool, description="bool")
is_map = FunctionPredicate(is_mapping, "map")
is_list = FunctionPredicate(is_collection, "collection")
