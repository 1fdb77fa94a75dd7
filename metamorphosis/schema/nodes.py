"""
Spec Nodes

A schema is declared as plain Python data:

    {
        "order_id": is_str,
        "total": float,                      # bare type -> isinstance check
        "user": {"id": int, "name": str},    # nested map
        "items": [{"sku": str, "qty": int}], # single-element list -> collection
        "payment": any_of("payments/card", "payments/iban"),
    }

compile_spec() turns that declaration into a tree of SpecNode variants once, at
registration time, so validation dispatches on node class instead of
re-inspecting raw values for every message.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from metamorphosis.schema.predicates import InstanceOf, Predicate, FunctionPredicate


class SpecNode:
    """Base class for schema tree nodes."""

    def describe(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True, eq=False)
class PredicateNode(SpecNode):
    predicate: Predicate

    def describe(self) -> str:
        return repr(self.predicate)


@dataclass(frozen=True, eq=False)
class MapNode(SpecNode):
    """Ordered field name -> node mapping. Extra input fields are ignored."""
    fields: tuple[tuple[str, SpecNode], ...]

    @property
    def field_names(self) -> list[str]:
        return [name for name, _ in self.fields]

    def describe(self) -> str:
        return "map{" + ", ".join(self.field_names) + "}"


@dataclass(frozen=True, eq=False)
class CollectionNode(SpecNode):
    """Every item of a collection value must match `element`."""
    element: SpecNode

    def describe(self) -> str:
        return f"[{self.element.describe()}]"


class CompositionKind(str, Enum):
    REF = "ref"
    ANY = "any"
    ALL = "all"


@dataclass(frozen=True, eq=False)
class CompositionRef(SpecNode):
    """
    Reference to, or combination of, other schemas.

    Targets are either schema ids (resolved through the registry at
    validation time) or compiled inline nodes.
    """
    kind: CompositionKind
    targets: tuple["str | SpecNode", ...]

    def describe(self) -> str:
        names = ", ".join(
            repr(t) if isinstance(t, str) else t.describe() for t in self.targets
        )
        if self.kind == CompositionKind.REF:
            return f"schema_ref({names})"
        return f"{self.kind.value}_of({names})"

    def bind(self, validator):
        """
        Return a plain predicate evaluating this composition with `validator`.

        For schema_ref an unregistered id raises SchemaNotFoundError;
        any_of / all_of treat it as a non-matching branch.
        """
        from metamorphosis.schema.composition import bind_composition
        return bind_composition(self, validator)


@dataclass(frozen=True, eq=False)
class InvalidNode(SpecNode):
    """Placeholder for a spec shape the validator cannot use."""
    raw: Any
    reason: str

    def describe(self) -> str:
        return f"invalid spec ({self.reason}): {self.raw!r}"


def compile_spec(raw: Any) -> SpecNode:
    """
    Compile a raw spec declaration into a SpecNode tree.

    Never raises: unusable shapes become InvalidNode and fail at validation
    time with an invalid-spec error.
    """
    if isinstance(raw, SpecNode):
        return raw

    if isinstance(raw, Mapping):
        return MapNode(
            fields=tuple((str(key), compile_spec(value)) for key, value in raw.items())
        )

    if isinstance(raw, (list, tuple)):
        if len(raw) != 1:
            return InvalidNode(
                raw=raw,
                reason=f"collection spec must have exactly one element, got {len(raw)}"
            )
        return CollectionNode(element=compile_spec(raw[0]))

    if isinstance(raw, Predicate):
        return PredicateNode(predicate=raw)

    if isinstance(raw, type):
        return PredicateNode(predicate=InstanceOf(raw, description=raw.__name__))

    if callable(raw):
        return PredicateNode(predicate=FunctionPredicate(raw))

    return InvalidNode(raw=raw, reason=f"unsupported spec type {type(raw).__name__}")
