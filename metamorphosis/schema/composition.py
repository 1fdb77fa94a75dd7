"""
Schema Composition

Combinators that let one schema reference or combine others:

- schema_ref(id)      -> the value must satisfy schema `id`
- any_of(*targets)    -> at least one target must be satisfied (empty: never)
- all_of(*targets)    -> every target must be satisfied (empty: always)

A target is a schema id, an inline spec (e.g. a dict) or another composition.
Schema ids are resolved through the validator's registry at validation time,
so a schema may reference ids registered after it.

Inside a validation run an unregistered id never raises: for schema_ref it is
reported as an unresolved reference, for any_of / all_of it is simply a branch
that does not match. Only the direct predicate form, schema_ref(id).bind(v),
surfaces SchemaNotFoundError.
"""

from typing import Any, TYPE_CHECKING

from metamorphosis.schema.models import CompositionFailure, ErrorKind, FieldError
from metamorphosis.schema.nodes import CompositionKind, CompositionRef, SpecNode, compile_spec
from metamorphosis.schema.predicates import FunctionPredicate, Predicate

if TYPE_CHECKING:
    from metamorphosis.schema.validator import SchemaValidator


def _normalize(target: Any) -> "str | SpecNode":
    if isinstance(target, str):
        return target
    return compile_spec(target)


def schema_ref(schema_id: str) -> CompositionRef:
    if not isinstance(schema_id, str) or not schema_id:
        raise ValueError(f"schema_ref() needs a schema id, got {schema_id!r}")
    return CompositionRef(kind=CompositionKind.REF, targets=(schema_id,))


def any_of(*targets: Any) -> CompositionRef:
    return CompositionRef(
        kind=CompositionKind.ANY,
        targets=tuple(_normalize(t) for t in targets),
    )


def all_of(*targets: Any) -> CompositionRef:
    return CompositionRef(
        kind=CompositionKind.ALL,
        targets=tuple(_normalize(t) for t in targets),
    )


def _resolve(target: "str | SpecNode", validator: "SchemaValidator") -> SpecNode | None:
    if isinstance(target, str):
        definition = validator.registry.get(target)
        return definition.root if definition is not None else None
    return target


def _label(target: "str | SpecNode") -> str:
    return repr(target) if isinstance(target, str) else target.describe()


def _branch_matches(target: "str | SpecNode", value: Any, validator: "SchemaValidator") -> bool:
    node = _resolve(target, validator)
    return node is not None and validator.matches_node(value, node)


def matches(node: CompositionRef, value: Any, validator: "SchemaValidator") -> bool:
    """Boolean evaluation of a composition against a value."""
    if node.kind == CompositionKind.ANY:
        return any(_branch_matches(t, value, validator) for t in node.targets)
    # REF has exactly one target, so it shares the conjunction path
    return all(_branch_matches(t, value, validator) for t in node.targets)


def explain(
    node: CompositionRef,
    value: Any,
    path: str,
    validator: "SchemaValidator",
) -> list[FieldError]:
    """
    Diagnostic evaluation of a composition.

    A resolved schema_ref contributes the referenced schema's own errors under
    `path`; every other failure is a single composition-failed error.
    """
    if node.kind == CompositionKind.REF:
        target = node.targets[0]
        resolved = _resolve(target, validator)
        if resolved is None:
            return [
                _failure(
                    node, value, path,
                    CompositionFailure.UNRESOLVED_REFERENCE,
                    f"schema {_label(target)} is not registered",
                )
            ]
        return validator.explain_node(value, resolved, path)

    if node.kind == CompositionKind.ANY:
        unresolved: list[str] = []
        for target in node.targets:
            resolved = _resolve(target, validator)
            if resolved is None:
                unresolved.append(_label(target))
                continue
            if validator.matches_node(value, resolved):
                return []
        detail = None
        if not node.targets:
            detail = "no alternatives declared"
        elif unresolved:
            detail = f"unresolved: {', '.join(unresolved)}"
        return [
            _failure(node, value, path, CompositionFailure.NO_ALTERNATIVE_MATCHED, detail)
        ]

    for target in node.targets:
        resolved = _resolve(target, validator)
        if resolved is None:
            detail = f"schema {_label(target)} is not registered"
        else:
            sub_errors = validator.explain_node(value, resolved, path)
            if not sub_errors:
                continue
            detail = f"{_label(target)}: " + "; ".join(e.describe() for e in sub_errors)
        return [_failure(node, value, path, CompositionFailure.CONJUNCT_FAILED, detail)]
    return []


def _failure(
    node: CompositionRef,
    value: Any,
    path: str,
    reason: CompositionFailure,
    detail: str | None,
) -> FieldError:
    return FieldError(
        path=path,
        kind=ErrorKind.COMPOSITION_FAILED,
        value=value,
        expected=node.describe(),
        reason=reason,
        detail=detail,
    )


def bind_composition(node: CompositionRef, validator: "SchemaValidator") -> Predicate:
    """
    Turn a composition into a standalone predicate.

    schema_ref raises SchemaNotFoundError for an unregistered id, mirroring
    SchemaValidator.validate(); any_of / all_of never raise.
    """
    if node.kind == CompositionKind.REF:
        target = node.targets[0]

        def check_ref(value: Any) -> bool:
            if isinstance(target, str):
                resolved = validator.registry.require(target).root
            else:
                resolved = target
            return validator.matches_node(value, resolved)

        return FunctionPredicate(check_ref, node.describe())

    def check(value: Any) -> bool:
        return matches(node, value, validator)

    return FunctionPredicate(check, node.describe())
