"""
Structural Validator

Walks a decoded message alongside a compiled spec tree.

Validation rules, applied to every field the schema declares:
1. Absent or None value -> missing (whatever the node kind)
2. Predicate node -> apply; an exception counts as a failed match
3. Map node -> value must be a mapping, recurse with "parent.field" paths
4. Collection node -> value must be a collection, check every item with
   "field[index]" paths
5. Composition node -> delegate to the composition engine
6. Anything else -> invalid-spec (never raises)

Fields the schema does not declare are ignored: schemas are allow-lists of
required fields, not closed records.

Two entry-point families with different contracts:
- validate / explain: explicit schema id, raise SchemaNotFoundError if unknown
- validate_for_topic / explain_for_topic: convention lookup, an unresolved
  topic is reported as valid so the caller can apply its own policy
"""

import logging
from collections.abc import Mapping
from typing import Any

from metamorphosis.schema import composition
from metamorphosis.schema.models import ErrorKind, FieldError, ValidationResult
from metamorphosis.schema.nodes import (
    CollectionNode,
    CompositionRef,
    MapNode,
    PredicateNode,
    SpecNode,
    compile_spec,
)
from metamorphosis.schema.predicates import Predicate, is_collection, is_mapping
from metamorphosis.schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)


def join_path(parent: str, name: str) -> str:
    return f"{parent}.{name}" if parent else name


class SchemaValidator:
    """
    Validates messages against schemas held by a SchemaRegistry.

    Stateless apart from the injected registry; safe to share across threads.
    """

    def __init__(self, registry: SchemaRegistry):
        self._registry = registry

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    # =========================================================================
    # Explicit schema id
    # =========================================================================

    def validate(self, value: Any, schema_id: str) -> bool:
        """
        Check a message against a registered schema.

        Stops at the first failing field.

        Raises:
            SchemaNotFoundError: If schema_id is not registered
        """
        definition = self._registry.require(schema_id)
        return self.matches_node(value, definition.root)

    def explain(self, value: Any, schema_id: str) -> ValidationResult:
        """
        Produce the full diagnostic report for a message.

        Raises:
            SchemaNotFoundError: If schema_id is not registered
        """
        definition = self._registry.require(schema_id)
        errors = self.explain_node(value, definition.root)
        return ValidationResult.from_errors(errors, message=value, schema_id=schema_id)

    # =========================================================================
    # Ad-hoc specs
    # =========================================================================

    def validate_spec(self, value: Any, spec: Any) -> bool:
        """Check a message against an unregistered (raw or compiled) spec."""
        return self.matches_node(value, compile_spec(spec))

    def explain_spec(self, value: Any, spec: Any) -> ValidationResult:
        errors = self.explain_node(value, compile_spec(spec))
        return ValidationResult.from_errors(errors, message=value)

    # =========================================================================
    # Topic convention
    # =========================================================================

    def validate_for_topic(self, value: Any, topic: str) -> bool:
        """
        Check a message against its topic's schema.

        Returns True when the topic has no schema.
        """
        definition = self._registry.get_schema_for_topic(topic)
        if definition is None:
            logger.debug(f"No schema registered for topic {topic}, skipping validation")
            return True
        return self.matches_node(value, definition.root)

    def explain_for_topic(self, value: Any, topic: str) -> ValidationResult:
        """
        Diagnostic report against a topic's schema.

        A topic without a schema yields a valid result with schema_id None.
        """
        definition = self._registry.get_schema_for_topic(topic)
        if definition is None:
            logger.debug(f"No schema registered for topic {topic}, skipping validation")
            return ValidationResult.from_errors([], message=value, topic=topic)

        errors = self.explain_node(value, definition.root)
        return ValidationResult.from_errors(
            errors,
            message=value,
            schema_id=definition.schema_id,
            topic=topic,
        )

    # =========================================================================
    # Node evaluation
    # =========================================================================

    def matches_node(self, value: Any, node: SpecNode) -> bool:
        """
        Boolean check of a value against a schema root.

        A map root treats a non-mapping message as an empty one.
        """
        if isinstance(node, MapNode):
            return self._matches_fields(value, node)
        return self._matches_value(value, node)

    def explain_node(self, value: Any, node: SpecNode, path: str = "") -> list[FieldError]:
        """Collect every field error of a value against a schema root."""
        if isinstance(node, MapNode):
            return self._field_errors(value, node, path)
        return self._value_errors(value, node, path)

    def _matches_fields(self, message: Any, node: MapNode) -> bool:
        fields = message if isinstance(message, Mapping) else {}
        for name, child in node.fields:
            if not self._matches_value(fields.get(name), child):
                return False
        return True

    def _matches_value(self, value: Any, node: SpecNode) -> bool:
        if value is None:
            return False

        if isinstance(node, PredicateNode):
            return self._apply(node.predicate, value)

        if isinstance(node, MapNode):
            return is_mapping(value) and self._matches_fields(value, node)

        if isinstance(node, CollectionNode):
            return is_collection(value) and all(
                self._matches_value(item, node.element) for item in value
            )

        if isinstance(node, CompositionRef):
            return composition.matches(node, value, self)

        return False

    def _field_errors(self, message: Any, node: MapNode, path: str) -> list[FieldError]:
        fields = message if isinstance(message, Mapping) else {}
        errors: list[FieldError] = []
        for name, child in node.fields:
            errors.extend(self._value_errors(fields.get(name), child, join_path(path, name)))
        return errors

    def _value_errors(self, value: Any, node: SpecNode, path: str) -> list[FieldError]:
        if value is None:
            return [FieldError(path=path, kind=ErrorKind.MISSING, expected=node.describe())]

        if isinstance(node, PredicateNode):
            if self._apply(node.predicate, value):
                return []
            return [self._mismatch(path, value, node)]

        if isinstance(node, MapNode):
            if not is_mapping(value):
                return [self._mismatch(path, value, node)]
            return self._field_errors(value, node, path)

        if isinstance(node, CollectionNode):
            if not is_collection(value):
                return [self._mismatch(path, value, node)]
            errors: list[FieldError] = []
            for index, item in enumerate(value):
                errors.extend(self._value_errors(item, node.element, f"{path}[{index}]"))
            return errors

        if isinstance(node, CompositionRef):
            return composition.explain(node, value, path, self)

        return [
            FieldError(
                path=path,
                kind=ErrorKind.INVALID_SPEC,
                value=value,
                expected=node.describe(),
            )
        ]

    @staticmethod
    def _mismatch(path: str, value: Any, node: SpecNode) -> FieldError:
        return FieldError(
            path=path,
            kind=ErrorKind.TYPE_MISMATCH,
            value=value,
            expected=node.describe(),
        )

    @staticmethod
    def _apply(predicate: Predicate, value: Any) -> bool:
        try:
            return bool(predicate.matches(value))
        except Exception as e:
            logger.debug(f"Predicate {predicate!r} raised on {value!r}: {e}")
            return False
