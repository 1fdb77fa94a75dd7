# Schema Registry & Validation
# Declarative message schemas: registry, structural validator, composition

from metamorphosis.schema.models import (
    ErrorKind,
    CompositionFailure,
    FieldError,
    ValidationResult,
    SchemaError,
    SchemaNotFoundError,
    InvalidSpecError,
    SchemaValidationError,
)
from metamorphosis.schema.predicates import (
    Predicate,
    predicate,
    one_of,
    min_count,
    max_count,
    map_of,
    instance_of,
    is_int,
    is_float,
    is_number,
    is_str,
    is_bool,
    is_map,
    is_list,
)
from metamorphosis.schema.nodes import (
    SpecNode,
    PredicateNode,
    MapNode,
    CollectionNode,
    CompositionRef,
    CompositionKind,
    InvalidNode,
    compile_spec,
)
from metamorphosis.schema.composition import schema_ref, any_of, all_of
from metamorphosis.schema.registry import SchemaRegistry, SchemaDefinition
from metamorphosis.schema.validator import SchemaValidator

__all__ = [
    # Results & errors
    "ErrorKind",
    "CompositionFailure",
    "FieldError",
    "ValidationResult",
    "SchemaError",
    "SchemaNotFoundError",
    "InvalidSpecError",
    "SchemaValidationError",
    # Predicates
    "Predicate",
    "predicate",
    "one_of",
    "min_count",
    "max_count",
    "map_of",
    "instance_of",
    "is_int",
    "is_float",
    "is_number",
    "is_str",
    "is_bool",
    "is_map",
    "is_list",
    # Spec tree
    "SpecNode",
    "PredicateNode",
    "MapNode",
    "CollectionNode",
    "CompositionRef",
    "CompositionKind",
    "InvalidNode",
    "compile_spec",
    # Composition
    "schema_ref",
    "any_of",
    "all_of",
    # Registry & validator
    "SchemaRegistry",
    "SchemaDefinition",
    "SchemaValidator",
]
