# Metamorphosis - Schema validation for publish/subscribe messages
# Declarative schemas checked before a message is produced or after it is consumed

__version__ = "0.2.0"

# Re-export commonly used components for convenience
from metamorphosis.schema import (
    SchemaRegistry,
    SchemaValidator,
    SchemaDefinition,
    ValidationResult,
    FieldError,
    ErrorKind,
    SchemaNotFoundError,
    SchemaValidationError,
    schema_ref,
    any_of,
    all_of,
    one_of,
    min_count,
    max_count,
    map_of,
)

# Produce/consume policy
from metamorphosis.gate import (
    GateMode,
    ValidationGate,
    create_validation_gate,
)

__all__ = [
    "__version__",
    # Schemas
    "SchemaRegistry",
    "SchemaValidator",
    "SchemaDefinition",
    "ValidationResult",
    "FieldError",
    "ErrorKind",
    "SchemaNotFoundError",
    "SchemaValidationError",
    "schema_ref",
    "any_of",
    "all_of",
    "one_of",
    "min_count",
    "max_count",
    "map_of",
    # Gate
    "GateMode",
    "ValidationGate",
    "create_validation_gate",
]
