"""
Validation Result Models

Diagnostic output produced by the structural validator, plus the exception
types raised by the schema APIs.

Why two shapes?
- FieldError / ValidationResult are data: they are returned, logged and
  serialized by callers deciding whether to transmit or drop a message
- Exceptions are reserved for contract violations of the explicit-id APIs
  (unknown schema id, malformed root spec) and for the gate's require()

Field errors are never raised. A failed predicate, a missing field or a broken
composition branch always ends up as a FieldError entry.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Category of a single field failure."""
    MISSING = "missing"
    TYPE_MISMATCH = "type-mismatch"
    COMPOSITION_FAILED = "composition-failed"
    INVALID_SPEC = "invalid-spec"


class CompositionFailure(str, Enum):
    """Sub-kind of a composition-failed error."""
    UNRESOLVED_REFERENCE = "unresolved-reference"
    NO_ALTERNATIVE_MATCHED = "no-alternative-matched"
    CONJUNCT_FAILED = "conjunct-failed"


class FieldError(BaseModel):
    """
    A single validation failure at a location in the message.

    Paths use dotted notation for nested fields and bracket notation for
    collection indices, e.g. "items[1].price".
    """

    path: str = Field(
        ...,
        description="Location of the failing field"
    )
    kind: ErrorKind = Field(
        ...,
        description="Failure category"
    )
    value: Any = Field(
        default=None,
        description="Offending value (None when the field is missing)"
    )
    expected: str = Field(
        ...,
        description="Human-readable description of the spec node that failed"
    )
    reason: CompositionFailure | None = Field(
        default=None,
        description="Composition sub-kind for composition-failed errors"
    )
    detail: str | None = Field(
        default=None,
        description="Free-form detail (e.g. unresolved schema ids)"
    )

    def describe(self) -> str:
        """One-line summary suitable for log output."""
        kind = self.kind.value
        if self.reason is not None:
            kind = f"{kind}/{self.reason.value}"
        line = f"{self.path or '<root>'}: {kind} (expected {self.expected})"
        if self.kind != ErrorKind.MISSING:
            line += f", got {self.value!r}"
        if self.detail:
            line += f" [{self.detail}]"
        return line


class ValidationResult(BaseModel):
    """
    Full diagnostic report for one message.

    `valid` is always equivalent to `not errors`.
    """

    valid: bool = Field(
        ...,
        description="True when no field failed"
    )
    errors: list[FieldError] = Field(
        default_factory=list,
        description="Ordered list of field failures"
    )
    message: Any = Field(
        default=None,
        description="The validated message"
    )
    schema_id: str | None = Field(
        default=None,
        description="Schema the message was validated against, if any"
    )
    topic: str | None = Field(
        default=None,
        description="Topic used for schema resolution (topic-based validation only)"
    )

    @classmethod
    def from_errors(
        cls,
        errors: list[FieldError],
        message: Any = None,
        schema_id: str | None = None,
        topic: str | None = None,
    ) -> "ValidationResult":
        return cls(
            valid=not errors,
            errors=errors,
            message=message,
            schema_id=schema_id,
            topic=topic,
        )

    @property
    def paths(self) -> list[str]:
        """Paths of all failing fields, in report order."""
        return [error.path for error in self.errors]

    def summary(self) -> str:
        if self.valid:
            return "valid"
        return "; ".join(error.describe() for error in self.errors)


# =============================================================================
# Exceptions
# =============================================================================

class SchemaError(Exception):
    """Base exception for schema errors."""
    pass


class SchemaNotFoundError(SchemaError):
    """Schema id is not registered."""
    def __init__(self, schema_id: str, available: list[str] | None = None):
        self.schema_id = schema_id
        self.available = list(available or [])
        super().__init__(
            f"Schema not found: {schema_id!r} "
            f"(available: {', '.join(self.available) or 'none'})"
        )


class InvalidSpecError(SchemaError):
    """Schema spec has a shape the validator cannot use."""
    pass


class SchemaValidationError(SchemaError):
    """Message was rejected by schema validation."""
    def __init__(self, result: ValidationResult, message: str | None = None):
        self.result = result
        if message is None:
            target = result.schema_id or result.topic or "<unknown>"
            message = f"Schema validation failed for {target}: {result.summary()}"
        super().__init__(message)

    @property
    def errors(self) -> list[FieldError]:
        return self.result.errors
