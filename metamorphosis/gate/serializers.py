"""
Schema-Checked Serializers

Wrap a bus client's (topic, data) value serializer or deserializer so every
message is validated against a schema on the way out or on the way in.

The wrapped callables do the actual encoding; these wrappers only validate the
decoded form and raise SchemaValidationError with the full explanation when it
does not conform.
"""

from typing import Any, Callable

from metamorphosis.schema.models import SchemaValidationError
from metamorphosis.schema.validator import SchemaValidator

Serializer = Callable[[str, Any], Any]


def with_schema_serializer(
    serializer: Serializer,
    schema_id: str,
    validator: SchemaValidator,
) -> Serializer:
    """
    Validate data against `schema_id` before serializing it.

    Raises (from the returned callable):
        SchemaValidationError: If the data does not conform
        SchemaNotFoundError: If schema_id is not registered
    """
    def serialize(topic: str, data: Any) -> Any:
        if not validator.validate(data, schema_id):
            raise SchemaValidationError(validator.explain(data, schema_id))
        return serializer(topic, data)

    return serialize


def with_schema_deserializer(
    deserializer: Serializer,
    schema_id: str,
    validator: SchemaValidator,
) -> Serializer:
    """
    Deserialize a payload, then validate the result against `schema_id`.

    Raises (from the returned callable):
        SchemaValidationError: If the decoded data does not conform
        SchemaNotFoundError: If schema_id is not registered
    """
    def deserialize(topic: str, payload: Any) -> Any:
        data = deserializer(topic, payload)
        if not validator.validate(data, schema_id):
            result = validator.explain(data, schema_id)
            raise SchemaValidationError(
                result,
                f"Schema validation failed on deserialization for {schema_id}: "
                f"{result.summary()}",
            )
        return data

    return deserialize
