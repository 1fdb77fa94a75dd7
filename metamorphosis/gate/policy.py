"""
Validation Gate

Decides whether a decoded message may be produced to, or delivered from, a
topic. The gate is the policy layer on top of the validator: the validator
reports, the gate accepts or rejects.

Schema selection modes:
- disabled: every message passes
- topic:    schema resolved by topic convention ("{topic}/default", "{topic}")
- schema:   one fixed schema id for every topic
- mapping:  explicit topic -> schema id table

Strictness only matters when no schema applies to a topic (topic mode without
a registered schema, mapping mode with an unmapped topic): strict gates reject
those messages, lenient gates let them through.

Rejected messages are logged with their full error list and are expected to be
dropped by the caller, never transmitted or handed to application code.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from metamorphosis.schema.models import SchemaValidationError, ValidationResult
from metamorphosis.schema.validator import SchemaValidator

logger = logging.getLogger(__name__)


class GateMode(str, Enum):
    """How the gate picks a schema for a topic."""
    DISABLED = "disabled"
    TOPIC = "topic"
    SCHEMA = "schema"
    MAPPING = "mapping"


@dataclass
class GateDecision:
    """
    Outcome of a gate check.
    """
    accepted: bool
    topic: str
    schema_id: str | None = None
    reason: str | None = None
    result: ValidationResult | None = None

    @property
    def errors(self) -> list:
        return self.result.errors if self.result is not None else []


@dataclass
class ValidationGate:
    """
    Accept/reject policy for messages crossing the bus boundary.
    """
    validator: SchemaValidator
    mode: GateMode = GateMode.TOPIC
    schema_id: str | None = None
    topic_schemas: dict[str, str] = field(default_factory=dict)
    strict: bool = True

    def __post_init__(self):
        self.mode = GateMode(self.mode)
        if self.mode == GateMode.SCHEMA and not self.schema_id:
            raise ValueError("Gate mode 'schema' requires a schema_id")
        if self.mode == GateMode.MAPPING and not self.topic_schemas:
            raise ValueError("Gate mode 'mapping' requires topic_schemas")

    def check(self, topic: str, value: Any) -> GateDecision:
        """
        Evaluate a message against the gate's policy.

        Raises:
            SchemaNotFoundError: If an explicitly configured schema id
                (schema or mapping mode) is not registered
        """
        if self.mode == GateMode.DISABLED:
            return GateDecision(accepted=True, topic=topic, reason="validation disabled")

        if self.mode == GateMode.TOPIC:
            # Resolve and validate against the same definition
            result = self.validator.explain_for_topic(value, topic)
            schema_id = result.schema_id
            if schema_id is None:
                return self._unschemed(topic)
        else:
            schema_id = self._select_schema(topic)
            if schema_id is None:
                return self._unschemed(topic)
            result = self.validator.explain(value, schema_id)

        if not result.valid:
            logger.warning(
                f"Schema validation failed for message on topic '{topic}' "
                f"using schema '{schema_id}': {result.summary()}. "
                f"Message will NOT be processed."
            )
            return GateDecision(
                accepted=False,
                topic=topic,
                schema_id=schema_id,
                reason="schema validation failed",
                result=result,
            )

        return GateDecision(accepted=True, topic=topic, schema_id=schema_id, result=result)

    def require(self, topic: str, value: Any) -> Any:
        """
        Return the value if the gate accepts it.

        Raises:
            SchemaValidationError: If the gate rejects the message
        """
        decision = self.check(topic, value)
        if decision.accepted:
            return value

        result = decision.result or ValidationResult.from_errors(
            [], message=value, topic=topic
        )
        raise SchemaValidationError(
            result,
            f"Message rejected on topic '{topic}': {decision.reason}"
            + (f" ({result.summary()})" if decision.result is not None else ""),
        )

    def _select_schema(self, topic: str) -> str | None:
        if self.mode == GateMode.SCHEMA:
            return self.schema_id
        return self.topic_schemas.get(topic)

    def _unschemed(self, topic: str) -> GateDecision:
        if self.mode == GateMode.MAPPING:
            reason = f"no schema mapping for topic '{topic}'"
        else:
            reason = f"no schema found for topic '{topic}'"

        if not self.strict:
            logger.debug(f"{reason}, accepting message (lenient gate)")
            return GateDecision(accepted=True, topic=topic, reason=reason)

        if self.mode == GateMode.MAPPING:
            logger.warning(
                f"{reason} (available mappings: {sorted(self.topic_schemas)}). "
                f"Message will NOT be processed."
            )
        else:
            logger.warning(f"{reason} but validation is enabled. Message will NOT be processed.")
        return GateDecision(accepted=False, topic=topic, reason=reason)
