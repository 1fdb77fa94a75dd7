# Validation Gate
# Accept/reject policy for produced and consumed messages

from metamorphosis.gate.policy import GateMode, GateDecision, ValidationGate
from metamorphosis.gate.serializers import with_schema_serializer, with_schema_deserializer
from metamorphosis.gate.factory import GateSettings, create_validation_gate, parse_topic_schemas

__all__ = [
    "GateMode",
    "GateDecision",
    "ValidationGate",
    "with_schema_serializer",
    "with_schema_deserializer",
    "GateSettings",
    "create_validation_gate",
    "parse_topic_schemas",
]
