"""
Validation Gate Factory

Builds a ValidationGate from explicit arguments or environment variables.

Environment Variables:
- METAMORPHOSIS_SCHEMA_MODE: Gate mode (disabled, topic, schema, mapping)
- METAMORPHOSIS_SCHEMA_ID: Fixed schema id (for schema mode)
- METAMORPHOSIS_TOPIC_SCHEMAS: Topic mapping "topic=schema_id,..." (for mapping mode)
- METAMORPHOSIS_SCHEMA_STRICT: Reject messages without a schema (default: true)

Variables can be loaded from a .env file by passing env_file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from metamorphosis.gate.policy import GateMode, ValidationGate
from metamorphosis.schema.validator import SchemaValidator

logger = logging.getLogger(__name__)

# Valid gate modes
VALID_MODES = {mode.value for mode in GateMode}


class GateSettings(BaseModel):
    """Gate configuration, usually read from the environment."""

    mode: GateMode = Field(
        default=GateMode.TOPIC,
        description="How the gate selects a schema for a topic"
    )
    schema_id: str | None = Field(
        default=None,
        description="Fixed schema id for schema mode"
    )
    topic_schemas: dict[str, str] = Field(
        default_factory=dict,
        description="Topic -> schema id table for mapping mode"
    )
    strict: bool = Field(
        default=True,
        description="Reject messages on topics without an applicable schema"
    )

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            if value not in VALID_MODES:
                raise ValueError(
                    f"Unknown schema gate mode: {value}. "
                    f"Valid options: {', '.join(sorted(VALID_MODES))}"
                )
        return value

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> GateSettings:
        if env_file is not None:
            load_dotenv(env_file)

        return cls(
            mode=os.getenv("METAMORPHOSIS_SCHEMA_MODE", GateMode.TOPIC.value),
            schema_id=os.getenv("METAMORPHOSIS_SCHEMA_ID") or None,
            topic_schemas=parse_topic_schemas(os.getenv("METAMORPHOSIS_TOPIC_SCHEMAS", "")),
            strict=os.getenv("METAMORPHOSIS_SCHEMA_STRICT", "true").lower() != "false",
        )


def parse_topic_schemas(raw: str) -> dict[str, str]:
    """
    Parse "topic=schema_id,topic2=schema_id2" into a mapping.

    Raises:
        ValueError: If an entry has no "=" or an empty side
    """
    mapping: dict[str, str] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        topic, sep, schema_id = entry.partition("=")
        topic, schema_id = topic.strip(), schema_id.strip()
        if not sep or not topic or not schema_id:
            raise ValueError(f"Invalid topic schema mapping entry: {entry!r}")
        mapping[topic] = schema_id
    return mapping


def create_validation_gate(
    validator: SchemaValidator,
    settings: GateSettings | None = None,
    env_file: str | Path | None = None,
) -> ValidationGate:
    """
    Create a validation gate from settings or environment.

    Args:
        validator: Validator (and through it, the registry) the gate uses
        settings: Explicit settings. Read from the environment if not provided.
        env_file: Optional .env file loaded before reading the environment

    Returns:
        Configured ValidationGate

    Raises:
        ValueError: If the settings are inconsistent (e.g. schema mode
            without a schema id)

    Examples:
        # Auto-detect from environment
        gate = create_validation_gate(validator)

        # Explicit per-topic mapping
        gate = create_validation_gate(
            validator,
            GateSettings(mode="mapping", topic_schemas={"orders": "orders/v2"}),
        )
    """
    if settings is None:
        settings = GateSettings.from_env(env_file)

    logger.info(
        f"Creating validation gate (mode={settings.mode.value}, strict={settings.strict})"
    )
    return ValidationGate(
        validator=validator,
        mode=settings.mode,
        schema_id=settings.schema_id,
        topic_schemas=dict(settings.topic_schemas),
        strict=settings.strict,
    )
