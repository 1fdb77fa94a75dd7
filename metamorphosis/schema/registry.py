"""
Schema Registry

In-memory registry mapping schema ids to their compiled definitions.
Provides explicit-id lookup and topic-convention lookup for the validator
and the validation gate.

Why an atomically-swapped snapshot?
- Reads happen on every validated message, writes mostly at startup
- Readers never take the lock: they grab the current dict reference
- Writers serialize on a lock, copy the dict, mutate the copy, then publish it
- A reader holding an old snapshot still sees a complete, consistent view

Registration is last-write-wins: re-registering an id replaces the previous
definition entirely.
"""

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from metamorphosis.schema.models import InvalidSpecError, SchemaNotFoundError
from metamorphosis.schema.nodes import MapNode, compile_spec
from metamorphosis.schema.topics import matches_topic, topic_schema_candidates

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SchemaDefinition:
    """A registered schema. Immutable once stored."""
    schema_id: str
    spec: Mapping[str, Any]
    root: MapNode
    registered_at: datetime = field(default_factory=datetime.utcnow)


class SchemaRegistry:
    """
    Process-wide schema store.

    Construct once and inject into SchemaValidator; safe for concurrent
    readers and writers across threads.
    """

    def __init__(self):
        # Map: schema_id -> SchemaDefinition (replaced wholesale on every write)
        self._snapshot: dict[str, SchemaDefinition] = {}

        # Serializes writers only
        self._write_lock = threading.Lock()

    def register(self, schema_id: str, spec: Mapping[str, Any]) -> str:
        """
        Register (or replace) a schema.

        Args:
            schema_id: Plain ("users") or topic-scoped ("users/default") id
            spec: Field name -> spec node declaration

        Returns:
            The schema id

        Raises:
            ValueError: If schema_id is not a non-empty string
            InvalidSpecError: If the root spec is not a mapping
        """
        if not isinstance(schema_id, str) or not schema_id:
            raise ValueError(f"Schema id must be a non-empty string, got {schema_id!r}")

        if not isinstance(spec, Mapping):
            raise InvalidSpecError(
                f"Schema {schema_id!r} root spec must be a mapping, "
                f"got {type(spec).__name__}"
            )

        definition = SchemaDefinition(
            schema_id=schema_id,
            spec=dict(spec),
            root=compile_spec(spec),
        )

        with self._write_lock:
            replaced = schema_id in self._snapshot
            snapshot = dict(self._snapshot)
            # Drop first so a replaced id moves to the end of registration order
            snapshot.pop(schema_id, None)
            snapshot[schema_id] = definition
            self._snapshot = snapshot

        if replaced:
            logger.info(f"Replaced schema {schema_id}: fields {definition.root.field_names}")
        else:
            logger.info(f"Registered schema {schema_id}: fields {definition.root.field_names}")

        return schema_id

    def unregister(self, schema_id: str) -> bool:
        """
        Remove a schema.

        Returns:
            True if the schema existed, False otherwise
        """
        with self._write_lock:
            if schema_id not in self._snapshot:
                return False
            snapshot = dict(self._snapshot)
            del snapshot[schema_id]
            self._snapshot = snapshot

        logger.info(f"Unregistered schema {schema_id}")
        return True

    def get(self, schema_id: str) -> SchemaDefinition | None:
        """Get a schema by id, or None if not registered."""
        return self._snapshot.get(schema_id)

    def require(self, schema_id: str) -> SchemaDefinition:
        """
        Get a schema by id.

        Raises:
            SchemaNotFoundError: If the id is not registered
        """
        snapshot = self._snapshot
        definition = snapshot.get(schema_id)
        if definition is None:
            raise SchemaNotFoundError(schema_id, available=list(snapshot))
        return definition

    def list_schemas(self) -> list[str]:
        """All registered schema ids, in registration order."""
        return list(self._snapshot)

    def resolve_topic_schema_id(self, topic: str) -> str | None:
        """
        Resolve the schema id for a topic by convention.

        Tries "{topic}/default" first, then "{topic}".

        Returns:
            Matching schema id, or None if neither is registered
        """
        snapshot = self._snapshot
        for candidate in topic_schema_candidates(topic):
            if candidate in snapshot:
                return candidate
        return None

    def get_schema_for_topic(self, topic: str) -> SchemaDefinition | None:
        """
        Get the schema for a topic by convention.

        A missing schema is not an error: callers decide whether an unschema'd
        topic is acceptable.
        """
        snapshot = self._snapshot
        for candidate in topic_schema_candidates(topic):
            definition = snapshot.get(candidate)
            if definition is not None:
                return definition
        return None

    def list_schemas_for_topic(self, topic: str) -> list[str]:
        """All schema ids scoped to a topic."""
        return [
            schema_id for schema_id in self._snapshot
            if matches_topic(schema_id, topic)
        ]

    def __contains__(self, schema_id: object) -> bool:
        return schema_id in self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    @property
    def schema_count(self) -> int:
        """Number of registered schemas."""
        return len(self._snapshot)
