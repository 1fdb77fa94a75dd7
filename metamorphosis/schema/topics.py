"""
Topic Resolution

Schemas are tied to bus topics purely by naming convention:

- "orders/default"  -> default schema for topic "orders" (preferred)
- "orders"          -> direct topic schema
- "orders/v2"       -> additional schema scoped to topic "orders"

The namespace is the part of a schema id before the first "/", the bare name
the part after it (or the whole id when there is no "/").
"""

DEFAULT_SCHEMA_NAME = "default"


def split_schema_id(schema_id: str) -> tuple[str | None, str]:
    """Split a schema id into (namespace, bare name)."""
    namespace, sep, name = schema_id.partition("/")
    if not sep:
        return None, schema_id
    return namespace, name


def default_schema_id(topic: str) -> str:
    return f"{topic}/{DEFAULT_SCHEMA_NAME}"


def topic_schema_candidates(topic: str) -> list[str]:
    """Schema ids tried for a topic, in precedence order."""
    return [default_schema_id(topic), topic]


def matches_topic(schema_id: str, topic: str) -> bool:
    """
    Check whether a schema id belongs to a topic.

    True when the bare name equals the topic or the id is namespaced
    under "{topic}/".
    """
    _, name = split_schema_id(schema_id)
    return name == topic or schema_id.startswith(f"{topic}/")
