#!/usr/bin/env python3
"""
Topic Schema Example Script

Demonstrates topic-scoped schemas and the validation gate.

Usage:
    python scripts/example_topic_schemas.py

This script:
1. Registers topic-scoped schemas (users, orders, notifications)
2. Validates messages by topic and prints diagnostics
3. Runs a strict gate over a batch of outgoing messages
4. Shows composition with schema_ref / any_of
"""

import logging
import sys

# Add project root to path
sys.path.insert(0, ".")

from metamorphosis.schema import (
    SchemaRegistry,
    SchemaValidator,
    SchemaValidationError,
    any_of,
    is_str,
    map_of,
    min_count,
    one_of,
    schema_ref,
)
from metamorphosis.gate import GateMode, ValidationGate

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_topic_schemas(registry: SchemaRegistry) -> None:
    """Register schemas scoped to specific topics."""
    registry.register("users/default", {
        "user_id": int,
        "name": str,
        "email": str,
        "created_at": str,
    })
    registry.register("orders/default", {
        "order_id": str,
        "user_id": int,
        "total": float,
        "status": one_of("pending", "confirmed", "shipped", "delivered"),
        "items": [{"sku": str, "quantity": int}],
    })
    registry.register("notifications", {
        "notification_id": str,
        "user_id": int,
        "message": str,
        "tags": min_count(1),
        "metadata": map_of(is_str, is_str),
    })


def example_topic_validation(validator: SchemaValidator) -> None:
    logger.info("=" * 60)
    logger.info("Example: Topic Validation")
    logger.info("=" * 60)

    order = {
        "order_id": "o-1001",
        "user_id": 42,
        "total": 59.9,
        "status": "pending",
        "items": [{"sku": "A-1", "quantity": 2}, {"sku": "B-7", "quantity": "two"}],
    }
    result = validator.explain_for_topic(order, "orders")
    logger.info(f"orders -> schema {result.schema_id}, valid={result.valid}")
    for error in result.errors:
        logger.info(f"  {error.describe()}")

    result = validator.explain_for_topic({"anything": True}, "audit")
    logger.info(f"audit -> schema {result.schema_id}, valid={result.valid} (no schema)")


def example_gate(validator: SchemaValidator) -> None:
    logger.info("=" * 60)
    logger.info("Example: Strict Gate")
    logger.info("=" * 60)

    gate = ValidationGate(validator, mode=GateMode.TOPIC, strict=True)
    outgoing = [
        ("users", {"user_id": 123, "name": "John Doe", "email": "john@example.com",
                   "created_at": "2024-09-01T10:00:00Z"}),
        ("users", {"user_id": "123", "name": "Jane"}),
        ("notifications", {"notification_id": "n-1", "user_id": 123, "message": "hi",
                           "tags": ["welcome"], "metadata": {"channel": "email"}}),
        ("audit", {"event": "login"}),
    ]

    sent = 0
    for topic, message in outgoing:
        try:
            gate.require(topic, message)
        except SchemaValidationError as e:
            logger.info(f"Dropped message for {topic}: {e}")
            continue
        sent += 1
        logger.info(f"Would send to {topic}: {message}")

    logger.info(f"Sent {sent}/{len(outgoing)} messages")


def example_composition(registry: SchemaRegistry, validator: SchemaValidator) -> None:
    logger.info("=" * 60)
    logger.info("Example: Composition")
    logger.info("=" * 60)

    registry.register("payments/card", {"card_number": str, "expiry": str})
    registry.register("payments/iban", {"iban": str})
    registry.register("checkout", {
        "customer": schema_ref("users/default"),
        "payment": any_of("payments/card", "payments/iban"),
    })

    checkout = {
        "customer": {"user_id": 1, "name": "Ana", "email": "ana@example.com"},
        "payment": {"paypal": "ana@example.com"},
    }
    result = validator.explain(checkout, "checkout")
    logger.info(f"checkout valid={result.valid}")
    for error in result.errors:
        logger.info(f"  {error.describe()}")


def main() -> int:
    registry = SchemaRegistry()
    validator = SchemaValidator(registry)

    setup_topic_schemas(registry)
    logger.info(f"Registered schemas: {registry.list_schemas()}")
    logger.info(f"Schemas for 'orders': {registry.list_schemas_for_topic('orders')}")

    example_topic_validation(validator)
    example_gate(validator)
    example_composition(registry, validator)
    return 0


if __name__ == "__main__":
    sys.exit(main())
