"""
Unit tests for SchemaValidator.

Tests cover:
- Explicit-id validate / explain and SchemaNotFoundError
- Missing fields, type mismatches, extra fields
- Nested maps and collections with path reporting
- Predicate exceptions and invalid spec shapes
- Topic-based validation without a schema
- Agreement between validate and explain
"""

import pytest

from metamorphosis.schema import (
    ErrorKind,
    SchemaNotFoundError,
    is_str,
    map_of,
    min_count,
    one_of,
)


class TestExplicitSchema:

    def test_valid_message(self, validator, registry):
        registry.register("basic", {"id": int, "name": str})
        assert validator.validate({"id": 123, "name": "A"}, "basic") is True
        result = validator.explain({"id": 123, "name": "A"}, "basic")
        assert result.valid is True
        assert result.errors == []
        assert result.schema_id == "basic"

    def test_type_mismatch_and_missing_in_declaration_order(self, validator, registry):
        registry.register("basic", {"id": int, "name": str})
        message = {"id": "x"}
        assert validator.validate(message, "basic") is False

        result = validator.explain(message, "basic")
        assert result.valid is False
        assert [(e.path, e.kind) for e in result.errors] == [
            ("id", ErrorKind.TYPE_MISMATCH),
            ("name", ErrorKind.MISSING),
        ]
        assert result.errors[0].value == "x"
        assert result.errors[0].expected == "int"

    def test_unknown_schema_raises(self, validator):
        with pytest.raises(SchemaNotFoundError, match="Schema not found"):
            validator.validate({}, "non-existent-schema")
        with pytest.raises(SchemaNotFoundError):
            validator.explain({}, "non-existent-schema")

    def test_extra_fields_ignored(self, validator, user_schema):
        message = {"user_id": 123, "name": "John", "email": "j@example.com", "extra": "x"}
        assert validator.validate(message, user_schema) is True

    def test_explicit_null_is_missing(self, validator, user_schema):
        result = validator.explain({"user_id": None, "name": "John", "email": "e"}, user_schema)
        assert [(e.path, e.kind) for e in result.errors] == [("user_id", ErrorKind.MISSING)]

    def test_falsy_values_are_present(self, validator, registry):
        registry.register("falsy", {"count": int, "label": str, "flag": bool, "tags": [str]})
        assert validator.validate({"count": 0, "label": "", "flag": False, "tags": []}, "falsy")

    def test_non_mapping_message_reports_every_field_missing(self, validator, registry):
        registry.register("basic", {"id": int, "name": str})
        result = validator.explain("not-a-map", "basic")
        assert [(e.path, e.kind) for e in result.errors] == [
            ("id", ErrorKind.MISSING),
            ("name", ErrorKind.MISSING),
        ]

    def test_missing_required_field_reported_at_its_path(self, validator, user_schema):
        result = validator.explain({"user_id": 123, "name": "John"}, user_schema)
        assert result.paths == ["email"]
        assert result.errors[0].kind == ErrorKind.MISSING


class TestNestedStructures:

    def test_nested_map(self, validator, registry):
        registry.register("order", {
            "order_id": int,
            "user": {"user_id": int, "name": str, "email": str},
            "total": float,
        })
        valid = {
            "order_id": 123,
            "user": {"user_id": 456, "name": "John", "email": "j@example.com"},
            "total": 99.99,
        }
        assert validator.validate(valid, "order")

        invalid = dict(valid, user={"user_id": "nan", "name": "John"})
        result = validator.explain(invalid, "order")
        assert [(e.path, e.kind) for e in result.errors] == [
            ("user.user_id", ErrorKind.TYPE_MISMATCH),
            ("user.email", ErrorKind.MISSING),
        ]

    def test_nested_map_against_scalar_is_type_mismatch(self, validator, registry):
        registry.register("profile", {"user": {"id": int}})
        result = validator.explain({"user": "not-a-map"}, "profile")
        assert len(result.errors) == 1
        assert result.errors[0].path == "user"
        assert result.errors[0].kind == ErrorKind.TYPE_MISMATCH
        assert result.errors[0].expected == "map{id}"

    def test_collection_of_maps_index_qualified(self, validator, registry):
        registry.register("cart", {
            "cart_id": str,
            "items": [{"product_id": int, "price": float}],
        })
        message = {
            "cart_id": "cart-123",
            "items": [
                {"product_id": 1, "price": 9.5},
                {"product_id": 2, "price": "free"},
                {"price": 1.0},
            ],
        }
        result = validator.explain(message, "cart")
        assert [(e.path, e.kind) for e in result.errors] == [
            ("items[1].price", ErrorKind.TYPE_MISMATCH),
            ("items[2].product_id", ErrorKind.MISSING),
        ]
        assert validator.validate(message, "cart") is False

    def test_collection_of_predicates(self, validator, registry):
        registry.register("product", {"categories": [str]})
        assert validator.validate({"categories": ["Electronics", "Computers"]}, "product")
        result = validator.explain({"categories": ["ok", 7]}, "product")
        assert result.paths == ["categories[1]"]
        assert result.errors[0].value == 7

    def test_collection_against_non_collection(self, validator, registry):
        registry.register("product", {"categories": [str]})
        for value in ("not-a-collection", {"a": "b"}, 5):
            result = validator.explain({"categories": value}, "product")
            assert [(e.path, e.kind) for e in result.errors] == [
                ("categories", ErrorKind.TYPE_MISMATCH)
            ]

    def test_null_collection_item_is_missing(self, validator, registry):
        registry.register("tags", {"tags": [str]})
        result = validator.explain({"tags": ["a", None]}, "tags")
        assert [(e.path, e.kind) for e in result.errors] == [("tags[1]", ErrorKind.MISSING)]

    def test_scalar_item_against_map_element(self, validator, registry):
        registry.register("cart", {"items": [{"sku": str}]})
        result = validator.explain({"items": ["sku-1"]}, "cart")
        assert [(e.path, e.kind) for e in result.errors] == [("items[0]", ErrorKind.TYPE_MISMATCH)]

    def test_complex_explanation_paths(self, validator, registry):
        registry.register("complex", {
            "user": {"id": int, "name": str},
            "items": [{"id": int, "name": str}],
            "metadata": map_of(is_str, is_str),
        })
        message = {
            "user": {"id": "nan", "name": "John"},
            "items": [{"id": 1, "name": "Item 1"}, {"id": "nan", "name": "Item 2"}],
            "metadata": {"key1": "value1", "key2": 123},
        }
        result = validator.explain(message, "complex")
        assert result.paths == ["user.id", "items[1].id", "metadata"]


class TestPredicates:

    def test_builtin_predicates_in_schema(self, validator, registry):
        registry.register("status", {"id": int, "status": one_of("pending", "shipped")})
        registry.register("tags", {"id": int, "tags": min_count(1)})
        assert validator.validate({"id": 1, "status": "pending"}, "status")
        assert not validator.validate({"id": 1, "status": "invalid"}, "status")
        assert validator.validate({"id": 1, "tags": ["a"]}, "tags")
        assert not validator.validate({"id": 1, "tags": []}, "tags")

    def test_raising_predicate_is_failed_match(self, validator, registry):
        def explodes(value):
            raise RuntimeError("boom")

        registry.register("fragile", {"value": explodes, "other": str})
        assert validator.validate({"value": 1, "other": "x"}, "fragile") is False
        result = validator.explain({"value": 1, "other": "x"}, "fragile")
        assert [(e.path, e.kind) for e in result.errors] == [("value", ErrorKind.TYPE_MISMATCH)]

    def test_lambda_predicate(self, validator, registry):
        registry.register("positive", {"amount": lambda v: v > 0})
        assert validator.validate({"amount": 5}, "positive")
        assert not validator.validate({"amount": -5}, "positive")
        # Comparison with a str raises TypeError, which is a failed match
        assert not validator.validate({"amount": "5"}, "positive")


class TestInvalidSpec:

    def test_unsupported_leaf(self, validator, registry):
        registry.register("weird", {"a": 42, "b": str})
        result = validator.explain({"a": 1, "b": "x"}, "weird")
        assert [(e.path, e.kind) for e in result.errors] == [("a", ErrorKind.INVALID_SPEC)]
        assert validator.validate({"a": 1, "b": "x"}, "weird") is False

    def test_multi_element_collection_spec(self, validator, registry):
        registry.register("weird", {"items": [int, str]})
        result = validator.explain({"items": [1, "a"]}, "weird")
        assert result.errors[0].kind == ErrorKind.INVALID_SPEC

    def test_missing_still_wins_over_invalid_spec(self, validator, registry):
        registry.register("weird", {"a": 42})
        result = validator.explain({}, "weird")
        assert result.errors[0].kind == ErrorKind.MISSING


class TestTopicValidation:

    def test_topic_without_schema_is_valid(self, validator):
        assert validator.validate_for_topic({"anything": 1}, "unknown-topic") is True
        result = validator.explain_for_topic({"anything": 1}, "unknown-topic")
        assert result.valid is True
        assert result.errors == []
        assert result.schema_id is None
        assert result.topic == "unknown-topic"

    def test_topic_with_default_schema(self, validator, registry):
        registry.register("users/default", {"user_id": int})
        assert validator.validate_for_topic({"user_id": 1}, "users")
        result = validator.explain_for_topic({"user_id": "1"}, "users")
        assert result.valid is False
        assert result.schema_id == "users/default"
        assert result.topic == "users"


class TestAdHocSpecs:

    def test_validate_spec_with_raw_mapping(self, validator):
        assert validator.validate_spec({"id": 1}, {"id": int})
        result = validator.explain_spec({"id": "1"}, {"id": int})
        assert result.paths == ["id"]
        assert result.schema_id is None

    def test_empty_spec_accepts_anything(self, validator):
        assert validator.validate_spec({}, {})
        assert validator.validate_spec("scalar", {})


class TestAgreement:

    @pytest.mark.parametrize("message", [
        {"id": 1, "tags": ["a"], "user": {"name": "n"}},
        {"id": 1, "tags": [], "user": {"name": "n"}},
        {"id": 1, "tags": ["a", 2], "user": {"name": "n"}},
        {"id": "1", "tags": ["a"], "user": "n"},
        {},
        None,
    ])
    def test_validate_matches_explain(self, validator, registry, message):
        registry.register("mixed", {"id": int, "tags": [str], "user": {"name": str}})
        result = validator.explain(message, "mixed")
        assert validator.validate(message, "mixed") == result.valid
        assert result.valid == (result.errors == [])
