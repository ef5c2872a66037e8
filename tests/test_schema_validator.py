from typing import List, Optional

import pytest
from pydantic import BaseModel, Field

from shell_agent.agent_core import ToolValidationError
from shell_agent.agent_core.tools.schema import SchemaValidator


def test_assert_no_recursive_refs_no_recursion() -> None:
    schema = {
        "type": "object",
        "properties": {
            "prop1": {"type": "string"},
            "prop2": {"type": "object", "properties": {"subprop": {"type": "integer"}}},
        },
    }
    # Should not raise
    SchemaValidator.assert_no_recursive_refs(schema)


def test_assert_no_recursive_refs_with_recursion() -> None:
    schema = {
        "$defs": {"Node": {"type": "object", "properties": {"child": {"$ref": "#/$defs/Node"}}}},
        "properties": {"root": {"$ref": "#/$defs/Node"}},
    }
    with pytest.raises(ToolValidationError, match="Recursive structure detected"):
        SchemaValidator.assert_no_recursive_refs(schema)


def test_sanitize_schema_removes_metadata() -> None:
    schema = {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "title": "Args",
        "type": "object",
        "properties": {"path": {"type": "string", "title": "Path"}},
    }

    sanitized = SchemaValidator.sanitize_schema(schema)

    assert "$schema" not in sanitized
    assert "title" not in sanitized
    assert "title" not in sanitized["properties"]["path"]
    assert sanitized["additionalProperties"] is False


def test_sanitize_keeps_property_named_like_a_keyword() -> None:
    schema = {"type": "object", "properties": {"title": {"type": "string"}}}

    sanitized = SchemaValidator.sanitize_schema(schema)

    assert "title" in sanitized["properties"]


def test_sanitize_flattens_optional() -> None:
    schema = {"anyOf": [{"type": "string"}, {"type": "null"}], "description": "maybe"}

    assert SchemaValidator.sanitize_schema(schema) == {"type": "string", "description": "maybe"}


class Inner(BaseModel):
    value: int


class Outer(BaseModel):
    name: str = Field(description="A name")
    items: List[Inner]
    note: Optional[str] = None


def test_build_parameters_schema_resolves_refs() -> None:
    schema = SchemaValidator.build_parameters_schema(Outer)

    assert "$defs" not in schema
    item_schema = schema["properties"]["items"]["items"]
    assert item_schema["type"] == "object"
    assert item_schema["properties"]["value"]["type"] == "integer"
    assert item_schema["additionalProperties"] is False
    assert schema["properties"]["note"]["type"] == "string"
    assert schema["required"] == ["name", "items"]


class Tree(BaseModel):
    children: List["Tree"] = []


def test_build_parameters_schema_rejects_recursion() -> None:
    with pytest.raises(ToolValidationError):
        SchemaValidator.build_parameters_schema(Tree)


def test_assert_object_schema() -> None:
    SchemaValidator.assert_object_schema({"type": "object", "properties": {}}, "ok")

    with pytest.raises(ToolValidationError):
        SchemaValidator.assert_object_schema({"type": "string"}, "bad")
    with pytest.raises(ToolValidationError):
        SchemaValidator.assert_object_schema({"type": "object", "properties": []}, "bad")
