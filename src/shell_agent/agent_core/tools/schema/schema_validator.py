"""Validation and sanitization of tool parameter schemas."""

from typing import Any, Dict, Set, Type

import jsonref  # type: ignore
from pydantic import BaseModel

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

_METADATA_KEYS = ("$defs", "$schema", "$id", "title", "definitions")


class SchemaValidator:
    """
    Helper class for validating and sanitizing JSON schemas for LLM tools.
    """

    @staticmethod
    def build_parameters_schema(args_model: Type[BaseModel]) -> Dict[str, Any]:
        """Derive a provider-ready parameter schema from a pydantic arguments model.

        The raw model schema is checked for recursion, its ``$ref`` entries are
        resolved inline and the result is sanitized.

        Args:
            args_model: Pydantic model describing the tool arguments.

        Returns:
            A self-contained JSON schema dictionary.

        Raises:
            ToolValidationError: If the model produces a recursive schema.
        """
        raw_schema = args_model.model_json_schema()
        SchemaValidator.assert_no_recursive_refs(raw_schema)

        # proxies=False ensures we get a plain dict back, not JsonRef objects
        resolved = jsonref.replace_refs(raw_schema, proxies=False)
        return SchemaValidator.sanitize_schema(resolved)

    @staticmethod
    def assert_object_schema(schema: Any, tool_name: str) -> None:
        """Ensure a tool's parameter schema describes a JSON object.

        Raises:
            ToolValidationError: If the schema is not a dict with ``type: object``.
        """
        if not isinstance(schema, dict) or schema.get("type") != "object":
            msg = f"Tool '{tool_name}' must declare an object parameter schema."
            logger.error(msg)
            raise ToolValidationError(msg)

        properties = schema.get("properties", {})
        if not isinstance(properties, dict):
            msg = f"Tool '{tool_name}' has a malformed 'properties' entry."
            logger.error(msg)
            raise ToolValidationError(msg)

        missing = [name for name in schema.get("required", []) if name not in properties]
        if missing:
            msg = f"Tool '{tool_name}' requires undeclared parameters: {', '.join(missing)}"
            logger.error(msg)
            raise ToolValidationError(msg)

    @staticmethod
    def assert_no_recursive_refs(schema: Dict[str, Any]) -> None:
        """
        Checks if the schema contains recursive references by traversing the graph.
        Raises ToolValidationError if a cycle is detected.

        Args:
            schema: The JSON schema to check.

        Raises:
            ToolValidationError: If a recursive reference is found.
        """
        defs = schema.get("$defs", {}) or schema.get("definitions", {})

        def check(node: Any, path: Set[str]) -> None:
            if isinstance(node, dict):
                if "$ref" in node:
                    ref = node["$ref"]
                    if ref in path:
                        msg = (
                            f"Recursive structure detected: {ref}. "
                            "Recursive structures are not allowed in tool inputs."
                        )
                        logger.error(msg)
                        raise ToolValidationError(msg)

                    # e.g. #/$defs/MyModel
                    if ref.startswith("#"):
                        parts = ref.split("/")
                        if len(parts) >= 3:
                            def_name = parts[-1]
                            if def_name in defs:
                                check(defs[def_name], path | {ref})
                    return

                for v in node.values():
                    check(v, path)
            elif isinstance(node, list):
                for item in node:
                    check(item, path)

        check(schema, set())

    @staticmethod
    def sanitize_schema(schema: Any) -> Any:
        """
        Cleans up the schema for better compatibility with LLM providers.
        Removes $defs, $schema, $id, title.
        Simplifies Optional fields (anyOf with null).
        Enforces additionalProperties: false for objects.

        Args:
            schema: The JSON schema to sanitize.

        Returns:
            The sanitized schema.
        """
        if not isinstance(schema, dict):
            return schema

        new_schema = schema.copy()

        for key in _METADATA_KEYS:
            new_schema.pop(key, None)

        # Optional[X] arrives as anyOf [X, null]
        if "anyOf" in new_schema:
            non_null = [x for x in new_schema["anyOf"] if not (isinstance(x, dict) and x.get("type") == "null")]
            if len(non_null) == 1 and isinstance(non_null[0], dict):
                merged = {k: v for k, v in new_schema.items() if k != "anyOf"}
                merged.update(non_null[0])
                if "description" in new_schema:
                    merged["description"] = new_schema["description"]
                return SchemaValidator.sanitize_schema(merged)

        if new_schema.get("type") == "object" and "additionalProperties" not in new_schema:
            new_schema["additionalProperties"] = False

        for key, value in new_schema.items():
            if key == "properties" and isinstance(value, dict):
                # Property names are user data, not schema keywords.
                new_schema[key] = {name: SchemaValidator.sanitize_schema(prop) for name, prop in value.items()}
            elif isinstance(value, dict):
                new_schema[key] = SchemaValidator.sanitize_schema(value)
            elif isinstance(value, list):
                new_schema[key] = [
                    SchemaValidator.sanitize_schema(item) if isinstance(item, dict) else item for item in value
                ]

        return new_schema
