"""Schema helpers for tool parameter definitions."""

from .schema_validator import SchemaValidator

__all__ = ["SchemaValidator"]
