from .models import SafetyLevel, Tool, ToolInput, ToolOutput, ToolSchema, ToolCallRequest
from .registry import ToolRegistry
from .schema import SchemaValidator
from .builtin import BashTool, FileReadTool, FileWriteTool, default_registry

__all__ = [
    "SafetyLevel",
    "Tool",
    "ToolInput",
    "ToolOutput",
    "ToolSchema",
    "ToolCallRequest",
    "ToolRegistry",
    "SchemaValidator",
    "BashTool",
    "FileReadTool",
    "FileWriteTool",
    "default_registry",
]
