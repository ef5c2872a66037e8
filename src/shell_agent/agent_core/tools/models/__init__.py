"""Tool-related data models."""

from .models import SafetyLevel, Tool, ToolInput, ToolOutput, ToolSchema
from .tool_call import ToolCallRequest

__all__ = ["SafetyLevel", "Tool", "ToolInput", "ToolOutput", "ToolSchema", "ToolCallRequest"]
