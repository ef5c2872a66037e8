import threading
from typing import Any, Dict, List

import pytest

from shell_agent.agent_core import (
    SafetyLevel,
    Tool,
    ToolInput,
    ToolNotFoundError,
    ToolOutput,
    ToolRegistrationError,
    ToolRegistry,
    ToolValidationError,
    default_registry,
)


class EchoTool(Tool):
    name = "echo"
    description = "Echoes its input."

    async def execute(self, tool_input: ToolInput) -> ToolOutput:
        return ToolOutput.ok(tool_input.raw)


class OtherEchoTool(EchoTool):
    description = "A different echo."


def make_tool(tool_name: str, tool_description: str = "desc", params: Any = None) -> Tool:
    class _Dynamic(Tool):
        name = tool_name
        description = tool_description

        @property
        def parameters(self) -> Dict[str, Any]:
            return params if params is not None else {"type": "object", "properties": {}}

        async def execute(self, tool_input: ToolInput) -> ToolOutput:
            return ToolOutput.ok("")

    return _Dynamic()


def test_register_and_get() -> None:
    registry = ToolRegistry()
    tool = EchoTool()

    registry.register(tool)

    assert registry.get("echo") is tool
    assert "echo" in registry
    assert registry.has("echo")
    assert len(registry) == 1


def test_get_unknown_tool_raises() -> None:
    registry = ToolRegistry()

    with pytest.raises(ToolNotFoundError, match="unknown tool: missing"):
        registry.get("missing")


def test_register_replaces_same_name() -> None:
    registry = ToolRegistry([EchoTool()])
    replacement = OtherEchoTool()

    registry.register(replacement)

    assert registry.get("echo") is replacement
    assert len(registry) == 1


def test_unregister() -> None:
    registry = ToolRegistry([EchoTool()])

    registry.unregister("echo")

    assert "echo" not in registry
    with pytest.raises(ToolNotFoundError):
        registry.unregister("echo")


def test_all_and_names_keep_registration_order() -> None:
    registry = ToolRegistry([make_tool("b"), make_tool("a"), make_tool("c")])

    assert registry.names() == ["b", "a", "c"]
    assert [t.name for t in registry.all()] == ["b", "a", "c"]


def test_filter_by_names_ignores_unknown() -> None:
    registry = ToolRegistry([make_tool("a"), make_tool("b")])

    filtered = registry.filter_by_names(["b", "zzz"])

    assert [t.name for t in filtered] == ["b"]


def test_to_schemas() -> None:
    registry = default_registry()

    schemas = registry.to_schemas()
    by_name = {s.name: s for s in schemas}

    assert set(by_name) == {"bash", "file_read", "file_write"}
    bash = by_name["bash"].parameters
    assert bash["type"] == "object"
    assert bash["required"] == ["command"]
    assert bash["additionalProperties"] is False
    assert "title" not in bash

    assert [s.name for s in registry.to_schemas(["file_write"])] == ["file_write"]
    assert registry.to_schemas([]) == []


def test_builtin_safety_levels() -> None:
    registry = default_registry()

    assert registry.get("bash").safety_level is SafetyLevel.DANGEROUS
    assert registry.get("file_write").safety_level is SafetyLevel.MODERATE
    assert registry.get("file_read").safety_level is SafetyLevel.SAFE
    assert registry.get("bash").requires_confirmation
    assert registry.get("file_write").requires_confirmation
    assert not registry.get("file_read").requires_confirmation


def test_default_registry_enabled_subset() -> None:
    registry = default_registry(bash_timeout=5, enabled=["bash"])

    assert registry.names() == ["bash"]
    assert registry.get("bash").timeout == 5  # type: ignore[attr-defined]


@pytest.mark.parametrize("bad_name", ["", "has space", "x" * 65, "semi;colon"])
def test_invalid_name_rejected(bad_name: str) -> None:
    with pytest.raises(ToolValidationError, match="Invalid tool name"):
        ToolRegistry().register(make_tool(bad_name))


def test_missing_description_rejected() -> None:
    with pytest.raises(ToolValidationError, match="missing description"):
        ToolRegistry().register(make_tool("nodesc", tool_description=""))


def test_non_object_schema_rejected() -> None:
    with pytest.raises(ToolValidationError, match="object parameter schema"):
        ToolRegistry().register(make_tool("arr", params={"type": "array"}))


def test_required_must_be_declared() -> None:
    params = {"type": "object", "properties": {"a": {"type": "string"}}, "required": ["a", "b"]}
    with pytest.raises(ToolValidationError, match="undeclared parameters: b"):
        ToolRegistry().register(make_tool("req", params=params))


def test_non_tool_rejected() -> None:
    with pytest.raises(ToolRegistrationError):
        ToolRegistry().register("not a tool")  # type: ignore[arg-type]


def test_concurrent_registration_and_lookup() -> None:
    registry = ToolRegistry()
    errors: List[BaseException] = []

    def worker(index: int) -> None:
        try:
            for j in range(50):
                name = f"tool_{index}_{j}"
                registry.register(make_tool(name))
                assert registry.get(name).name == name
                registry.to_schemas()
        except BaseException as e:  # noqa: BLE001
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(registry) == 8 * 50
