from typing import Callable, List

import pytest

from shell_agent.agent_core import AgentConfig, ToolCallRequest

from fakes import FakeService


@pytest.fixture
def make_call() -> Callable[..., ToolCallRequest]:
    counter: List[int] = [0]

    def _make(name: str, arguments: str = "{}") -> ToolCallRequest:
        counter[0] += 1
        return ToolCallRequest(name=name, call_id=f"call_{counter[0]}", arguments=arguments)

    return _make


@pytest.fixture
def auto_config(tmp_path) -> AgentConfig:
    return AgentConfig(auto_approve=True, working_dir=str(tmp_path))


@pytest.fixture
def fake_service() -> FakeService:
    return FakeService()
