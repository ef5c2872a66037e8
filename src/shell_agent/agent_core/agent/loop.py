"""The agent loop: drives the language model, dispatches tool calls and decides termination."""

import time
from typing import List, Optional

from .models import (
    AgentConfig,
    AgentResult,
    MAX_ITERATIONS_ERROR,
    NO_RESPONSE_ERROR,
    RunState,
    ToolExecution,
)
from ..base import GenerationOptions, LanguageModelService
from ..confirmation import ConfirmFunc, ask_confirmation
from ..context import ConversationContext
from ..exceptions import AgentStartError, ToolExecutionError, ToolNotFoundError
from ..logger import get_logger
from ..tools.models import ToolCallRequest, ToolInput
from ..tools.registry import ToolRegistry

logger = get_logger(__name__)


class Agent:
    """
    Bounded tool-calling loop around a language model service.

    Each iteration renders the context, calls the service and inspects the
    first choice. Tool calls are executed one after another in the order the
    model returned them and their results are appended to the context; a
    plain text answer or an explicit stop ends the run. A run never makes
    more than ``config.max_iterations`` service calls.

    The agent owns its context exclusively, so an Agent instance serves one
    run at a time. The registry may be shared between agents.
    """

    # Exceptions that are considered recoverable and fed back to the model.
    # Anything else is logged with its traceback and reported with a
    # sanitized message.
    RECOVERABLE_ERRORS = (
        ToolExecutionError,
        FileNotFoundError,
        FileExistsError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
        OSError,
        ValueError,
        TypeError,
    )

    def __init__(
        self,
        service: LanguageModelService,
        registry: ToolRegistry,
        config: Optional[AgentConfig] = None,
        context: Optional[ConversationContext] = None,
        confirm: Optional[ConfirmFunc] = None,
    ) -> None:
        """Initialize the agent.

        Args:
            service: Language model service used for every iteration.
            registry: Tools available to the model.
            config: Agent configuration. Defaults to ``AgentConfig()``.
            context: Conversation context. A fresh one is created when omitted.
            confirm: Optional confirmation gate for tools that require approval.
        """
        self.service = service
        self.registry = registry
        self.config = config or AgentConfig()
        self.context = context if context is not None else ConversationContext(
            max_messages=self.config.max_context_messages
        )
        self._confirm = confirm

    def set_confirm_func(self, confirm: Optional[ConfirmFunc]) -> None:
        self._confirm = confirm

    def set_system_prompt(self, prompt: str) -> None:
        self.context.system_prompt = prompt

    def reset(self) -> None:
        """Clear the conversation, keeping system prompt and window size."""
        self.context.clear()

    async def simple_call(self, prompt: str) -> str:
        """Single completion without tools or conversation history."""
        return await self.service.complete(prompt, self._options())

    async def run(self, user_prompt: str) -> AgentResult:
        """Run the loop for one user request.

        Args:
            user_prompt: The user's request.

        Returns:
            The run result. Service failures, empty responses and the
            iteration limit are reported through ``success``/``error``.

        Raises:
            AgentStartError: If the prompt is blank.
        """
        if not user_prompt or not user_prompt.strip():
            raise AgentStartError("user prompt cannot be empty")

        self.context.add_user_message(user_prompt)

        tools = self.registry.to_schemas(self.config.allowed_tools)
        if self.config.allowed_tools is not None:
            unknown = set(self.config.allowed_tools) - {tool.name for tool in tools}
            if unknown:
                logger.warning(f"Allowed tools not found in registry: {', '.join(sorted(unknown))}")

        options = self._options()
        executions: List[ToolExecution] = []
        max_iterations = self.config.max_iterations

        for index in range(max_iterations):
            iteration = index + 1
            logger.info(f"Iteration {iteration}/{max_iterations}: calling language model.")

            try:
                response = await self.service.generate(self.context.render(), tools, options)
            except Exception as e:
                logger.error(f"Language model service call failed: {e}", exc_info=True)
                return self._finish(RunState.FAILED, executions, iteration, error=str(e) or type(e).__name__)

            if not response.choices:
                logger.error("Language model returned no choices.")
                return self._finish(RunState.FAILED, executions, iteration, error=NO_RESPONSE_ERROR)

            choice = response.choices[0]

            if choice.tool_calls:
                logger.info(f"Processing {len(choice.tool_calls)} tool call(s).")
                self.context.add_assistant_message_with_tool_calls(choice.content, choice.tool_calls)
                for tool_call in choice.tool_calls:
                    execution = await self._execute_tool_call(tool_call)
                    executions.append(execution)
                    self.context.add_tool_result(tool_call.call_id, execution.feedback_text(), name=tool_call.name)
                continue

            if choice.content:
                self.context.add_assistant_message(choice.content)
                return self._finish(RunState.SUCCEEDED, executions, iteration, final_answer=choice.content)

            if choice.is_complete:
                return self._finish(RunState.SUCCEEDED, executions, iteration)

            logger.warning("Language model returned neither text nor tool calls; requesting another turn.")

        logger.warning(f"Max iterations ({max_iterations}) reached. Stopping execution.")
        return self._finish(
            RunState.FAILED, executions, max_iterations, error=f"{MAX_ITERATIONS_ERROR} ({max_iterations})"
        )

    async def _execute_tool_call(self, tool_call: ToolCallRequest) -> ToolExecution:
        """Dispatch one tool call through the registry and the confirmation gate.

        Failures are recorded on the returned execution and never abort the run.
        """
        logger.debug(f"Handling tool call: {tool_call.name} (ID: {tool_call.call_id})")
        start = time.perf_counter()

        def record(**fields: object) -> ToolExecution:
            return ToolExecution(
                tool_name=tool_call.name,
                call_id=tool_call.call_id,
                input=tool_call.arguments,
                duration=time.perf_counter() - start,
                **fields,  # type: ignore[arg-type]
            )

        try:
            tool = self.registry.get(tool_call.name)
        except ToolNotFoundError as e:
            logger.warning(f"Model requested unknown tool '{tool_call.name}'.")
            return record(error=str(e))

        tool_input = ToolInput.from_raw(tool_call.arguments, self.config.working_dir)

        needs_confirmation = tool.requires_confirmation and not self.config.auto_approve
        if needs_confirmation and self._confirm is not None:
            try:
                description = tool.describe_call(tool_input)
                approved = await ask_confirmation(self._confirm, tool.name, description, tool_call.arguments)
            except Exception as e:
                logger.error(f"Confirmation for tool '{tool.name}' failed: {e}", exc_info=True)
                return record(error=f"confirmation failed: {e}")

            if not approved:
                logger.info(f"Tool '{tool.name}' skipped by user.")
                return record(skipped=True)
        elif needs_confirmation:
            logger.debug(f"No confirmation gate configured; running '{tool.name}' without approval.")

        try:
            logger.info(f"Executing tool '{tool.name}'...")
            output = await tool.execute(tool_input)
        except self.RECOVERABLE_ERRORS as e:
            msg = str(e) or type(e).__name__
            logger.warning(f"Recoverable error in '{tool.name}': {msg} ({type(e).__name__})")
            return record(approved=True, error=msg)
        except Exception as e:
            logger.error(f"Unexpected error executing tool '{tool.name}': {e}", exc_info=True)
            return record(approved=True, error=f"An internal error occurred while executing tool '{tool.name}'.")

        if output.success:
            logger.info(f"Tool '{tool.name}' executed successfully.")
            return record(approved=True, output=output.result)

        logger.info(f"Tool '{tool.name}' reported failure: {output.error}")
        return record(approved=True, output=output.result, error=output.error or "tool execution failed")

    def _options(self) -> GenerationOptions:
        return GenerationOptions(temperature=self.config.temperature, max_tokens=self.config.max_tokens)

    @staticmethod
    def _finish(
        state: RunState,
        executions: List[ToolExecution],
        iterations: int,
        final_answer: str = "",
        error: Optional[str] = None,
    ) -> AgentResult:
        return AgentResult(
            final_answer=final_answer,
            tools_used=list(executions),
            iterations=iterations,
            success=state is RunState.SUCCEEDED,
            error=error,
            state=state,
        )
