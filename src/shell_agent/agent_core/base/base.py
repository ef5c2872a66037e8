"""Core abstractions for language model service implementations."""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Coroutine, Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..logger import get_logger
from ..messages.wire import RenderedMessage
from ..tools.models import ToolCallRequest, ToolSchema

logger = get_logger(__name__)

ProviderResT = TypeVar("ProviderResT")
T = TypeVar("T")

# Normalized stop reasons that signal the model finished its turn.
STOP_REASONS = frozenset({"stop", "end_turn"})


def normalize_stop_reason(reason: Any) -> Optional[str]:
    """Turn a provider finish reason (string or enum) into a lowercase string."""
    if reason is None:
        return None
    value = getattr(reason, "value", reason)
    text = str(value).strip().lower()
    return text or None


class GenerationOptions(BaseModel):
    """Per-request options.

    Attributes:
        temperature: Sampling temperature. None keeps the service default.
        max_tokens: Upper bound on generated tokens. None keeps the service default.
        model: Optional model override for this request.
    """

    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    model: Optional[str] = None


class Choice(BaseModel):
    """One candidate answer.

    Attributes:
        content: Text content, empty when the model only requested tools.
        tool_calls: Requested tool invocations, in the order returned.
        stop_reason: Normalized, lowercase stop indicator if the provider sent one.
    """

    content: str = ""
    tool_calls: List[ToolCallRequest] = Field(default_factory=list)
    stop_reason: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.stop_reason in STOP_REASONS


class GenerationResult(BaseModel, Generic[ProviderResT]):
    """Normalized output of a generation request.

    Attributes:
        choices: Candidate answers; the agent loop only inspects the first.
        raw: Provider-specific response payload for advanced use cases.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    choices: List[Choice] = Field(default_factory=list)
    raw: Optional[ProviderResT] = None


class LanguageModelService(ABC, Generic[ProviderResT]):
    """Abstract base class for language model services.

    Implementations translate the rendered conversation and tool schemas into
    a provider request. Transient failures are retried here with exponential
    backoff; the agent loop itself never retries.
    """

    # Services whose endpoint cannot handle tool schemas set this to False;
    # callers then stay in single-command mode.
    supports_tool_calling: bool = True

    def __init__(self, max_retries: int = 3, base_retry_delay: float = 1.0):
        self.max_retries = max_retries
        self.base_retry_delay = base_retry_delay

    async def _execute_with_retry(
        self,
        func: Callable[..., Coroutine[Any, Any, T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Executes a function with retry logic.

        Args:
            func: The asynchronous function to execute.
            *args: Positional arguments for the function.
            **kwargs: Keyword arguments for the function.

        Returns:
            The result of the function call.

        Raises:
            Exception: The last encountered exception if all retries fail.
        """
        delay = self.base_retry_delay
        for attempt in range(self.max_retries + 1):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                if attempt == self.max_retries:
                    logger.error(f"Service call failed after {attempt + 1} attempt(s): {e}")
                    raise

                logger.warning(f"API Error (Retry: {attempt + 1}/{self.max_retries}): {e}. Waiting {delay}s...")
                await asyncio.sleep(delay)
                delay *= 2

        # range() always runs at least once, so this is only hit with a negative max_retries.
        raise ValueError(f"max_retries must not be negative, got {self.max_retries}")

    async def generate(
        self,
        messages: Sequence[RenderedMessage],
        tools: Optional[Sequence[ToolSchema]] = None,
        options: Optional[GenerationOptions] = None,
    ) -> GenerationResult[ProviderResT]:
        """
        Generate the next assistant turn.

        Args:
            messages: The rendered conversation, system prompt first.
            tools: Tool schemas the model may call. None or empty disables tool calling.
            options: Per-request options.

        Returns:
            The normalized generation result.
        """
        return await self._execute_with_retry(
            self._generate_impl, list(messages), list(tools or []), options or GenerationOptions()
        )

    async def complete(self, prompt: str, options: Optional[GenerationOptions] = None) -> str:
        """
        Single-turn text completion without tools or history.

        Args:
            prompt: The prompt to complete.
            options: Per-request options.

        Returns:
            The generated text.
        """
        return await self._execute_with_retry(self._complete_impl, prompt, options or GenerationOptions())

    async def _complete_impl(self, prompt: str, options: GenerationOptions) -> str:
        result = await self._generate_impl([RenderedMessage.from_text("user", prompt)], [], options)
        if not result.choices:
            return ""
        return result.choices[0].content

    @abstractmethod
    async def _generate_impl(
        self,
        messages: List[RenderedMessage],
        tools: List[ToolSchema],
        options: GenerationOptions,
    ) -> GenerationResult[ProviderResT]:
        pass
