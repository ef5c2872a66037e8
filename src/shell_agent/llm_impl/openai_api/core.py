from typing import Any, Dict, Iterable, List, Optional, cast

import openai
from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from ...agent_core.base import GenerationOptions, GenerationResult, LanguageModelService
from ...agent_core.exceptions import LLMServiceError
from ...agent_core.logger import get_logger
from ...agent_core.messages import RenderedMessage
from ...agent_core.tools.models import ToolSchema
from .adapter import parse_chat_completion, to_openai_messages, to_openai_tools

logger = get_logger(__name__)


class OpenAIService(LanguageModelService[ChatCompletion]):
    """
    Language model service backed by the OpenAI chat completions API.

    Also serves OpenAI-compatible endpoints (DeepSeek, Kimi, GLM) through the
    client's ``base_url``.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model_name: str,
        temp: Optional[float] = None,
        max_tokens: Optional[int] = None,
        max_retries: int = 3,
        base_retry_delay: float = 1.0,
        supports_tool_calling: bool = True,
    ):
        """
        Initializes the OpenAI service.

        Args:
            client: The initialized AsyncOpenAI client.
            model_name: The identifier for the model to use (e.g., 'gpt-4o', 'deepseek-chat').
            temp: Default temperature, used when a request does not set one.
            max_tokens: Default cap on generated tokens, used when a request does not set one.
            max_retries: Number of retries for transient failures.
            base_retry_delay: Initial delay between retries in seconds.
            supports_tool_calling: Whether the endpoint accepts tool schemas.
        """
        super().__init__(max_retries=max_retries, base_retry_delay=base_retry_delay)
        self.client: AsyncOpenAI = client
        self.model: str = model_name
        self.temperature = temp
        self.max_tokens = max_tokens
        self.supports_tool_calling = supports_tool_calling

    async def _generate_impl(
        self,
        messages: List[RenderedMessage],
        tools: List[ToolSchema],
        options: GenerationOptions,
    ) -> GenerationResult[ChatCompletion]:
        request: Dict[str, Any] = {
            "model": options.model or self.model,
            "messages": cast(Iterable[Any], to_openai_messages(messages)),
        }
        if tools and self.supports_tool_calling:
            request["tools"] = to_openai_tools(tools)

        temperature = options.temperature if options.temperature is not None else self.temperature
        if temperature is not None:
            request["temperature"] = temperature
        max_tokens = options.max_tokens if options.max_tokens is not None else self.max_tokens
        if max_tokens is not None:
            request["max_tokens"] = max_tokens

        logger.debug(f"Sending request to OpenAI model '{request['model']}' with {len(messages)} message(s).")
        try:
            response = await self.client.chat.completions.create(**request)
        except openai.OpenAIError as e:
            raise LLMServiceError(f"OpenAI request failed: {e}") from e

        if not response.choices:
            logger.debug("OpenAI response has no choices.")
        else:
            logger.debug(f"OpenAI response received. Finish reason: {response.choices[0].finish_reason}")

        return parse_chat_completion(response)
