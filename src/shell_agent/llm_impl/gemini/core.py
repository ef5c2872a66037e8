from typing import List, Optional

from google.genai import errors, types
from google.genai.client import AsyncClient
from google.genai.types import GenerateContentResponse

from ...agent_core.base import GenerationOptions, GenerationResult, LanguageModelService
from ...agent_core.exceptions import LLMServiceError
from ...agent_core.logger import get_logger
from ...agent_core.messages import RenderedMessage
from ...agent_core.tools.models import ToolSchema
from .adapter import parse_generate_content_response, to_gemini_contents, to_gemini_tool

logger = get_logger(__name__)


class GeminiService(LanguageModelService[GenerateContentResponse]):
    """
    Language model service backed by Google's Gemini models.

    Each request is stateless: the full rendered conversation is sent with
    ``generate_content`` and the SDK's automatic function calling is
    disabled, so tool calls come back to the agent loop.
    """

    def __init__(
        self,
        aclient: AsyncClient,
        model_name: str,
        temp: Optional[float] = None,
        max_tokens: Optional[int] = None,
        max_retries: int = 3,
        base_retry_delay: float = 1.0,
    ):
        """
        Initializes the Gemini service.

        Args:
            aclient: The initialized Google GenAI async client.
            model_name: The identifier for the Gemini model to use (e.g., 'gemini-2.0-flash').
            temp: Default temperature, used when a request does not set one.
            max_tokens: Default cap on generated tokens, used when a request does not set one.
            max_retries: Number of retries for transient failures.
            base_retry_delay: Initial delay between retries in seconds.
        """
        super().__init__(max_retries=max_retries, base_retry_delay=base_retry_delay)
        self.client: AsyncClient = aclient
        self.model: str = model_name
        self.temperature = temp
        self.max_tokens = max_tokens
        logger.info(f"Initialized GeminiService with model='{model_name}', temp={temp}, max_tokens={max_tokens}")

    def _build_config(self, system_instruction: Optional[str], tools: List[ToolSchema], options: GenerationOptions):
        tool = to_gemini_tool(tools)
        return types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=options.temperature if options.temperature is not None else self.temperature,
            max_output_tokens=options.max_tokens if options.max_tokens is not None else self.max_tokens,
            tools=[tool] if tool else None,
            automatic_function_calling=types.AutomaticFunctionCallingConfig(disable=True),
        )

    async def _generate_impl(
        self,
        messages: List[RenderedMessage],
        tools: List[ToolSchema],
        options: GenerationOptions,
    ) -> GenerationResult[GenerateContentResponse]:
        system_instruction, contents = to_gemini_contents(messages)
        config = self._build_config(system_instruction, tools, options)
        model = options.model or self.model

        logger.debug(f"Sending {len(contents)} content(s) to Gemini (model={model}).")
        try:
            response = await self.client.models.generate_content(
                model=model,
                contents=contents,  # type: ignore[arg-type]
                config=config,
            )
        except errors.APIError as e:
            raise LLMServiceError(f"Gemini request failed: {e}") from e

        return parse_generate_content_response(response)
