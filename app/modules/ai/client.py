"""Model invocation client built on pydantic-ai.

``AIClient`` is constructed explicitly and handed to every flow. It offers a
structured mode (``generate``), which returns a validated pydantic object,
and a streaming mode (``stream``), which yields text deltas. Both accept
pydantic-ai ``Tool`` bindings that the model may call mid-generation.

Provider imports are kept lazy so that the client can be used with injected
test models without provider credentials or SDKs being configured.
"""

from __future__ import annotations

from typing import AsyncIterator, Optional, Sequence, TypeVar, Union

import httpx
from pydantic_ai import Agent, Tool
from pydantic_ai.exceptions import AgentRunError
from pydantic_ai.messages import ModelMessage, UserContent
from pydantic_ai.models import Model

from app.core.config import AISettings, settings
from app.core.logging import get_logger
from app.modules.ai.errors import GenerationFailed

logger = get_logger(__name__)

OutputT = TypeVar("OutputT")


def _build_google_model(ai: AISettings):
    """Build the Google Gemini model provider (lazy import)."""
    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    if not ai.gemini_api_key:
        raise RuntimeError(
            "Gemini API key not configured. Set GEMINI_API_KEY in your environment."
        )

    provider = GoogleProvider(api_key=ai.gemini_api_key)
    return GoogleModel(ai.gemini_model, provider=provider)


def _build_openrouter_model(ai: AISettings):
    """Build OpenRouter model via OpenAI-compatible provider (lazy import)."""
    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    if not ai.openrouter_api_key:
        raise RuntimeError(
            "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your environment."
        )

    provider = OpenAIProvider(
        api_key=ai.openrouter_api_key,
        base_url="https://openrouter.ai/api/v1",
    )
    return OpenAIChatModel(ai.openrouter_model, provider=provider)


def build_model(ai: Optional[AISettings] = None):
    ai = ai or settings.ai
    provider = (ai.model_provider or "google").lower()
    if provider == "openrouter":
        return _build_openrouter_model(ai)
    return _build_google_model(ai)


class AIClient:
    """Runs prompts against one configured model."""

    def __init__(self, model: Union[Model, str], *, output_retries: int = 1) -> None:
        self.model = model
        self.output_retries = max(0, int(output_retries))

    @classmethod
    def from_settings(cls, ai: Optional[AISettings] = None) -> "AIClient":
        ai = ai or settings.ai
        return cls(build_model(ai), output_retries=ai.output_retries)

    def _agent(
        self,
        output_type: type[OutputT],
        system_prompt: Optional[str],
        tools: Sequence[Tool],
    ) -> "Agent[None, OutputT]":
        return Agent[None, OutputT](
            self.model,
            output_type=output_type,
            system_prompt=system_prompt or (),
            retries=self.output_retries,
            tools=list(tools),
        )

    async def generate(
        self,
        prompt: str,
        output_type: type[OutputT],
        *,
        system_prompt: Optional[str] = None,
        tools: Sequence[Tool] = (),
    ) -> OutputT:
        """Ask the model for a JSON object matching ``output_type``."""
        agent = self._agent(output_type, system_prompt, tools)
        try:
            res = await agent.run(prompt)
        except (AgentRunError, httpx.HTTPError) as e:
            logger.warning(
                "Structured generation for %s failed: %s", output_type.__name__, e
            )
            raise GenerationFailed(
                "The AI model did not return a usable response. Please try again."
            ) from e
        return res.output

    async def stream(
        self,
        prompt: Union[str, Sequence[UserContent]],
        *,
        message_history: Optional[list[ModelMessage]] = None,
        system_prompt: Optional[str] = None,
        tools: Sequence[Tool] = (),
    ) -> AsyncIterator[str]:
        """Yield text deltas in emission order until the model finishes.

        Chunks already yielded stay delivered if the stream fails later; the
        failure is raised to the consumer as ``GenerationFailed``.
        """
        agent = self._agent(str, system_prompt, tools)
        try:
            async with agent.run_stream(
                prompt, message_history=message_history
            ) as result:
                async for chunk in result.stream_text(delta=True, debounce_by=None):
                    if chunk:
                        yield chunk
        except (AgentRunError, httpx.HTTPError) as e:
            logger.warning("Streaming generation failed: %s", e)
            raise GenerationFailed("The AI model stream was interrupted.") from e
