"""OpenAI Agents configuration for free-text completions.

The API key is supplied per run instead of at import time, since its absence
is a supported mode rather than a configuration error.
"""

from typing import Awaitable, Callable

import structlog
from agents import (
    Agent,
    ModelSettings,
    OpenAIChatCompletionsModel,
    Runner,
    set_tracing_disabled,
    set_tracing_export_api_key,
)
from openai import AsyncOpenAI

from hfdaily.ai.prompts import ANALYST_INSTRUCTIONS
from hfdaily.config.settings import Settings, settings
from hfdaily.exceptions import ModelServiceError

logger = structlog.get_logger()

# (prompt, max_tokens) -> model text
CompletionFn = Callable[[str, int], Awaitable[str]]

# Tracing needs a key for the official endpoint; a custom base URL without a
# tracing key would fail every export with 401.
if not settings.openai_tracing_enabled:
    set_tracing_disabled(True)
elif settings.openai_tracing_api_key:
    set_tracing_export_api_key(settings.openai_tracing_api_key.get_secret_value())
elif settings.openai_base_url:
    set_tracing_disabled(True)


class OpenAICompleter:
    """Free-text completion through an OpenAI Agents SDK agent.

    Calling an instance sends one prompt and returns the agent's final text.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str | None = None,
        timeout: int = 60,
        temperature: float = 0.7,
    ):
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        self._model = model
        self._temperature = temperature

    @classmethod
    def from_settings(cls, api_key: str, config: Settings) -> "OpenAICompleter":
        return cls(
            api_key=api_key,
            model=config.openai_model,
            base_url=config.openai_base_url,
            timeout=config.openai_timeout,
            temperature=config.ai_temperature,
        )

    def _build_agent(self, max_tokens: int) -> Agent:
        return Agent(
            name="PaperAnalyst",
            instructions=ANALYST_INSTRUCTIONS,
            model=OpenAIChatCompletionsModel(model=self._model, openai_client=self._client),
            model_settings=ModelSettings(
                temperature=self._temperature,
                max_tokens=max_tokens,
            ),
        )

    async def __call__(self, prompt: str, max_tokens: int) -> str:
        """Run one completion.

        Raises:
            ModelServiceError: On any SDK, network, or timeout failure.
        """
        try:
            result = await Runner.run(self._build_agent(max_tokens), prompt)
        except Exception as e:
            logger.error("Model completion failed", model=self._model, error=str(e))
            raise ModelServiceError(f"Model completion failed: {e}") from e

        output = result.final_output
        return output if isinstance(output, str) else str(output)
