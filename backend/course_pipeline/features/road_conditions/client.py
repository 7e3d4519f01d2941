"""
LLM client (OpenAI chat completions).
"""

import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from course_pipeline.config import settings

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """LLM request failed."""
    pass


class OpenAIChatClient:
    """
    Sends a single user prompt and returns the reply text.

    Usage:
        llm = OpenAIChatClient()
        text = await llm.complete(prompt)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_output_tokens: int = 800,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model or settings.openai_model
        self.max_output_tokens = max_output_tokens
        self._client = client
        self._api_key = api_key if api_key is not None else settings.openai_api_key

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise LLMError("OPENAI_API_KEY not configured")
            self._client = AsyncOpenAI(api_key=self._api_key)
        return self._client

    async def complete(self, prompt: str) -> str:
        """
        Raises:
            LLMError: On any API failure
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_output_tokens,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI request failed: {e}")
            raise LLMError(f"OpenAI request failed: {e}") from e

        if response.usage is not None:
            logger.info(f"OpenAI call: promptTokens={response.usage.prompt_tokens}")

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
