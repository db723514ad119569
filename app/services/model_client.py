from __future__ import annotations

import openai
from openai import AsyncOpenAI

from app.core.logging import logger
from core.settings import Settings, get_settings


class ModelInvocationError(RuntimeError):
    """Raised when the model provider call fails for any reason."""


class ModelClient:
    """Thin wrapper around an OpenAI-compatible chat-completion endpoint.

    One call per simulation; no retries. A hung provider call hangs the
    caller for as long as the SDK keeps the request open.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        *,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> None:
        self._client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> "ModelClient":
        kwargs: dict = {"api_key": settings.openai_api_key.get_secret_value()}
        if settings.openai_base_url:
            kwargs["base_url"] = settings.openai_base_url
        return cls(
            AsyncOpenAI(**kwargs),
            model=settings.openai_model,
            max_tokens=settings.openai_max_tokens,
            temperature=settings.openai_temperature,
        )

    async def complete(self, prompt: str, system_prompt: str) -> str:
        """Send ``prompt`` with ``system_prompt`` and return the first choice's text.

        Args:
            prompt: Assembled user prompt.
            system_prompt: Fixed system instruction.

        Returns:
            The message content of the first choice, or an empty string when
            the provider returns no choices or no content.
        """

        logger.info(
            "Requesting simulation from model %s (prompt chars=%d)",
            self.model,
            len(prompt),
        )
        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.OpenAIError as exc:
            logger.error("Model provider call failed: %s", exc)
            raise ModelInvocationError(str(exc)) from exc

        if not completion.choices:
            return ""
        content = completion.choices[0].message.content
        logger.info("Model %s returned %d chars", self.model, len(content or ""))
        return content or ""


def get_model_client() -> ModelClient:
    """FastAPI dependency returning a client configured from settings."""

    return ModelClient.from_settings(get_settings())
