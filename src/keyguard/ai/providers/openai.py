"""OpenAI remediation provider."""

from collections.abc import Sequence

from keyguard.ai.base import BaseAIProvider
from keyguard.core.exceptions import RecommendationError
from keyguard.models import Finding


class OpenAIProvider(BaseAIProvider):
    """Remediation text from the OpenAI chat completions API."""

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self.settings.openai_model

    def _get_client(self):
        if self._client is None:
            try:
                from openai import AsyncOpenAI
            except ImportError as e:
                raise RecommendationError(
                    "openai package not installed",
                    provider=self.name,
                ) from e

            api_key = self.settings.get_openai_key()
            if not api_key:
                raise RecommendationError(
                    "OPENAI_API_KEY not configured",
                    provider=self.name,
                )

            self._client = AsyncOpenAI(
                api_key=api_key,
                timeout=float(self.settings.http_timeout),
            )

        return self._client

    async def recommend(self, findings: Sequence[Finding], url: str) -> str:
        client = self._get_client()

        try:
            response = await client.chat.completions.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": self._build_prompt(findings, url)},
                ],
            )
        except Exception as e:
            raise RecommendationError(
                f"OpenAI recommendation failed: {e}",
                provider=self.name,
            ) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise RecommendationError("OpenAI returned an empty response", provider=self.name)

        self.logger.debug("recommendation_generated", model=self.model)
        return content
