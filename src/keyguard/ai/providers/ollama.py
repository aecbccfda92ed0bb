"""Ollama local LLM remediation provider."""

from collections.abc import Sequence

from keyguard.ai.base import BaseAIProvider
from keyguard.core.exceptions import RecommendationError
from keyguard.models import Finding


class OllamaProvider(BaseAIProvider):
    """Remediation text from a local Ollama server; no data leaves the host."""

    @property
    def name(self) -> str:
        return "ollama"

    @property
    def model(self) -> str:
        return self.settings.ollama_model

    def _get_client(self):
        if self._client is None:
            try:
                from ollama import AsyncClient
            except ImportError as e:
                raise RecommendationError(
                    "ollama package not installed. Install with: pip install ollama",
                    provider=self.name,
                ) from e

            self._client = AsyncClient(
                host=self.settings.ollama_host,
                timeout=self.settings.http_timeout,
            )

        return self._client

    async def recommend(self, findings: Sequence[Finding], url: str) -> str:
        client = self._get_client()

        try:
            response = await client.chat(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": self._build_prompt(findings, url)},
                ],
                options={"temperature": self.temperature, "num_predict": self.max_tokens},
            )
            content = response["message"]["content"]
        except Exception as e:
            raise RecommendationError(
                f"Ollama recommendation failed: {e}. "
                f"Make sure Ollama is running at {self.settings.ollama_host}",
                provider=self.name,
            ) from e

        if not content:
            raise RecommendationError("Ollama returned an empty response", provider=self.name)

        self.logger.debug("recommendation_generated", model=self.model, host=self.settings.ollama_host)
        return content
