"""Anthropic (Claude) remediation provider."""

from collections.abc import Sequence

from keyguard.ai.base import BaseAIProvider
from keyguard.core.exceptions import RecommendationError
from keyguard.models import Finding


class AnthropicProvider(BaseAIProvider):
    """Remediation text from Anthropic's Messages API."""

    @property
    def name(self) -> str:
        return "anthropic"

    @property
    def model(self) -> str:
        return self.settings.anthropic_model

    def _get_client(self):
        if self._client is None:
            try:
                import anthropic
            except ImportError as e:
                raise RecommendationError(
                    "anthropic package not installed",
                    provider=self.name,
                ) from e

            api_key = self.settings.get_anthropic_key()
            if not api_key:
                raise RecommendationError(
                    "ANTHROPIC_API_KEY not configured",
                    provider=self.name,
                )

            self._client = anthropic.AsyncAnthropic(
                api_key=api_key,
                timeout=float(self.settings.http_timeout),
            )

        return self._client

    async def recommend(self, findings: Sequence[Finding], url: str) -> str:
        client = self._get_client()

        try:
            message = await client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=self.system_prompt,
                messages=[
                    {"role": "user", "content": self._build_prompt(findings, url)},
                ],
            )
        except Exception as e:
            raise RecommendationError(
                f"Claude recommendation failed: {e}",
                provider=self.name,
            ) from e

        text = "".join(
            block.text for block in message.content if getattr(block, "type", "") == "text"
        )
        if not text.strip():
            raise RecommendationError("Claude returned an empty response", provider=self.name)

        self.logger.debug(
            "recommendation_generated",
            model=self.model,
            input_tokens=message.usage.input_tokens,
            output_tokens=message.usage.output_tokens,
        )
        return text
