"""Base AI provider class."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from keyguard.ai.prompts import RECOMMENDATION_PROMPT, SYSTEM_PROMPT
from keyguard.core.config import get_settings
from keyguard.core.interfaces import IRecommender
from keyguard.core.logging import get_logger
from keyguard.models import Finding


class BaseAIProvider(IRecommender, ABC):
    """Base class for LLM-backed remediation providers.

    Clients are created lazily on first use, so a missing SDK or API key
    surfaces as ``RecommendationError`` from ``recommend`` and the caller
    falls back to the built-in report.
    """

    system_prompt: str = SYSTEM_PROMPT

    def __init__(self) -> None:
        self.settings = get_settings()
        self.logger = get_logger(f"ai.{self.name}")
        self.max_tokens = self.settings.ai_max_tokens
        self.temperature = self.settings.ai_temperature
        self._client: Any = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        ...

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier sent to the provider."""
        ...

    @abstractmethod
    async def recommend(self, findings: Sequence[Finding], url: str) -> str:
        """Generate remediation guidance for the findings."""
        ...

    def _build_prompt(self, findings: Sequence[Finding], url: str) -> str:
        """Describe findings without ever including raw secret values."""
        lines = [
            f"- {f.key_type} ({f.severity.value}) in {f.location}: {f.description}"
            for f in findings
        ]
        return RECOMMENDATION_PROMPT.format(url=url, findings="\n".join(lines))
