"""AI prompt templates."""

from keyguard.ai.prompts.recommendation import RECOMMENDATION_PROMPT, SYSTEM_PROMPT

__all__ = ["RECOMMENDATION_PROMPT", "SYSTEM_PROMPT"]
