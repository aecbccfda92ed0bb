"""Remediation text generation."""

from keyguard.ai.base import BaseAIProvider
from keyguard.ai.fallback import fallback_report, no_findings_report
from keyguard.ai.recommender import get_recommender

__all__ = [
    "BaseAIProvider",
    "fallback_report",
    "no_findings_report",
    "get_recommender",
]
