"""Remediation text providers, one per LLM backend."""

from keyguard.ai.providers.anthropic import AnthropicProvider
from keyguard.ai.providers.openai import OpenAIProvider
from keyguard.ai.providers.ollama import OllamaProvider

__all__ = ["AnthropicProvider", "OpenAIProvider", "OllamaProvider"]
