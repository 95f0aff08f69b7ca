"""
AI module - Pluggable AI providers (Claude, OpenAI).
"""

from common.ai.base import AIProvider, AICompletion, AIProviderError, parse_json_object
from common.ai.claude import ClaudeProvider
from common.ai.openai import OpenAIProvider

__all__ = [
    "AIProvider",
    "AICompletion",
    "AIProviderError",
    "parse_json_object",
    "ClaudeProvider",
    "OpenAIProvider",
]
