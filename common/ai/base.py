"""
Abstract AI provider interface.

Defines the contract that all AI/LLM providers must implement.
This allows swapping between different AI services (Claude, OpenAI, etc.)
without changing application code.

Example:
    from common.ai import AIProvider, ClaudeProvider, OpenAIProvider

    def get_ai_provider(settings) -> AIProvider:
        if settings.AI_PROVIDER == "openai":
            return OpenAIProvider(api_key=settings.OPENAI_API_KEY)
        return ClaudeProvider(api_key=settings.CLAUDE_API_KEY)
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


@dataclass
class AICompletion:
    """Single completion result with token accounting."""
    text: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class AIProviderError(Exception):
    """Raised when a provider call fails or returns unusable output."""


class AIProvider(ABC):
    """
    Abstract AI provider interface.

    Implement `complete` for each LLM service. `complete_json` is built
    on top of it.
    """

    name: str = "base"

    @abstractmethod
    async def complete(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        json_mode: bool = False,
        **kwargs: Any,
    ) -> AICompletion:
        """
        Send a single-turn message and return the completion.

        Args:
            message: The user's message
            system_prompt: Optional system instructions
            max_tokens: Maximum tokens in the response
            temperature: Sampling temperature (0-1)
            json_mode: Ask the model for a JSON object response
            **kwargs: Provider-specific options

        Returns:
            AICompletion with text and token usage
        """
        pass

    async def complete_json(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: float = 0.2,
        **kwargs: Any,
    ) -> tuple[Dict[str, Any], AICompletion]:
        """
        Request a JSON object and decode it.

        Returns:
            Tuple of (decoded dict, raw completion)

        Raises:
            AIProviderError: If the response is not a JSON object
        """
        completion = await self.complete(
            message,
            system_prompt=system_prompt,
            max_tokens=max_tokens,
            temperature=temperature,
            json_mode=True,
            **kwargs,
        )
        return parse_json_object(completion.text), completion


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Decode a JSON object from model output.

    Tolerates markdown code fences around the payload.
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
        cleaned = cleaned.strip()

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"Model returned invalid JSON: {e}")
        raise AIProviderError("AI response was not valid JSON") from e

    if not isinstance(data, dict):
        raise AIProviderError("AI response was not a JSON object")

    return data
