"""
Anthropic Claude AI provider implementation.

Provides single-turn completions using the Anthropic API.

Example:
    from common.ai import ClaudeProvider

    claude = ClaudeProvider(api_key="your-api-key")
    completion = await claude.complete(
        message="How should I structure a deload week?",
        system_prompt="You are a strength coach.",
    )
    print(completion.text)
"""

from typing import Optional, Dict, Any

from common.ai.base import AIProvider, AICompletion


class ClaudeProvider(AIProvider):
    """
    Anthropic Claude AI provider.

    Uses the async Anthropic client. The SDK's own retry setting is the only
    retry behaviour.
    """

    name = "anthropic"

    def __init__(
        self,
        api_key: str,
        model: str = "claude-3-5-haiku-latest",
        max_retries: int = 2,
        timeout: float = 60.0,
    ):
        """
        Initialize Claude provider.

        Args:
            api_key: Anthropic API key
            model: Model to use
            max_retries: SDK retries for failed requests
            timeout: Request timeout in seconds
        """
        try:
            from anthropic import AsyncAnthropic
        except ImportError:
            raise ImportError(
                "anthropic package is required for Claude. "
                "Install with: pip install anthropic"
            )

        self.client = AsyncAnthropic(
            api_key=api_key,
            max_retries=max_retries,
            timeout=timeout,
        )
        self.model = model

    async def complete(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        json_mode: bool = False,
        **kwargs: Any,
    ) -> AICompletion:
        """Send message and get completion from Claude."""
        system = system_prompt or ""
        if json_mode:
            # Claude has no response_format switch; ask for it in the prompt
            system = f"{system}\n\nRespond with a single JSON object and nothing else.".strip()

        params: Dict[str, Any] = {
            "model": kwargs.get("model", self.model),
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": message}],
        }

        if system:
            params["system"] = system

        for key in ["stop_sequences", "top_p", "top_k", "metadata"]:
            if key in kwargs:
                params[key] = kwargs[key]

        response = await self.client.messages.create(**params)

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        usage = getattr(response, "usage", None)

        return AICompletion(
            text=text,
            model=params["model"],
            input_tokens=getattr(usage, "input_tokens", 0) or 0,
            output_tokens=getattr(usage, "output_tokens", 0) or 0,
        )
