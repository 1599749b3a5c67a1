"""Token length estimation and context-window validation."""

from __future__ import annotations

import json
from typing import Any, Optional, Union

from ..errors import TokenLimitExceededError

# Context window sizes (tokens) for common models
TOKEN_LIMITS: dict[str, int] = {
    "gpt-4o": 128000,
    "gpt-4o-mini": 128000,
    "gpt-4-turbo": 128000,
    "gpt-4": 8192,
    "gpt-3.5-turbo": 16385,
    "deepseek-chat": 64000,
    "claude-3-5-sonnet-20240620": 200000,
    "claude-3-5-haiku-20241022": 200000,
    "claude-3-opus-20240229": 200000,
    "claude-3-haiku-20240307": 200000,
    "gemini-1.5-pro": 2097152,
    "gemini-1.5-flash": 1048576,
    "mistral-large-latest": 128000,
    "open-mistral-nemo": 128000,
    "command-r-plus": 128000,
    "command-r": 128000,
    "llama3.1": 131072,
}


class TokenLengthValidator:
    """Character-based token estimator.

    Uses the rough heuristic of 4 characters per token, which is close
    enough for context budgeting across vendors without a tokenizer.
    """

    def __init__(
        self,
        chars_per_token: int = 4,
        token_limits: Optional[dict[str, int]] = None,
    ):
        self.chars_per_token = chars_per_token
        self.token_limits = dict(TOKEN_LIMITS if token_limits is None else token_limits)

    def token_length(self, content: Union[str, dict[str, Any], list[Any]]) -> int:
        """Estimate token count of text or of a JSON-serializable message list."""
        if isinstance(content, list):
            return sum(self.token_length(item) for item in content)
        if not isinstance(content, str):
            content = json.dumps(content)
        return len(content) // self.chars_per_token

    def token_limit(self, model: Optional[str]) -> Optional[int]:
        if not model:
            return None
        return self.token_limits.get(model)

    def validate_max_tokens(
        self,
        content: Union[str, dict[str, Any], list[Any]],
        model: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Optional[int]:
        """Check that content fits in the model's context window.

        Args:
            content: Prompt text or list of message dicts
            model: Model name used to look up the limit
            limit: Explicit limit overriding the table

        Returns:
            Remaining token budget, or None when no limit is known

        Raises:
            TokenLimitExceededError: If the estimated length exceeds the limit
        """
        limit = limit if limit is not None else self.token_limit(model)
        if limit is None:
            return None

        length = self.token_length(content)
        leftover = limit - length
        if leftover < 0:
            raise TokenLimitExceededError(
                f"This model's maximum context length is {limit} tokens, "
                f"but the given text is {length} tokens long.",
                token_overflow=length - limit,
            )
        return leftover


__all__ = ["TOKEN_LIMITS", "TokenLengthValidator"]
