"""Conversation memory with context-window reduction.

When a provider rejects a request as too long, the memory shrinks its
message history with the strategy chosen at construction:

- TRUNCATE: drop the oldest messages until the overflow is covered
- SUMMARIZE: replace the history with an LLM summary of its two halves
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional, Union

from ..agent.messages import Message, message_to_json
from ..errors import ConfigurationError, TokenLimitExceededError

if TYPE_CHECKING:
    from ..context import RunContext
    from ..llm.base import LLMProvider

# The least number of tokens we want to be under the limit by
TOKEN_LEEWAY = 20


class MemoryStrategy(Enum):
    """How history is reduced after a context-length error."""

    TRUNCATE = "truncate"
    SUMMARIZE = "summarize"

    @classmethod
    def parse(cls, value: Union[str, MemoryStrategy]) -> MemoryStrategy:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown memory strategy: {value!r}. "
                f"Expected one of: {', '.join(s.value for s in cls)}"
            ) from None


class ConversationMemory:
    """Message history, context and examples of one conversation."""

    def __init__(
        self,
        ctx: RunContext,
        llm: LLMProvider,
        messages: Iterable[Message] = (),
        strategy: Union[str, MemoryStrategy, None] = None,
        context: Optional[str] = None,
        examples: Iterable[Message] = (),
    ):
        """Initialize memory.

        Args:
            ctx: Run context
            llm: Provider used for summaries and token estimates
            messages: Initial history
            strategy: Reduction strategy (defaults to the [memory] table)
            context: Persona / instructions text
            examples: Example messages sent before the history
        """
        self.llm = llm
        self.logger = ctx.child_logger("memory")
        self.strategy = MemoryStrategy.parse(strategy or ctx.config.memory.strategy)
        self._messages: list[Message] = list(messages)
        self._examples: list[Message] = list(examples)
        self._context = context
        self._summary: Optional[str] = None

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    @property
    def examples(self) -> list[Message]:
        return list(self._examples)

    @property
    def summary(self) -> Optional[str]:
        return self._summary

    @property
    def context(self) -> Optional[str]:
        """Context text followed by the running summary, if any."""
        parts = [part for part in (self._context, self._summary) if part]
        return "\n".join(parts) if parts else None

    def set_context(self, context: Optional[str]) -> None:
        self._context = context

    def add_examples(self, examples: Iterable[Message]) -> None:
        self._examples.extend(examples)

    def append_message(self, message: Message) -> None:
        self._messages.append(message)

    def token_length(self, message: Message) -> int:
        return self.llm.token_validator.token_length(message_to_json(message))

    async def reduce_messages(self, error: TokenLimitExceededError) -> None:
        """Shrink the history after a context-length error.

        Raises:
            TokenLimitExceededError: The original error, when at most one
                message is left and nothing can be dropped
        """
        if len(self._messages) <= 1:
            raise error

        before = len(self._messages)
        if self.strategy is MemoryStrategy.TRUNCATE:
            self._truncate(error.token_overflow)
        else:
            await self._summarize()
        self.logger.info(
            "Reduced conversation history (%s): %d -> %d messages",
            self.strategy.value,
            before,
            len(self._messages),
        )

    def _truncate(self, token_overflow: int) -> None:
        overflow = token_overflow
        dropped = 0
        for message in self._messages:
            if overflow <= -TOKEN_LEEWAY:
                break
            overflow -= self.token_length(message)
            dropped += 1

        # Never empty the history
        dropped = min(dropped, len(self._messages) - 1)
        self._messages = self._messages[dropped:]

    async def _summarize(self) -> None:
        history = "\n".join(
            part
            for part in (self._summary, "[" + ",".join(map(message_to_json, self._messages)) + "]")
            if part
        )
        half = len(history) // 2
        partitions = (history[:half], history[half:])

        summaries = []
        for partition in partitions:
            summaries.append(await self.llm.summarize(partition))
        self._summary = "\n".join(summaries)
        self._messages = self._messages[-1:]


__all__ = ["TOKEN_LEEWAY", "MemoryStrategy", "ConversationMemory"]
