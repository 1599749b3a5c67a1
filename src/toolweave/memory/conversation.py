"""Conversation - a chat session with automatic history reduction.

Example:
    ```python
    conversation = Conversation(ctx, llm, memory_strategy="summarize")
    conversation.set_context("You are a chatbot from the future")
    reply = await conversation.message("Tell me about future technologies")
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Union

from ..agent.adapters import build_adapter
from ..agent.messages import Message
from ..errors import TokenLimitExceededError
from .memory import ConversationMemory, MemoryStrategy

if TYPE_CHECKING:
    from ..context import RunContext
    from ..llm.base import LLMProvider


class Conversation:
    """Plain chat (no tools) over a ConversationMemory."""

    def __init__(
        self,
        ctx: RunContext,
        llm: LLMProvider,
        memory_strategy: Union[str, MemoryStrategy, None] = None,
        context: Optional[str] = None,
        examples: Iterable[Mapping[str, str]] = (),
    ):
        """Initialize conversation.

        Args:
            ctx: Run context
            llm: LLM provider
            memory_strategy: "truncate" or "summarize" (defaults to the [memory] table)
            context: Persona / instructions text
            examples: Example exchanges as {"role": "user" | "assistant", "content": ...}

        Raises:
            UnsupportedLLMError: If the provider has no adapter
        """
        self.llm = llm
        self.logger = ctx.child_logger("conversation")
        self.adapter = build_adapter(llm, logger=self.logger)
        self.memory = ConversationMemory(ctx, llm, strategy=memory_strategy, context=context)
        self.add_examples(examples)

    @property
    def messages(self) -> list[Message]:
        return self.memory.messages

    @property
    def context(self) -> Optional[str]:
        return self.memory.context

    def set_context(self, context: Optional[str]) -> None:
        self.memory.set_context(context)

    def add_examples(self, examples: Iterable[Mapping[str, str]]) -> None:
        self.memory.add_examples(
            self.adapter.build_message(role=self._role(example.get("role")), content=example.get("content"))
            for example in examples
        )

    def _role(self, role: Optional[str]) -> str:
        if role in ("assistant", "ai", "llm", self.adapter.llm_role):
            return self.adapter.llm_role
        return self.adapter.user_role

    def _chat_params(self) -> dict[str, Any]:
        messages = [m.to_dict() for m in self.memory.examples + self.memory.messages]
        return self.adapter.build_chat_params(
            tools=[],
            instructions=self.memory.context,
            messages=messages,
            tool_choice="auto",
        )

    async def message(self, text: str) -> str:
        """Send a user message and return the reply.

        Raises:
            TokenLimitExceededError: If the history cannot be reduced enough
            LLMError: If the LLM call fails
        """
        self.memory.append_message(self.adapter.build_message(role=self.adapter.user_role, content=text))

        while True:
            try:
                response = await self.llm.chat(**self._chat_params())
                break
            except TokenLimitExceededError as e:
                self.logger.warning("Context window exceeded, reducing history: %s", e)
                await self.memory.reduce_messages(e)

        reply = response.chat_completion or ""
        self.memory.append_message(self.adapter.build_message(role=self.adapter.llm_role, content=reply))
        return reply


__all__ = ["Conversation"]
