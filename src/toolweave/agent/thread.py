"""Thread - ordered, append-only message history owned by one agent."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional

from .messages import Message


class Thread:
    """Ordered sequence of messages; insertion order is replay order."""

    def __init__(self, messages: Iterable[Message] = ()):
        self._messages: list[Message] = []
        for message in messages:
            self.append(message)

    def append(self, message: Message) -> Message:
        if not isinstance(message, Message):
            raise TypeError(f"Thread only accepts Message instances, got {type(message).__name__}")
        self._messages.append(message)
        return message

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    @property
    def last(self) -> Optional[Message]:
        return self._messages[-1] if self._messages else None

    def to_dicts(self) -> list[dict[str, Any]]:
        """Vendor wire shape of every message, in order."""
        return [message.to_dict() for message in self._messages]

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    def __len__(self) -> int:
        return len(self._messages)

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    def __repr__(self) -> str:
        return f"Thread(messages={len(self._messages)})"


__all__ = ["Thread"]
