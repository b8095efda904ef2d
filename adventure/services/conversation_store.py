from __future__ import annotations

from typing import Dict, Iterable, Iterator, List

from ..schemas.conversation import Message


class ConversationStore:
    """Append-only, ordered log of turn messages.

    The order of messages is the context window sent to the narrator, so
    nothing here removes or reorders entries. Shrinking the transcript is the
    compactor's job and happens before a reply is appended.
    """

    def __init__(self) -> None:
        self._messages: List[Message] = []

    @classmethod
    def from_messages(cls, messages: Iterable[Message]) -> "ConversationStore":
        store = cls()
        for message in messages:
            store.append(message)
        return store

    def append(self, message: Message) -> None:
        if not isinstance(message, Message):
            raise TypeError(f"Expected Message, got {type(message).__name__}.")
        self._messages.append(message)

    def as_context(self) -> List[Dict[str, str]]:
        return [message.as_chat() for message in self._messages]

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:
        return f"ConversationStore(messages={len(self._messages)})"
