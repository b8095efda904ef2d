from __future__ import annotations

import logging
from typing import Callable, List

from ..agents.compactor import HistoryCompactor
from ..agents.narrator import NarratorAgent
from ..schemas.conversation import Message
from ..utilities.errors import InvalidInputError
from .conversation_store import ConversationStore

OutputSink = Callable[[str], None]


def console_sink(fragment: str) -> None:
    print(fragment, end="", flush=True)


class StreamingInteractionEngine:
    """Runs one turn: narrator stream out to the player, compacted reply into the store.

    The player's command and the narrator's reply are committed together once
    the reply has been compacted. A turn that fails anywhere before that point
    leaves the store exactly as it was.
    """

    def __init__(
        self,
        narrator: NarratorAgent,
        compactor: HistoryCompactor,
        sink: OutputSink = console_sink,
    ) -> None:
        self._narrator = narrator
        self._compactor = compactor
        self._sink = sink
        self._logger = logging.getLogger("text-adventure")

    def run_turn(self, store: ConversationStore, command: str, *, record_command: bool = True) -> str:
        if not command or not command.strip():
            raise InvalidInputError("Command cannot be empty.", {"field": "command"})

        pending = Message.user(command)
        context = store.as_context()
        context.append(pending.as_chat())

        fragments: List[str] = []
        for fragment in self._narrator.stream(context):
            self._sink(fragment)
            fragments.append(fragment)
        full_text = "".join(fragments)

        if not full_text.strip():
            self._logger.warning("Narrator returned no text for command %r; nothing recorded.", command)
            return ""

        compacted = self._compactor.compact(full_text)
        self._logger.info(
            "Turn complete: %s chars narrated, %s chars stored.",
            len(full_text),
            len(compacted),
        )

        if record_command:
            store.append(pending)
        store.append(Message.assistant(compacted))
        return full_text
