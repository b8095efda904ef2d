from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List

from pydantic import TypeAdapter, ValidationError

from ..schemas.conversation import Message
from ..services.conversation_store import ConversationStore
from ..utilities.errors import CorruptDataError, NotFoundError, StorageError

_MESSAGES = TypeAdapter(List[Message])


class SaveRepository:
    """Reads and writes the single save file as a JSON array of messages."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._logger = logging.getLogger("text-adventure")

    def exists(self) -> bool:
        return self._path.is_file()

    def save(self, store: ConversationStore) -> Path:
        payload = [message.as_chat() for message in store]
        staging = self._path.with_name(self._path.name + ".tmp")
        try:
            staging.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(staging, self._path)
        except OSError as exc:
            staging.unlink(missing_ok=True)
            self._logger.error("Saving to %s failed: %s", self._path, exc)
            raise StorageError("Could not write save file.", {"path": str(self._path), "error": str(exc)}) from exc

        self._logger.info("Saved %s messages to %s", len(payload), self._path)
        return self._path

    def load(self) -> ConversationStore:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise NotFoundError("No saved progress found.", {"path": str(self._path)}) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise CorruptDataError("Save file could not be read.", {"path": str(self._path), "error": str(exc)}) from exc

        try:
            messages = _MESSAGES.validate_json(raw)
        except ValidationError as exc:
            self._logger.error("Save file %s is corrupt: %s", self._path, exc)
            raise CorruptDataError(
                "Save file is corrupt.",
                {"path": str(self._path), "error": str(exc)},
            ) from exc

        self._logger.info("Loaded %s messages from %s", len(messages), self._path)
        return ConversationStore.from_messages(messages)
