from __future__ import annotations

import logging

from ..schemas.conversation import ModelProfile
from ..services.llm_client import LLMClient
from .prompts import build_compactor_prompt


class HistoryCompactor:
    """Rewrites one narrator reply into a shorter equivalent for the transcript.

    Service failures propagate; the caller decides whether the turn survives.
    """

    def __init__(self, llm: LLMClient, profile: ModelProfile) -> None:
        self._llm = llm
        self._profile = profile
        self._logger = logging.getLogger("text-adventure")

    def compact(self, raw_text: str) -> str:
        messages = [{"role": "user", "content": build_compactor_prompt(raw_text)}]
        candidates = self._llm.complete(self._profile, messages)

        if not candidates:
            self._logger.debug("Compactor returned no candidates, keeping raw text.")
            return raw_text

        compacted = candidates[0]
        self._logger.debug("optimized history: %s", compacted)
        return compacted
