from __future__ import annotations

from typing import Dict, Iterator, List

from ..schemas.conversation import ModelProfile
from ..services.llm_client import LLMClient


class NarratorAgent:
    def __init__(self, llm: LLMClient, profile: ModelProfile) -> None:
        self._llm = llm
        self._profile = profile

    def stream(self, context: List[Dict[str, str]]) -> Iterator[str]:
        messages: List[Dict[str, str]] = []
        if self._profile.system_prompt:
            messages.append({"role": "system", "content": self._profile.system_prompt})
        messages.extend(context)

        return self._llm.stream_chat(self._profile, messages)
