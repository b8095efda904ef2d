import dataclasses
from pathlib import Path
from typing import Any, Dict, List

import pytest

from adventure.agents.compactor import HistoryCompactor
from adventure.agents.narrator import NarratorAgent
from adventure.config.settings import Settings
from adventure.repositories.save_repository import SaveRepository
from adventure.schemas.conversation import ModelProfile
from adventure.services.game_session import GameSession
from adventure.services.interaction_engine import StreamingInteractionEngine

NARRATOR = ModelProfile(model="narrator-test", temperature=0.9, max_tokens=1500, system_prompt="You narrate.")
COMPACTOR = ModelProfile(model="compactor-test", temperature=0.2, max_tokens=800)


class StubLLM:
    """Scripted stand-in for LLMClient.

    ``replies`` feeds stream_chat: each item is a list of fragments or an
    exception to raise. ``compactions`` feeds complete: each item is a list of
    candidates or an exception. When a script runs dry, stream_chat yields a
    single default sentence and complete returns ``["compacted #n"]``.
    """

    def __init__(self, replies: List[Any] | None = None, compactions: List[Any] | None = None) -> None:
        self.replies = list(replies or [])
        self.compactions = list(compactions or [])
        self.stream_calls: List[List[Dict[str, str]]] = []
        self.complete_calls: List[List[Dict[str, str]]] = []

    def stream_chat(self, profile: ModelProfile, messages: List[Dict[str, str]]):
        self.stream_calls.append(list(messages))
        reply = self.replies.pop(0) if self.replies else ["The wind howls."]
        if isinstance(reply, Exception):
            raise reply
        return iter(reply)

    def complete(self, profile: ModelProfile, messages: List[Dict[str, str]]) -> List[str]:
        self.complete_calls.append(list(messages))
        result = self.compactions.pop(0) if self.compactions else [f"compacted #{len(self.complete_calls)}"]
        if isinstance(result, Exception):
            raise result
        return result


class Recorder:
    """Collects everything printed through an echo or sink callable."""

    def __init__(self) -> None:
        self.lines: List[str] = []

    def __call__(self, *parts: Any, **_: Any) -> None:
        self.lines.append(" ".join(str(p) for p in parts))

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class ScriptedInput:
    """input() replacement that plays back lines, then raises EOFError."""

    def __init__(self, lines: List[str]) -> None:
        self._lines = list(lines)
        self.prompts: List[str] = []

    def __call__(self, prompt: str = "") -> str:
        self.prompts.append(prompt)
        if not self._lines:
            raise EOFError
        return self._lines.pop(0)


@pytest.fixture
def stub_llm() -> StubLLM:
    return StubLLM()


@pytest.fixture
def fragments() -> List[str]:
    return []


@pytest.fixture
def make_engine(fragments: List[str]):
    def _make(llm: StubLLM) -> StreamingInteractionEngine:
        return StreamingInteractionEngine(
            NarratorAgent(llm, NARRATOR),
            HistoryCompactor(llm, COMPACTOR),
            sink=fragments.append,
        )

    return _make


@pytest.fixture
def save_path(tmp_path: Path) -> Path:
    return tmp_path / "save.json"


@pytest.fixture
def make_session(make_engine, save_path: Path):
    def _make(llm: StubLLM, lines: List[str] | None = None):
        echo = Recorder()
        scripted = ScriptedInput(lines or [])
        session = GameSession(
            make_engine(llm),
            SaveRepository(save_path),
            input_fn=scripted,
            echo=echo,
        )
        return session, echo, scripted

    return _make


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        app_name="AI Text Adventure",
        llm_api_key="test-key",
        llm_base_url="https://llm.test/v1",
        llm_api_version="",
        llm_timeout_seconds=10.0,
        llm_max_retries=5,
        llm_retry_delay_seconds=5.0,
        narrator_model="narrator-test",
        compactor_model="compactor-test",
        narrator_temperature=0.9,
        narrator_max_tokens=1500,
        compactor_temperature=0.2,
        compactor_max_tokens=800,
        save_path=str(tmp_path / "save.json"),
        default_theme="dungeon crawler",
        log_level="DEBUG",
        log_file=str(tmp_path / "adventure.log"),
    )


@pytest.fixture
def replace_settings(settings: Settings):
    def _replace(**changes: Any) -> Settings:
        return dataclasses.replace(settings, **changes)

    return _replace
