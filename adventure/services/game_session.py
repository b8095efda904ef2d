from __future__ import annotations

import logging
from typing import Callable, Optional

from ..agents.compactor import HistoryCompactor
from ..agents.narrator import NarratorAgent
from ..agents.prompts import NARRATOR_SYSTEM_PROMPT, build_seed_prompt
from ..config.settings import Settings
from ..repositories.save_repository import SaveRepository
from ..schemas.conversation import MessageRole, ModelProfile, SessionState
from ..utilities.errors import (
    AppError,
    CorruptDataError,
    FatalServiceError,
    InvalidInputError,
    NotFoundError,
    StorageError,
)
from .conversation_store import ConversationStore
from .interaction_engine import OutputSink, StreamingInteractionEngine, console_sink
from .llm_client import LLMClient

SAVE_COMMAND = "save"
LOAD_COMMAND = "load"
TURN_SEPARATOR = "-" * 20


class GameSession:
    """Top-level loop for one player: bootstrap, then read commands until stopped.

    ``save`` and ``load`` are handled here and never reach the narrator.
    Everything else is forwarded to the interaction engine as the player's
    command. There is no quit keyword; end of input or Ctrl-C ends the loop.
    """

    def __init__(
        self,
        engine: StreamingInteractionEngine,
        repository: SaveRepository,
        *,
        store: Optional[ConversationStore] = None,
        input_fn: Callable[[str], str] = input,
        echo: Callable[..., None] = print,
    ) -> None:
        self._engine = engine
        self._repository = repository
        self._store = store if store is not None else ConversationStore()
        self._input = input_fn
        self._echo = echo
        self._state = SessionState.BOOTSTRAPPING
        self._logger = logging.getLogger("text-adventure")

    @property
    def store(self) -> ConversationStore:
        return self._store

    @property
    def state(self) -> SessionState:
        return self._state

    def run(self, theme_provider: Callable[[], str]) -> int:
        try:
            try:
                self.bootstrap(theme_provider)
            except FatalServiceError as exc:
                self._report(exc)
                self._echo("Could not generate the game world.")
                self._state = SessionState.TERMINATED
                return 1

            while True:
                line = self._input("Command: ")
                self.handle(line)
        except (EOFError, KeyboardInterrupt):
            self._echo("\nExiting.")
            self._state = SessionState.TERMINATED
            return 0

    def bootstrap(self, theme_provider: Callable[[], str]) -> None:
        self._state = SessionState.BOOTSTRAPPING
        loaded = False
        if self._repository.exists() and self._confirm("Would you like to load a saved game? (y/n) "):
            loaded = self._load()

        if not loaded:
            theme = theme_provider()
            self._store = ConversationStore()
            self._logger.info("Starting new game with theme %r", theme)
            self._engine.run_turn(self._store, build_seed_prompt(theme), record_command=False)
            self._echo()

        self._state = SessionState.AWAITING_COMMAND

    def handle(self, line: str) -> None:
        keyword = line.strip().lower()

        if keyword == SAVE_COMMAND:
            self._save()
        elif keyword == LOAD_COMMAND:
            self._load()
        else:
            self._play(line)

        self._state = SessionState.AWAITING_COMMAND

    def _play(self, command: str) -> None:
        self._state = SessionState.PROCESSING
        try:
            self._engine.run_turn(self._store, command)
        except InvalidInputError:
            return
        except FatalServiceError as exc:
            self._echo()
            self._report(exc)
            return

        self._echo()
        self._echo(TURN_SEPARATOR)

    def _save(self) -> None:
        self._state = SessionState.SAVING
        self._echo("Saving progress to file...")
        try:
            self._repository.save(self._store)
        except StorageError as exc:
            self._report(exc)
            return
        self._echo("Success")

    def _load(self) -> bool:
        self._state = SessionState.LOADING
        try:
            store = self._repository.load()
        except NotFoundError as exc:
            self._echo(exc.message)
            return False
        except CorruptDataError as exc:
            self._report(exc)
            return False

        self._echo("Loading progress from file...")
        self._store = store
        self.print_journal()
        return True

    def print_journal(self) -> None:
        self._echo("Your Journal:")
        for message in self._store:
            if message.role == MessageRole.USER:
                self._echo(f"\nCommand: {message.content}")
            else:
                self._echo(message.content)

    def _confirm(self, prompt: str) -> bool:
        answer = self._input(prompt)
        return answer.strip().lower().startswith("y")

    def _report(self, exc: AppError) -> None:
        self._logger.error("%s: %s | details=%s", exc.code, exc.message, exc.details)
        self._echo(f"[{exc.code}] {exc.message}")


def build_session(
    settings: Settings,
    llm: LLMClient,
    *,
    input_fn: Callable[[str], str] = input,
    echo: Callable[..., None] = print,
    sink: OutputSink = console_sink,
) -> GameSession:
    narrator_profile = ModelProfile(
        model=settings.narrator_model,
        temperature=settings.narrator_temperature,
        max_tokens=settings.narrator_max_tokens,
        system_prompt=NARRATOR_SYSTEM_PROMPT,
    )
    compactor_profile = ModelProfile(
        model=settings.compactor_model,
        temperature=settings.compactor_temperature,
        max_tokens=settings.compactor_max_tokens,
    )
    engine = StreamingInteractionEngine(
        NarratorAgent(llm, narrator_profile),
        HistoryCompactor(llm, compactor_profile),
        sink=sink,
    )
    repository = SaveRepository(settings.save_path)
    return GameSession(engine, repository, input_fn=input_fn, echo=echo)
