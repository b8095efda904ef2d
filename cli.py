from __future__ import annotations

import argparse
import dataclasses
from typing import Callable

from adventure.config.settings import Settings, get_settings
from adventure.services.game_session import build_session
from adventure.services.llm_client import build_llm_client
from adventure.utilities.logging import setup_logging

HELP_BOX = """
***********************************************
* To save your game at any time, type 'save'. *
* to load a saved game, type 'load'.          *
***********************************************
"""


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="AI generated text adventure")
    parser.add_argument("--narrator-model", help="Model that narrates the game.")
    parser.add_argument("--compactor-model", help="Model that compresses the history.")
    parser.add_argument("--endpoint", help="Base URL of the chat completion endpoint.")
    parser.add_argument("--save-path", help="Where 'save' writes the game (default: save.json).")
    parser.add_argument("--theme", help="Skip the theme question and use this theme.")
    return parser.parse_args(argv)


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides = {
        "narrator_model": args.narrator_model,
        "compactor_model": args.compactor_model,
        "llm_base_url": args.endpoint,
        "save_path": args.save_path,
    }
    return dataclasses.replace(settings, **{k: v for k, v in overrides.items() if v})


def _theme_prompt(title: str, default_theme: str, preset: str | None = None) -> Callable[[], str]:
    def ask() -> str:
        print(title.center(60))
        print("=" * 60)
        print("Welcome to the AI generated Text Adventure. \nYou interact with the AI to try and solve the mystery\n\n")
        if preset:
            theme = preset.strip()
        else:
            raw = input(
                "What theme would you like to play? \n"
                "For Example: mystery, fantasy, sci-fi, time travel, dungeon crawler or make up your own: "
            )
            theme = raw.strip() or default_theme

        print(f"You have chosen to play a {theme.title()} game.")
        print("\n\nGenerating the game world...\n\n")
        print(HELP_BOX)
        return theme

    return ask


def run_cli(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        settings = _apply_overrides(get_settings(), args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 1

    setup_logging(settings.log_level, settings.log_file)
    llm = build_llm_client(settings)
    session = build_session(settings, llm)
    return session.run(_theme_prompt(settings.app_name, settings.default_theme, args.theme))


if __name__ == "__main__":
    raise SystemExit(run_cli())
