from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return int(raw)


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return float(raw)


@dataclass(frozen=True)
class Settings:
    app_name: str
    llm_api_key: str
    llm_base_url: str
    llm_api_version: str
    llm_timeout_seconds: float
    llm_max_retries: int
    llm_retry_delay_seconds: float
    narrator_model: str
    compactor_model: str
    narrator_temperature: float
    narrator_max_tokens: int
    compactor_temperature: float
    compactor_max_tokens: int
    save_path: str
    default_theme: str
    log_level: str
    log_file: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    app_name = os.getenv("APP_NAME", "AI Text Adventure")
    llm_api_key = os.getenv("LLM_API_KEY", "").strip()
    if not llm_api_key:
        raise ValueError("LLM_API_KEY is required.")

    narrator_model = os.getenv("NARRATOR_MODEL", "").strip()
    if not narrator_model:
        raise ValueError("NARRATOR_MODEL is required.")

    compactor_model = os.getenv("COMPACTOR_MODEL", narrator_model).strip() or narrator_model

    return Settings(
        app_name=app_name,
        llm_api_key=llm_api_key,
        llm_base_url=os.getenv("LLM_BASE_URL", "https://api.openai.com/v1"),
        llm_api_version=os.getenv("LLM_API_VERSION", "").strip(),
        llm_timeout_seconds=_get_float("LLM_TIMEOUT_SECONDS", 60.0),
        llm_max_retries=_get_int("LLM_MAX_RETRIES", 5),
        llm_retry_delay_seconds=_get_float("LLM_RETRY_DELAY_SECONDS", 5.0),
        narrator_model=narrator_model,
        compactor_model=compactor_model,
        narrator_temperature=_get_float("NARRATOR_TEMPERATURE", 0.9),
        narrator_max_tokens=_get_int("NARRATOR_MAX_TOKENS", 1500),
        compactor_temperature=_get_float("COMPACTOR_TEMPERATURE", 0.2),
        compactor_max_tokens=_get_int("COMPACTOR_MAX_TOKENS", 800),
        save_path=os.getenv("SAVE_PATH", "save.json"),
        default_theme=os.getenv("DEFAULT_THEME", "dungeon crawler"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE", "adventure.log"),
    )
