from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Iterator, List, Optional

import httpx
import openai
from openai import AzureOpenAI, OpenAI

from ..config.settings import Settings
from ..schemas.conversation import ModelProfile
from ..utilities.errors import FatalServiceError, LLMError, TransientServiceError

_TRANSIENT_STATUS_CODES = frozenset({408, 409, 429})


class LLMClient:
    """Chat-completion wrapper shared by the narrator and the compactor.

    Every call goes through the same retry policy: transient failures (rate
    limits, timeouts, dropped connections, 5xx) are retried with a fixed delay
    up to ``max_retries`` times after the first attempt, everything else fails
    at once.
    """

    def __init__(
        self,
        client: Any,
        max_retries: int = 5,
        retry_delay_seconds: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._max_retries = max(0, max_retries)
        self._retry_delay = max(0.0, retry_delay_seconds)
        self._sleep = sleep
        self._logger = logging.getLogger("text-adventure")

    def complete(self, profile: ModelProfile, messages: List[Dict[str, str]]) -> List[str]:
        """Run one non-streaming request and return the text of every candidate."""
        for attempt in range(1, self._max_retries + 2):
            try:
                response = self._client.chat.completions.create(
                    model=profile.model,
                    messages=messages,
                    temperature=profile.temperature,
                    max_tokens=profile.max_tokens,
                )
            except Exception as exc:
                self._handle_failure(exc, profile.model, attempt)
                continue

            candidates = [
                choice.message.content
                for choice in (response.choices or [])
                if choice.message is not None and choice.message.content
            ]
            self._logger.debug(
                "Model %s returned %s candidate(s): %s",
                profile.model,
                len(candidates),
                self._truncate(candidates[0]) if candidates else "(none)",
            )
            return candidates

        raise FatalServiceError("LLM request failed.", {"model": profile.model})

    def stream_chat(self, profile: ModelProfile, messages: List[Dict[str, str]]) -> Iterator[str]:
        """Yield text fragments as the model produces them.

        A failure before the first fragment is retried like any other call.
        Once text has been yielded it cannot be taken back, so a later failure
        is fatal regardless of its kind.
        """
        for attempt in range(1, self._max_retries + 2):
            emitted = False
            try:
                with self._client.chat.completions.create(
                    model=profile.model,
                    messages=messages,
                    temperature=profile.temperature,
                    max_tokens=profile.max_tokens,
                    stream=True,
                ) as stream:
                    for chunk in stream:
                        fragment = self._fragment(chunk)
                        if fragment:
                            emitted = True
                            yield fragment
                return
            except Exception as exc:
                if emitted:
                    self._logger.error("Stream from model %s broke off: %s", profile.model, exc)
                    raise FatalServiceError(
                        "LLM stream interrupted.",
                        {"model": profile.model, "attempt": attempt, "error": str(exc)},
                    ) from exc
                self._handle_failure(exc, profile.model, attempt)

        raise FatalServiceError("LLM request failed.", {"model": profile.model})

    def _handle_failure(self, exc: Exception, model: str, attempt: int) -> None:
        error = self._classify(exc)
        details = {"model": model, "attempt": attempt, "error": str(exc)}

        if not isinstance(error, TransientServiceError):
            self._logger.error("LLM request failed for model %s: %s", model, exc, exc_info=True)
            raise FatalServiceError("LLM request failed.", details) from exc

        if attempt > self._max_retries:
            self._logger.error(
                "LLM request for model %s still failing after %s retries: %s",
                model,
                attempt - 1,
                exc,
            )
            raise FatalServiceError(
                f"LLM request failed after {attempt - 1} retries.",
                details,
            ) from exc

        self._logger.warning(
            "LLM call for model %s failed (%s). Retry %s/%s in %ss.",
            model,
            exc,
            attempt,
            self._max_retries,
            self._retry_delay,
        )
        self._sleep(self._retry_delay)

    @staticmethod
    def _classify(exc: Exception) -> LLMError:
        if isinstance(exc, LLMError):
            return exc
        if isinstance(exc, (openai.APIConnectionError, httpx.TimeoutException, httpx.TransportError)):
            return TransientServiceError("Transient transport failure.", {"error": str(exc)})
        if isinstance(exc, openai.APIStatusError):
            if exc.status_code in _TRANSIENT_STATUS_CODES or exc.status_code >= 500:
                return TransientServiceError(
                    "Transient service failure.",
                    {"status_code": exc.status_code, "error": str(exc)},
                )
        return FatalServiceError("LLM request failed.", {"error": str(exc)})

    @staticmethod
    def _fragment(chunk: Any) -> Optional[str]:
        choices = getattr(chunk, "choices", None)
        if not choices:
            return None
        delta = getattr(choices[0], "delta", None)
        if delta is None:
            return None
        return getattr(delta, "content", None)

    @staticmethod
    def _truncate(text: str, limit: int = 600) -> str:
        cleaned = text.replace("\r", " ").replace("\n", " ").strip()
        if len(cleaned) <= limit:
            return cleaned
        return cleaned[:limit] + "...(truncated)"


def build_llm_client(settings: Settings) -> LLMClient:
    http_client = httpx.Client(timeout=httpx.Timeout(settings.llm_timeout_seconds))
    if settings.llm_api_version:
        client: Any = AzureOpenAI(
            api_key=settings.llm_api_key,
            azure_endpoint=settings.llm_base_url,
            api_version=settings.llm_api_version,
            max_retries=0,
            http_client=http_client,
        )
    else:
        client = OpenAI(
            api_key=settings.llm_api_key,
            base_url=settings.llm_base_url,
            max_retries=0,
            http_client=http_client,
        )
    return LLMClient(
        client,
        max_retries=settings.llm_max_retries,
        retry_delay_seconds=settings.llm_retry_delay_seconds,
    )
