# src/llm/client.py
# Async client for the Gemini generateContent REST endpoint.

import asyncio
import logging
from typing import Any, Dict, Optional, Sequence

import httpx

from config.settings import GeminiSettings
from .errors import GenerationConfigError, GenerationError, TransientGenerationError
from .retry import Sleep, retry_with_backoff

logger = logging.getLogger(__name__)

# One prior conversation turn: {"role": "user" | "model", "text": ...}
ChatTurn = Dict[str, str]


def build_payload(
    prompt: str,
    history: Optional[Sequence[ChatTurn]] = None,
    system_instruction: Optional[str] = None,
    generation_config: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """generateContent request body; ``prompt`` is always the final user turn."""
    contents = [
        {"role": "user" if turn.get("role") == "user" else "model", "parts": [{"text": turn.get("text", "")}]}
        for turn in history or []
    ]
    contents.append({"role": "user", "parts": [{"text": prompt}]})
    payload: Dict[str, Any] = {"contents": contents}
    if system_instruction:
        payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
    if generation_config:
        payload["generationConfig"] = dict(generation_config)
    return payload


class GenerationClient:
    """
    Text generation over an injected ``httpx.AsyncClient``.

    One instance is created at application start-up and shared by the agents.
    When no HTTP client is passed in, the instance creates and owns one, and
    ``aclose`` closes it.
    """

    def __init__(
        self,
        settings: GeminiSettings,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Optional[Sleep] = None,
    ):
        self.settings = settings
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=settings.timeout_seconds)
        self._sleep = sleep or asyncio.sleep

    @property
    def model(self) -> str:
        return self.settings.model

    def is_available(self) -> bool:
        return self.settings.has_credentials

    def _endpoint(self) -> str:
        return f"{self.settings.base_url.rstrip('/')}/models/{self.settings.model}:generateContent"

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        try:
            parts = data["candidates"][0]["content"]["parts"]
            text = "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationError(f"Unexpected response structure from generation service: {e}") from e
        if not text.strip():
            raise GenerationError("Generation service returned empty text")
        return text

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.settings.api_key.strip(),
        }
        return await self._http_client.post(
            self._endpoint(),
            json=payload,
            headers=headers,
            timeout=self.settings.timeout_seconds,
        )

    async def generate(
        self,
        prompt: str,
        history: Optional[Sequence[ChatTurn]] = None,
        system_instruction: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Single generation attempt. ``history`` holds earlier chat turns,
        oldest first; ``prompt`` is sent as the latest user turn.

        Raises:
            GenerationConfigError: no usable API key; no request is sent.
            TransientGenerationError: timeout, transport error, HTTP 429 or 5xx.
            GenerationError: any other HTTP error or a reply without text.
        """
        if not self.is_available():
            raise GenerationConfigError("Gemini API key not configured")

        payload = build_payload(prompt, history, system_instruction, generation_config)
        logger.debug(
            f"Sending generation request to model {self.settings.model} "
            f"({len(prompt)} chars, {len(payload['contents']) - 1} prior turns)"
        )
        try:
            response = await asyncio.wait_for(self._post(payload), timeout=self.settings.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise TransientGenerationError(
                f"Generation request timed out after {self.settings.timeout_seconds}s"
            ) from e
        except httpx.TimeoutException as e:
            raise TransientGenerationError(f"Generation request timed out: {e}") from e
        except httpx.RequestError as e:
            raise TransientGenerationError(f"Request error calling generation service: {e}") from e

        status = response.status_code
        if status == 429 or status >= 500:
            logger.warning(f"Generation service returned retryable status {status}")
            raise TransientGenerationError(f"Generation service returned HTTP {status}")
        if status >= 400:
            logger.error(f"Generation service rejected request: {status} - {response.text[:200]}")
            raise GenerationError(f"Generation service returned HTTP {status}")

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationError(f"Generation service returned invalid JSON: {e}") from e
        return self._extract_text(data)

    async def generate_with_retry(
        self,
        prompt: str,
        history: Optional[Sequence[ChatTurn]] = None,
        system_instruction: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> str:
        """``generate`` wrapped in exponential backoff for transient failures."""
        return await retry_with_backoff(
            lambda: self.generate(prompt, history, system_instruction, generation_config),
            max_retries=self.settings.max_retries,
            base_delay=self.settings.base_delay_seconds,
            retry_on=(TransientGenerationError,),
            sleep=self._sleep,
        )

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http_client.aclose()
