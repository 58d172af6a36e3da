"""Gemini backend — Google Generative Language REST API via httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from studyquiz.config import settings
from studyquiz.errors import GenerationError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin ``generateContent`` client; one short-lived AsyncClient per call."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.question_model
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport

    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        schema: dict[str, Any] | None = None,
        model: str | None = None,
    ) -> str:
        """Run one generateContent request and return the reply text."""
        if not self.api_key:
            raise GenerationError("Gemini API key is not configured")

        model_name = model or self.model
        url = f"{self.base_url}/models/{model_name}:generateContent"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    url,
                    headers={
                        "Content-Type": "application/json",
                        "x-goog-api-key": self.api_key,
                    },
                    json=self._build_payload(prompt, system, schema),
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "Gemini %s returned HTTP %d: %s",
                    model_name, exc.response.status_code, exc.response.text[:500],
                )
                raise GenerationError(
                    f"Gemini request failed with status {exc.response.status_code}"
                ) from exc
            except httpx.HTTPError as exc:
                logger.error("Gemini %s request error: %s", model_name, exc)
                raise GenerationError("Gemini request failed") from exc

        text = self._extract_text(response.json())
        logger.debug("Gemini %s replied with %d chars", model_name, len(text))
        return text

    def _build_payload(
        self, prompt: str, system: str | None, schema: dict[str, Any] | None
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}
        if schema is not None:
            payload["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": schema,
            }
        return payload

    def _extract_text(self, data: dict) -> str:
        """Concatenate the text parts of the first candidate."""
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(p.get("text", "") for p in parts if isinstance(p, dict))
