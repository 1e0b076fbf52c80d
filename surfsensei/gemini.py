"""
Minimal client for the Gemini ``generateContent`` REST endpoint.

Two calls are exposed, matching the two things the app asks of the model:
a plain completion with a system instruction, and a completion with the
Google Search tool enabled.  Both return the response text or raise
:class:`~surfsensei.errors.TransportError` /
:class:`~surfsensei.errors.EmptyResponse`.  There is no retry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from .config import DEFAULT_BASE_URL, DEFAULT_MODEL, Settings
from .errors import EmptyResponse, TransportError

logger = logging.getLogger(__name__)

EMPTY_RESPONSE_MESSAGE = "The AI returned an empty response. This might be due to content safety filters."


@dataclass
class GeminiClient:
    api_key: str
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            api_key=settings.api_key,
            model=settings.model,
            base_url=settings.base_url,
            timeout=settings.request_timeout,
        )

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"

    def generate(self, system_instruction: str, user_query: str) -> str:
        """Answer ``user_query`` under ``system_instruction``."""
        body: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": user_query}]}],
            "systemInstruction": {"parts": [{"text": system_instruction}]},
        }
        return self._post(body)

    def generate_with_search(self, prompt: str) -> str:
        """Answer ``prompt`` with the Google Search tool available to the model."""
        body: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "tools": [{"google_search": {}}],
        }
        return self._post(body)

    def _post(self, body: Dict[str, Any]) -> str:
        if not self.api_key:
            raise TransportError("No Gemini API key configured. Set GEMINI_API_KEY to enable recommendations.")
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        logger.debug("Gemini request: url=%s payload=%s", self.url, body)
        try:
            resp = requests.post(self.url, json=body, headers=headers, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise TransportError(f"Network error contacting Gemini: {exc}") from exc
        except requests.RequestException as exc:
            raise TransportError(f"Gemini request failed: {exc}") from exc

        if not resp.ok:
            raise TransportError(
                f"Gemini request failed ({resp.status_code}): {self._error_detail(resp)}"
            )
        try:
            data = resp.json()
        except ValueError as exc:
            raise TransportError("Unexpected Gemini response format.") from exc
        logger.debug("Gemini response body: %s", data)
        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: Any) -> str:
        if not isinstance(data, dict):
            raise TransportError("Unexpected Gemini response format.")
        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            raise EmptyResponse(f"{EMPTY_RESPONSE_MESSAGE} (blocked: {block_reason})")
        candidates: List[Any] = data.get("candidates") or []
        if not isinstance(candidates, list):
            raise TransportError("Unexpected Gemini response format.")
        if not candidates:
            raise EmptyResponse(EMPTY_RESPONSE_MESSAGE)
        candidate = candidates[0]
        if not isinstance(candidate, dict):
            raise TransportError("Unexpected Gemini response format.")
        content = candidate.get("content") or {}
        if not isinstance(content, dict):
            raise TransportError("Unexpected Gemini response format.")
        parts = content.get("parts") or []
        if not isinstance(parts, list):
            raise TransportError("Unexpected Gemini response format.")
        text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
        if not text.strip():
            raise EmptyResponse(EMPTY_RESPONSE_MESSAGE)
        return text

    @staticmethod
    def _error_detail(resp: requests.Response) -> str:
        try:
            payload = resp.json()
        except ValueError:
            return (resp.text or resp.reason or "").strip()[:500]
        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return str(payload)[:500]
