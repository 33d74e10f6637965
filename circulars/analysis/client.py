"""User-triggered circular analysis through the backend chat proxy."""

import json
import re
from pathlib import Path
from typing import Any

import httpx

from circulars.analysis.exceptions import (
    AnalysisError,
    ConfigurationError,
    RateLimitError,
    StubContentDetectedError,
)
from circulars.analysis.fallback_parser import parse_unstructured
from circulars.analysis.models import AnalysisOutcome, AnalysisRequest
from circulars.analysis.prompt_loader import load_prompt_template, load_response_shape
from circulars.analysis.validator import validate_and_build
from circulars.documents.exceptions import DocumentValidationError
from circulars.logging.logger import Log
from circulars.notifications.store import NotificationStore

CHAT_PATH = "/api/openai/chat"
SYSTEM_PROMPT = "You are an AI assistant that analyzes regulatory circulars."
RATE_LIMIT_MESSAGE = (
    "OpenAI rate limit or quota exceeded (429). "
    "Please check your OpenAI plan/billing or try again later."
)
STUB_MESSAGE = "AI returned stubbed content. Please ensure OPENAI_API_KEY is set on the server."

STUB_PATTERN = re.compile(r"stub on error|development stub|dev stub", re.IGNORECASE)


def prepare_text_for_ai(text: str, max_chars: int = 8000) -> str:
    """Hard-cut text to bound token usage; no summarization."""
    if not text:
        return ""
    return text[:max_chars]


def ensure_not_stub(content: str) -> None:
    """Raises StubContentDetectedError for placeholder responses."""
    if STUB_PATTERN.search(content):
        raise StubContentDetectedError(STUB_MESSAGE)


def _strip_code_fences(raw: str) -> str:
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)
    return cleaned


def parse_analysis_content(content: str) -> AnalysisOutcome:
    """Strict JSON first; anything else becomes a display-only fallback."""
    try:
        parsed = json.loads(_strip_code_fences(content))
    except json.JSONDecodeError as exc:
        Log.warning(f"Analysis response is not JSON, using unstructured fallback: {exc}")
        return AnalysisOutcome(unstructured=parse_unstructured(content))
    if not isinstance(parsed, dict):
        Log.warning("Analysis response JSON is not an object, using unstructured fallback")
        return AnalysisOutcome(unstructured=parse_unstructured(content))
    return AnalysisOutcome(structured=validate_and_build(parsed))


class AnalysisClient:
    """Sends extracted circular text to the chat proxy and interprets the answer."""

    def __init__(
        self,
        http_client: httpx.Client,
        *,
        model: str = "gpt-4o-mini",
        temperature: float = 0.2,
        max_chars: int = 8000,
        sample_chars: int = 1000,
        notifications: NotificationStore | None = None,
        prompt_template_path: Path | None = None,
        response_shape_path: Path | None = None,
    ) -> None:
        self._http = http_client
        self._model = model
        self._temperature = temperature
        self._max_chars = max_chars
        self._sample_chars = sample_chars
        self._notifications = notifications
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._response_shape = load_response_shape(response_shape_path)

    def build_request(self, text: str) -> AnalysisRequest:
        prepared = prepare_text_for_ai(text, self._max_chars)
        user_prompt = self._prompt_template.format(
            text_sample=prepared[: self._sample_chars],
            response_shape=self._response_shape,
        )
        return AnalysisRequest(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=user_prompt,
            model=self._model,
            temperature=self._temperature,
        )

    def analyze(self, text: str) -> AnalysisOutcome:
        """Run one analysis.

        Raises:
            DocumentValidationError: if there is no text to analyze.
            RateLimitError: on HTTP 429 from the proxy.
            ConfigurationError: if the proxy has no provider credential.
            StubContentDetectedError: if the answer is placeholder content.
            AnalysisError: for any other failure.
        """
        content_to_analyze = (text or "").strip()
        if not content_to_analyze:
            raise DocumentValidationError("No text to analyze")

        request = self.build_request(content_to_analyze)
        Log.debug(f"Analysis prompt:\n{request.user_prompt}")

        content = self._post(request)
        Log.debug(f"Analysis raw response:\n{content}")

        ensure_not_stub(content)
        outcome = parse_analysis_content(content)
        Log.info(
            f"Analysis complete (structured={outcome.is_structured}, "
            f"applicable={outcome.applicable})"
        )
        return outcome

    def _post(self, request: AnalysisRequest) -> str:
        try:
            response = self._http.post(CHAT_PATH, json=request.to_payload())
        except httpx.HTTPError as exc:
            raise AnalysisError(f"Analysis service unreachable: {exc}") from exc

        data = self._json_body(response)
        error = data.get("error") if isinstance(data.get("error"), str) else None

        if response.status_code == 429:
            message = error or RATE_LIMIT_MESSAGE
            if self._notifications is not None:
                self._notifications.add("OpenAI rate limit", message, type="error")
            raise RateLimitError(message)
        if response.status_code == 400 and error and "not configured" in error.lower():
            hint = data.get("message")
            raise ConfigurationError(f"{error}. {hint}" if isinstance(hint, str) else error)
        if not response.is_success:
            raise AnalysisError(error or f"AI analyze failed ({response.status_code})")

        message = data.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        trimmed = str(content).strip() if content is not None else ""
        if not trimmed:
            raise AnalysisError("AI returned empty response")
        return trimmed

    @staticmethod
    def _json_body(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
