"""Prompt-to-blueprint generation through the OpenRouter chat API.

The model is asked for strict blueprint JSON; its reply is stripped of a
Markdown code fence if present and parsed, but not validated against the
blueprint schema. Rendering does that.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import requests
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "deepseek/deepseek-chat-v3-0324"
TEMPERATURE = 0.2
REQUEST_TIMEOUT_S = 60.0

SYSTEM_PROMPT = """
You are an architectural blueprint AI.
Return STRICT JSON only.
Schema:
{
  "rooms": [
    { "name": "string", "x": number, "y": number, "width": number, "height": number }
  ]
}
"""

AUTH_FAILED_MESSAGE = "OpenRouter authentication failed. Check OPENROUTER_API_KEY."


class BlueprintServiceError(Exception):
    status_code = 500
    code = "error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class PromptRequiredError(BlueprintServiceError):
    status_code = 400
    code = "prompt_required"


class ConfigurationError(BlueprintServiceError):
    status_code = 500
    code = "not_configured"


class UpstreamError(BlueprintServiceError):
    status_code = 502
    code = "upstream_error"


def first_non_empty_env(*keys: str) -> str:
    for key in keys:
        value = os.environ.get(key, "").strip()
        if value:
            return value
    return ""


def clean_response_content(content: str) -> str:
    """Strip whitespace and a surrounding ``` code fence from model output."""
    cleaned = content.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        if (
            len(lines) >= 3
            and lines[0].strip().startswith("```")
            and lines[-1].strip() == "```"
        ):
            cleaned = "\n".join(lines[1:-1])
    return cleaned.strip()


def _build_headers(api_key: str) -> Dict[str, str]:
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    referer = first_non_empty_env("OPENROUTER_SITE_URL", "OPENROUTER_HTTP_REFERER")
    if referer:
        headers["HTTP-Referer"] = referer
    title = first_non_empty_env("OPENROUTER_APP_NAME", "OPENROUTER_X_TITLE")
    if title:
        headers["X-Title"] = title
    return headers


def _upstream_error_message(data: Any) -> str:
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, str) and message.strip():
                return message
    return ""


def _first_choice_content(data: Any) -> str:
    choices = data.get("choices") if isinstance(data, dict) else None
    if not isinstance(choices, list) or not choices:
        raise UpstreamError("AI response did not include any choices")
    choice = choices[0] if isinstance(choices[0], dict) else {}
    message = choice.get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""


def generate_blueprint(prompt: str, *, session: Optional[requests.Session] = None) -> Any:
    """Ask the configured model for a blueprint matching ``prompt``.

    Args:
        prompt: Free-text description of the desired layout.
        session: Optional ``requests.Session`` to send the request with.

    Returns:
        The JSON value the model produced, usually ``{"rooms": [...]}``.

    Raises:
        PromptRequiredError: ``prompt`` is blank.
        ConfigurationError: no OpenRouter API key is set.
        UpstreamError: the request failed or the reply was unusable.
    """
    prompt = (prompt or "").strip()
    if not prompt:
        raise PromptRequiredError("Prompt is required")

    api_key = first_non_empty_env("OPENROUTER_API_KEY", "OPENROUTER_API")
    if not api_key:
        raise ConfigurationError("OPENROUTER_API_KEY or OPENROUTER_API is not configured")

    model = first_non_empty_env("OPENROUTER_MODEL") or DEFAULT_MODEL
    body = {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        "temperature": TEMPERATURE,
    }

    http = session or requests
    logger.info("Requesting blueprint from %s", model)
    try:
        resp = http.post(
            OPENROUTER_URL,
            json=body,
            headers=_build_headers(api_key),
            timeout=REQUEST_TIMEOUT_S,
        )
    except RequestException as e:
        logger.error("OpenRouter request failed: %s", e)
        raise UpstreamError("AI request failed") from e

    try:
        data = resp.json()
    except ValueError as e:
        logger.error("OpenRouter returned non-JSON body (status %s)", resp.status_code)
        raise UpstreamError("AI service returned an unreadable response") from e

    if resp.status_code >= 400:
        message = _upstream_error_message(data) or "AI request failed"
        status_code = 502
        if resp.status_code in (401, 403):
            status_code = 401
            if message == "AI request failed":
                message = AUTH_FAILED_MESSAGE
        logger.warning("OpenRouter responded %s: %s", resp.status_code, message)
        raise UpstreamError(message, status_code=status_code)

    content = clean_response_content(_first_choice_content(data))
    if not content:
        raise UpstreamError("AI response content was empty")

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning("Model returned invalid JSON: %.200s", content)
        raise UpstreamError("AI returned invalid JSON") from e
