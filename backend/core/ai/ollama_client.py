"""
Thin Ollama /api/generate transport shared by the packaging analysis and results summary calls.
One request per call; retrying is left to the caller.
"""
import json
import logging
import re
from typing import Optional

import requests

from core.config import get_ollama_url, get_ollama_model

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class AIServiceError(Exception):
    """AI collaborator unreachable or returned something unusable. Recoverable: the caller may retry."""


def call_ollama(
    prompt: str,
    timeout: int,
    system: Optional[str] = None,
    model: Optional[str] = None,
    images: Optional[list[str]] = None,
) -> str:
    """Return the generated text. images: base64-encoded image payloads for vision models."""
    payload = {
        "model": model or get_ollama_model(),
        "prompt": prompt,
        "stream": False,
        "format": "json",
        "options": {"temperature": 0.0},
    }
    if system:
        payload["system"] = system
    if images:
        payload["images"] = images
    try:
        resp = requests.post(get_ollama_url(), json=payload, timeout=timeout)
        resp.raise_for_status()
        text = (resp.json().get("response") or "").strip()
    except requests.RequestException as e:
        logger.warning("LLM_CALL ollama call failed model=%s error=%s", payload["model"], e)
        raise AIServiceError(f"AI service unavailable: {e}") from e
    except ValueError as e:
        logger.warning("LLM_CALL ollama returned non-JSON body model=%s", payload["model"])
        raise AIServiceError("Invalid AI response") from e
    if not text:
        raise AIServiceError("Invalid AI response")
    return text


def extract_json_object(text: str) -> dict:
    """Pull the first {...} block out of model output (models sometimes wrap JSON in prose)."""
    match = _JSON_OBJECT_RE.search(text or "")
    if not match:
        raise AIServiceError("Failed to parse AI response")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise AIServiceError("Failed to parse AI response") from e
    if not isinstance(data, dict):
        raise AIServiceError("Failed to parse AI response")
    return data
