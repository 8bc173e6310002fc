import json
import logging

import requests

from config import Settings
from screening.errors import LLMConfigurationError, LLMRequestError, LLMResponseError
from screening.prompts import RESPONSE_SCHEMA

logger = logging.getLogger(__name__)


def _response_text(data: dict) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        reason = (data.get("promptFeedback") or {}).get("blockReason")
        raise LLMResponseError(f"Gemini returned no candidates{f' (blocked: {reason})' if reason else ''}")
    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = "".join(p.get("text", "") for p in parts).strip()
    if not text:
        finish = candidates[0].get("finishReason", "unknown")
        raise LLMResponseError(f"Gemini returned an empty response (finishReason={finish})")
    return text


def generate_screening(system_instruction: str, user_prompt: str, settings: Settings) -> dict:
    """Send one screening request to Gemini and return the parsed JSON body."""
    if not settings.gemini_api_key:
        raise LLMConfigurationError("GEMINI_API_KEY is not set.")

    url = f"{settings.gemini_api_base}/models/{settings.gemini_model}:generateContent"
    headers = {
        "x-goog-api-key": settings.gemini_api_key,
        "Content-Type": "application/json",
    }
    payload = {
        "systemInstruction": {"parts": [{"text": system_instruction}]},
        "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
        "generationConfig": {
            "temperature": settings.temperature,
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }

    try:
        response = requests.post(url, headers=headers, json=payload, timeout=settings.timeout)
        response.raise_for_status()
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        logger.error(f"Gemini API error ({status}): {e}")
        raise LLMRequestError(f"Gemini API returned HTTP {status}", status_code=status) from e
    except requests.RequestException as e:
        logger.error(f"Gemini API unreachable: {e}")
        raise LLMRequestError(f"Could not reach Gemini API: {e}") from e

    try:
        data = response.json()
    except ValueError as e:
        raise LLMResponseError("Gemini API returned a non-JSON body") from e

    raw = _response_text(data)
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Gemini output is not valid JSON: {e}")
        raise LLMResponseError("Model output is not valid JSON") from e
