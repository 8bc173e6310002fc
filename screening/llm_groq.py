import json
import logging

import requests

from config import Settings
from screening.errors import LLMConfigurationError, LLMRequestError, LLMResponseError

logger = logging.getLogger(__name__)


def generate_screening(system_instruction: str, user_prompt: str, settings: Settings) -> dict:
    """Screen resumes with a Groq-hosted Llama model in JSON mode."""
    if not settings.groq_api_key:
        raise LLMConfigurationError("GROQ_API_KEY is not set.")

    headers = {
        "Authorization": f"Bearer {settings.groq_api_key}",
        "Content-Type": "application/json",
    }
    payload = {
        "model": settings.groq_model,
        "messages": [
            {"role": "system", "content": system_instruction},
            {"role": "user", "content": user_prompt},
        ],
        "temperature": settings.temperature,
        "response_format": {"type": "json_object"},
    }

    try:
        response = requests.post(settings.groq_url, headers=headers, json=payload, timeout=settings.timeout)
        response.raise_for_status()
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        logger.error(f"Groq API error ({status}): {e}")
        raise LLMRequestError(f"Groq API returned HTTP {status}", status_code=status) from e
    except requests.RequestException as e:
        logger.error(f"Groq API unreachable: {e}")
        raise LLMRequestError(f"Could not reach Groq API: {e}") from e

    try:
        data = response.json()
    except ValueError as e:
        raise LLMResponseError("Groq API returned a non-JSON body") from e

    try:
        raw = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise LLMResponseError("Groq response has no message content") from e

    # Content is normally a JSON string; some gateways hand back the object itself
    if isinstance(raw, dict):
        return raw
    if not raw or not str(raw).strip():
        raise LLMResponseError("Groq returned an empty response")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Groq output is not valid JSON: {e}")
        raise LLMResponseError("Model output is not valid JSON") from e
