import os
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from loguru import logger

GROQ_API_URL = os.getenv("GROQ_API_URL", "https://api.groq.com/openai/v1/chat/completions")
GROQ_MODEL = os.getenv("GROQ_MODEL", "meta-llama/llama-4-scout-17b-16e-instruct")


@dataclass
class GroqError(Exception):
    message: str
    status_code: Optional[int] = None

    def __str__(self) -> str:
        return self.message


def get_api_key() -> Optional[str]:
    return os.getenv("GROQ_API_KEY") or None


def chat_completion(
    api_key: str,
    prompt: str,
    model: str = GROQ_MODEL,
    url: str = GROQ_API_URL,
    max_tokens: int = 3000,
    temperature: float = 0.7,
    retries: int = 2,
    timeout_seconds: int = 60,
) -> str:
    """Send a single-message chat completion and return the reply text.

    5xx responses and transport errors are retried with a short linear
    backoff; any other non-200 status fails immediately.
    """
    if not api_key:
        raise GroqError("Missing API key")
    if not prompt:
        raise GroqError("Missing prompt")

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    payload: Dict[str, Any] = {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "max_tokens": int(max_tokens),
        "temperature": float(temperature),
    }

    last_err: Optional[str] = None
    for attempt in range(retries):
        try:
            r = requests.post(url, json=payload, headers=headers, timeout=timeout_seconds)
        except requests.RequestException as e:
            last_err = str(e)
            logger.warning(f"Groq request failed (attempt {attempt + 1}/{retries}): {e}")
            if attempt < retries - 1:
                time.sleep(1.5 * (attempt + 1))
                continue
            raise GroqError(f"Failed to call Groq: {last_err}")

        if r.status_code != 200:
            last_err = f"{r.status_code} {r.reason}"
            logger.bind(body=r.text[:500]).error(f"Groq API error: {r.status_code}")
            if 500 <= r.status_code < 600 and attempt < retries - 1:
                time.sleep(1.5 * (attempt + 1))
                continue
            raise GroqError(last_err, status_code=r.status_code)

        data = r.json()
        choices = data.get("choices") or []
        content = ((choices[0] or {}).get("message") or {}).get("content") if choices else None
        if not content:
            raise GroqError("No content generated from AI")
        return str(content)

    raise GroqError(f"Failed to call Groq: {last_err}")
