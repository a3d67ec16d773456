"""Gemini access shared by every AI-backed endpoint.

All model calls go through :func:`generate_text`, which runs the blocking
SDK call in a worker thread and retries rate-limit / overload failures with
exponential backoff. Failures surface as :class:`AIServiceError` carrying the
HTTP status the API should answer with.
"""

import asyncio
import json
import logging
import re
import time
from typing import Any, Optional
from fastapi import HTTPException
from google import genai
from google.genai import types
from mentor.config import GEMINI_API_KEY, GEMINI_MODEL

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
USAGE_LIMIT_MESSAGE = "AI usage limit reached. Please contact support."
TIMEOUT_MESSAGE = "Request timed out. The AI service is experiencing high load. Please try again in a few moments."
UNAVAILABLE_MESSAGE = "Service temporarily unavailable. Please try again in a few moments."


class AIServiceError(Exception):
    """An AI call failed; ``status_code`` is what the client should see."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def ai_error_to_http(error: AIServiceError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)


def get_client() -> genai.Client:
    if not GEMINI_API_KEY:
        raise AIServiceError("GEMINI_API_KEY is not configured", status_code=500)
    return genai.Client(api_key=GEMINI_API_KEY)


def _error_status(e: Exception) -> Optional[int]:
    code = getattr(e, "status_code", None) or getattr(e, "code", None)
    if isinstance(code, int):
        return code
    text = str(e).lower()
    if "429" in text or "resource exhausted" in text or "resource_exhausted" in text or "rate limit" in text:
        return 429
    if "503" in text or "unavailable" in text or "overloaded" in text:
        return 503
    if "402" in text or "payment required" in text:
        return 402
    return None


def call_gemini_with_retry(
    client,
    model: str,
    contents,
    config=None,
    max_retries: int = 3,
    initial_delay: float = 1,
    timeout: float = 60,
):
    """
    Call Gemini with retry logic for 503/429 errors and an overall timeout.

    Args:
        client: Gemini client instance
        model: Model name to use
        contents: Prompt/content to send
        config: Optional GenerateContentConfig
        max_retries: Maximum number of retry attempts
        initial_delay: Initial delay in seconds before first retry
        timeout: Maximum time in seconds for the entire operation

    Returns:
        Response from Gemini API

    Raises:
        AIServiceError: If all retries fail, the timeout is hit, or the error is not retryable
    """
    start_time = time.time()

    for attempt in range(max_retries + 1):
        if time.time() - start_time > timeout:
            raise AIServiceError(TIMEOUT_MESSAGE, status_code=504)

        try:
            return client.models.generate_content(model=model, contents=contents, config=config)
        except Exception as e:
            status_code = _error_status(e)

            if status_code == 402:
                raise AIServiceError(USAGE_LIMIT_MESSAGE, status_code=402) from e

            is_retryable = status_code in (429, 503)
            if not is_retryable:
                logger.error("[Gemini] Non-retryable error: %s", str(e)[:200])
                raise AIServiceError(f"AI gateway error: {e}", status_code=500) from e

            if attempt >= max_retries:
                if status_code == 429:
                    raise AIServiceError(RATE_LIMIT_MESSAGE, status_code=429) from e
                raise AIServiceError(UNAVAILABLE_MESSAGE, status_code=503) from e

            # Rate limits back off twice as long
            base_delay = initial_delay * 2 if status_code == 429 else initial_delay
            delay = min(base_delay * (2 ** attempt), 10)

            if time.time() - start_time + delay > timeout:
                raise AIServiceError(TIMEOUT_MESSAGE, status_code=504) from e

            logger.warning(
                "[Gemini] Retrying in %ss (attempt %d/%d) - %s",
                delay, attempt + 1, max_retries, str(e)[:100],
            )
            time.sleep(delay)

    raise AIServiceError(UNAVAILABLE_MESSAGE, status_code=503)


async def generate_text(
    prompt: str,
    system_instruction: Optional[str] = None,
    model: Optional[str] = None,
    json_output: bool = False,
    response_schema: Optional[dict] = None,
    temperature: Optional[float] = None,
    max_retries: int = 3,
) -> str:
    """Send one prompt to Gemini and return the response text."""
    client = get_client()

    config_kwargs: dict[str, Any] = {}
    if system_instruction:
        config_kwargs["system_instruction"] = system_instruction
    if json_output or response_schema:
        config_kwargs["response_mime_type"] = "application/json"
    if response_schema:
        config_kwargs["response_schema"] = response_schema
    if temperature is not None:
        config_kwargs["temperature"] = temperature
    config = types.GenerateContentConfig(**config_kwargs) if config_kwargs else None

    response = await asyncio.to_thread(
        call_gemini_with_retry,
        client,
        model or GEMINI_MODEL,
        prompt,
        config,
        max_retries,
    )
    return response.text or ""


def extract_first_json_object(text: str) -> dict:
    """Extract the first JSON object from a model response."""
    if not isinstance(text, str):
        raise ValueError("Model response was not text")
    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end < 0 or end <= start:
        raise ValueError("No JSON object found in model response")
    return json.loads(text[start : end + 1])


def parse_json_object(text: str) -> dict:
    """Parse a model response that should be a JSON object.

    Accepts raw JSON, JSON wrapped in markdown fences, or JSON embedded in prose.
    """
    cleaned = re.sub(r"```(?:json)?", "", text or "").strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        parsed = extract_first_json_object(cleaned)
    if not isinstance(parsed, dict):
        raise ValueError("Model response was not a JSON object")
    return parsed
