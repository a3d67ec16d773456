"""Sandboxed code execution through the Piston API."""

import asyncio
import logging
import time
from typing import Optional
import requests
from mentor.config import PISTON_API_URL

logger = logging.getLogger(__name__)

LANGUAGE_MAP = {
    "python": "python",
    "javascript": "javascript",
    "java": "java",
    "cpp": "c++",
    "sql": "sqlite3",
}

COMPILE_TIMEOUT_MS = 10000
RUN_TIMEOUT_MS = 3000
REQUEST_TIMEOUT_SECONDS = 30

_runtimes_cache = {"fetched_at": 0.0, "runtimes": []}
RUNTIMES_CACHE_SECONDS = 60 * 60


class CodeExecutionError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _get_runtimes_sync() -> list[dict]:
    now = time.time()
    if _runtimes_cache["runtimes"] and now - _runtimes_cache["fetched_at"] < RUNTIMES_CACHE_SECONDS:
        return _runtimes_cache["runtimes"]

    try:
        resp = requests.get(f"{PISTON_API_URL}/runtimes", timeout=REQUEST_TIMEOUT_SECONDS)
        resp.raise_for_status()
        runtimes = resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.error("[Piston] Failed to fetch runtimes: %s", e)
        raise CodeExecutionError("Code execution service is unavailable", status_code=502) from e

    _runtimes_cache["runtimes"] = runtimes
    _runtimes_cache["fetched_at"] = now
    return runtimes


def find_runtime(runtimes: list[dict], piston_language: str) -> Optional[dict]:
    for runtime in runtimes:
        if runtime.get("language") == piston_language or piston_language in (runtime.get("aliases") or []):
            return runtime
    return None


def format_execution_result(result: dict) -> dict:
    """Prefer the run stage; fall back to the compile stage."""
    run = result.get("run") or {}
    compile_stage = result.get("compile") or {}
    return {
        "output": run.get("output") or compile_stage.get("output") or "",
        "stderr": run.get("stderr") or compile_stage.get("stderr") or "",
        "exit_code": run.get("code") or compile_stage.get("code") or 0,
        "execution_time": run.get("signal") or "N/A",
    }


def execute_code_sync(language: str, code: str, stdin: Optional[str] = None) -> dict:
    if not language or not code:
        raise CodeExecutionError("Language and code are required")

    piston_language = LANGUAGE_MAP.get(language)
    if not piston_language:
        raise CodeExecutionError(f"Unsupported language: {language}")

    runtime = find_runtime(_get_runtimes_sync(), piston_language)
    if not runtime:
        raise CodeExecutionError(f"Runtime not found for language: {piston_language}", status_code=502)

    logger.info("[Piston] Executing %d chars with %s %s", len(code), runtime["language"], runtime["version"])

    try:
        resp = requests.post(
            f"{PISTON_API_URL}/execute",
            json={
                "language": runtime["language"],
                "version": runtime["version"],
                "files": [{"content": code}],
                "stdin": stdin or "",
                "args": [],
                "compile_timeout": COMPILE_TIMEOUT_MS,
                "run_timeout": RUN_TIMEOUT_MS,
                "compile_memory_limit": -1,
                "run_memory_limit": -1,
            },
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        resp.raise_for_status()
        result = resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.error("[Piston] Execution request failed: %s", e)
        raise CodeExecutionError("Code execution service is unavailable", status_code=502) from e

    return format_execution_result(result)


async def execute_code(language: str, code: str, stdin: Optional[str] = None) -> dict:
    """Async wrapper so the blocking HTTP calls stay off the event loop."""
    return await asyncio.to_thread(execute_code_sync, language, code, stdin)
