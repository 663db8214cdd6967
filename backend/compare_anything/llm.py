"""
CompareAnything Backend — LLM Interactions

The single completion call via litellm, plus defensive parsing of the
model's reply into a ComparisonResult.
"""

import asyncio
import json
import re
import time
from dataclasses import dataclass
from typing import Union

import litellm
from pydantic import ValidationError

from compare_anything.config import LLM_CONFIG, generate_error_code, log, settings
from compare_anything.errors import EmptyCompletion, UpstreamFailure
from compare_anything.models import ComparisonResult

litellm.suppress_debug_info = True
litellm.drop_params = True  # Prevent unsupported-param errors across providers


def _is_transient_error(error: Exception) -> bool:
    """Check if an error is a rate-limit / quota / timeout error (worth retrying)."""
    error_str = str(error).lower()
    return any(kw in error_str for kw in (
        "rate_limit", "ratelimit", "429", "quota", "resource_exhausted",
        "timeout", "timed out",
    ))


# ─────────────────────────────────────────────────────────────────────────────
# Completion
# ─────────────────────────────────────────────────────────────────────────────


async def call_llm(messages: list[dict]) -> str:
    """
    Send the messages to the configured model and return the completion text.

    Uses LLM_CONFIG for model, temperature and the per-call timeout. Transient
    errors are retried up to LLM_CONFIG["max_retries"] times with exponential
    backoff; everything else fails on the first attempt.

    Raises:
        UpstreamFailure: The call errored (network, auth, rate limit, timeout).
        EmptyCompletion: The call succeeded but carried no text.
    """
    model = LLM_CONFIG["model"]
    attempts = 1 + max(0, int(LLM_CONFIG["max_retries"]))

    for attempt in range(1, attempts + 1):
        log("INFO", "llm call started", model=model, attempt=attempt)
        start = time.perf_counter()
        try:
            response = await litellm.acompletion(
                model=model,
                messages=messages,
                temperature=LLM_CONFIG["temperature"],
                timeout=LLM_CONFIG["timeout_seconds"],
                api_key=settings.openai_api_key,
            )
        except Exception as e:
            code = generate_error_code()
            log("ERROR", "llm call failed", model=model, attempt=attempt, error=str(e), error_code=code)
            if attempt < attempts and _is_transient_error(e):
                delay = LLM_CONFIG["retry_backoff_seconds"] * (2 ** (attempt - 1))
                log("WARN", "llm call retry", model=model, attempt=attempt + 1, delay_seconds=delay)
                await asyncio.sleep(delay)
                continue
            raise UpstreamFailure(error_code=code) from e

        duration_ms = int((time.perf_counter() - start) * 1000)

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""

        tokens_used = None
        if hasattr(response, "usage") and response.usage:
            tokens_used = getattr(response.usage, "total_tokens", None)

        if not content.strip():
            code = generate_error_code()
            log("ERROR", "llm returned empty content", model=model, duration_ms=duration_ms, error_code=code)
            raise EmptyCompletion(error_code=code)

        log("INFO", "llm call succeeded", model=model, duration_ms=duration_ms, tokens_used=tokens_used)
        return content

    # Unreachable: the loop either returns or raises.
    raise UpstreamFailure(error_code=generate_error_code())


# ─────────────────────────────────────────────────────────────────────────────
# Parsing
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Parsed:
    result: ComparisonResult


@dataclass(frozen=True)
class ParseFailed:
    reason: str


ParseOutcome = Union[Parsed, ParseFailed]


def parse_comparison(raw: str) -> ParseOutcome:
    """
    Decode the model's reply into a ComparisonResult without trusting it.

    Steps:
        1. Strip a surrounding markdown code fence if the model added one
        2. json.loads()
        3. Validate the shape field by field with ComparisonResult

    Never raises; malformed payloads come back as ParseFailed.
    """
    stripped = _strip_code_fences(raw)
    try:
        decoded = json.loads(stripped)
    except (json.JSONDecodeError, TypeError) as e:
        return ParseFailed(reason=f"invalid json: {e}")
    if not isinstance(decoded, dict):
        return ParseFailed(reason=f"expected a JSON object, got {type(decoded).__name__}")
    try:
        return Parsed(result=ComparisonResult.model_validate(decoded))
    except ValidationError as e:
        return ParseFailed(reason=f"schema mismatch: {e.error_count()} error(s): {str(e)[:300]}")


# ─────────────────────────────────────────────────────────────────────────────
# Helper Functions
# ─────────────────────────────────────────────────────────────────────────────


def _strip_code_fences(text: str) -> str:
    """
    Remove markdown code fences from LLM output.
    Handles: ```json\n...\n```, ```\n...\n```, and plain text.
    """
    if not text or not isinstance(text, str):
        return text
    stripped = text.strip()
    match = re.match(r"^```(?:json)?\s*\n?(.*?)\n?```\s*$", stripped, re.DOTALL)
    if match:
        return match.group(1).strip()
    return stripped
