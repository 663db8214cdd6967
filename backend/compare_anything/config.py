"""
CompareAnything Backend — Central Configuration

All environment variables and LLM settings live here.
Import `settings`, `LLM_CONFIG`, `log`, and `generate_error_code` from this module.
Do not read `os.environ` anywhere else.
"""

import uuid
from datetime import datetime, timezone

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All environment variables. Loaded from .env or the host's env vars."""

    # LLM Provider (passed to litellm on every call)
    openai_api_key: str

    # Database
    supabase_url: str
    supabase_service_role_key: str

    # App
    environment: str = "development"  # "development" | "production"
    cors_origins: str = "http://localhost:3000"  # Comma-separated for multiple origins
    public_base_url: str = "http://localhost:3000"  # Used to build share links
    compare_rate_limit: str = "10/minute"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# Singleton — import this everywhere
settings = Settings()


# ──────────────────────────────────────────────────────
# Logging Utilities
# ──────────────────────────────────────────────────────

def generate_error_code() -> str:
    """Generate a short, user-friendly error reference code.

    Format: 'CA-' followed by 6 uppercase hex characters.
    Example: 'CA-3F8A2C'

    The same code is logged on the backend AND returned in the error body,
    so a user can quote it and the logs can be grepped for it.
    """
    return f"CA-{uuid.uuid4().hex[:6].upper()}"


def log(level: str, message: str, **context) -> None:
    """Structured print-based logger.

    Every log line follows the format:
        [ISO_TIMESTAMP] [LEVEL] message | key1=value1 key2=value2

    Args:
        level: One of "INFO", "WARN", "ERROR".
        message: Human-readable description of what happened.
        **context: Arbitrary key-value pairs. Include comparison_id when available.

    Usage:
        log("INFO", "compare started", mode="expert", template="cars")
        log("ERROR", "llm call failed", model="gpt-4o-mini",
            error_code="CA-3F8A2C", error=str(e))
    """
    ts = datetime.now(timezone.utc).isoformat()
    ctx = " ".join(f"{k}={v}" for k, v in context.items())
    print(f"[{ts}] [{level}] {message} | {ctx}", flush=True)


# ──────────────────────────────────────────────────────
# LLM Configuration
# ──────────────────────────────────────────────────────

LLM_CONFIG = {
    "model": "gpt-4o-mini",
    "temperature": 0.7,
    "timeout_seconds": 60,
    # Bounded retry for transient upstream errors only. 0 = single attempt.
    "max_retries": 0,
    "retry_backoff_seconds": 1.0,
}
