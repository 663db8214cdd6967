"""
CompareAnything Backend — Database Operations

All Supabase/PostgreSQL operations on the `comparisons` table:
insert one record, read the recent window, look one up by id.
"""

from dataclasses import dataclass
from typing import Optional, Union

from supabase import Client, create_client

from compare_anything.config import generate_error_code, log, settings
from compare_anything.errors import StorageReadFailure

TABLE = "comparisons"
RECENT_COLUMNS = "id, created_at, template, tone, criteria, item_a, item_b"
TRENDING_COLUMNS = "item_a, item_b, template"

# ─────────────────────────────────────────────────────────────────────────────
# Supabase Client (singleton)
# ─────────────────────────────────────────────────────────────────────────────

_supabase: Client | None = None


def get_supabase() -> Client:
    """Return the Supabase client singleton. Creates it on first call."""
    global _supabase
    if _supabase is None:
        _supabase = create_client(settings.supabase_url, settings.supabase_service_role_key)
    return _supabase


# ─────────────────────────────────────────────────────────────────────────────
# Insert (failure is reported, never raised)
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Persisted:
    id: str


@dataclass(frozen=True)
class PersistFailed:
    error_code: str


PersistOutcome = Union[Persisted, PersistFailed]

_persist_failures = 0


def persist_failure_count() -> int:
    """Number of failed comparison inserts since process start."""
    return _persist_failures


def _record_persist_failure(error: str) -> PersistFailed:
    global _persist_failures
    _persist_failures += 1
    code = generate_error_code()
    log("ERROR", "db write failed", operation="insert_comparison", error=error, error_code=code,
        failures_total=_persist_failures)
    return PersistFailed(error_code=code)


async def insert_comparison(
    item_a: str,
    item_b: str,
    result: dict,
    criteria: Optional[str] = None,
    tone: Optional[str] = None,
    template: Optional[str] = None,
) -> PersistOutcome:
    """
    Insert one comparison row. `id` and `created_at` are set by the database.

    Returns Persisted(id) on success, PersistFailed(error_code) on any error
    or when the insert returns no row.
    """
    try:
        sb = get_supabase()
        data = {
            "item_a": item_a,
            "item_b": item_b,
            "criteria": criteria,
            "tone": tone,
            "template": template,
            "result": result,
        }
        response = sb.table(TABLE).insert(data).execute()
        if response.data:
            row = response.data[0] if isinstance(response.data, list) else response.data
            return Persisted(id=str(row["id"]))
        return _record_persist_failure("insert returned no row")
    except Exception as e:
        return _record_persist_failure(str(e))


# ─────────────────────────────────────────────────────────────────────────────
# Reads (failure raises StorageReadFailure)
# ─────────────────────────────────────────────────────────────────────────────


async def list_recent_comparisons(limit: int = 5) -> list[dict]:
    """
    Newest comparisons first, without the result payload.
    """
    try:
        sb = get_supabase()
        response = (
            sb.table(TABLE)
            .select(RECENT_COLUMNS)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [dict(r) for r in (response.data or [])]
    except Exception as e:
        code = generate_error_code()
        log("ERROR", "db read failed", operation="list_recent_comparisons", error=str(e), error_code=code)
        raise StorageReadFailure("Failed to load recent comparisons", error_code=code) from e


async def list_trending_window(limit: int = 100) -> list[dict]:
    """
    The sampling window for trending: item_a, item_b, template of the newest `limit` rows.
    """
    try:
        sb = get_supabase()
        response = (
            sb.table(TABLE)
            .select(TRENDING_COLUMNS)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [dict(r) for r in (response.data or [])]
    except Exception as e:
        code = generate_error_code()
        log("ERROR", "db read failed", operation="list_trending_window", error=str(e), error_code=code)
        raise StorageReadFailure("Failed to load trending comparisons.", error_code=code) from e


async def get_comparison(comparison_id: str) -> Optional[dict]:
    """
    Look up one full comparison row. None if no row matches.
    """
    try:
        sb = get_supabase()
        response = (
            sb.table(TABLE)
            .select("*")
            .eq("id", comparison_id)
            .maybe_single()
            .execute()
        )
        # maybe_single().execute() returns None when no rows match in supabase-py v2
        if response is not None and response.data:
            return dict(response.data)
        return None
    except Exception as e:
        code = generate_error_code()
        log("ERROR", "db read failed", comparison_id=comparison_id, operation="get_comparison",
            error=str(e), error_code=code)
        raise StorageReadFailure("Comparison not found", error_code=code) from e
