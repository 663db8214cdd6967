"""
CompareAnything Backend — History API (GET /api/recent, GET /api/trending)

Both read the comparisons table; neither returns the result payload.
"""

from fastapi import APIRouter

from compare_anything import db
from compare_anything.config import log
from compare_anything.models import RecentComparison, TrendingComparison

router = APIRouter(prefix="/api", tags=["history"])

RECENT_LIMIT = 5
TRENDING_WINDOW = 100
TRENDING_LIMIT = 5


def aggregate_trending(rows: list[dict], top: int = TRENDING_LIMIT) -> list[dict]:
    """
    Group rows by the exact (item_a, item_b, template) triple and count them.

    No normalisation: case, whitespace and None are part of the key.
    Sorted by count desc; ties keep first-seen order (the window is newest first).
    """
    groups: dict[tuple, dict] = {}
    for row in rows:
        key = (row.get("item_a"), row.get("item_b"), row.get("template"))
        group = groups.get(key)
        if group is None:
            group = {"item_a": key[0], "item_b": key[1], "template": key[2], "count": 0}
            groups[key] = group
        group["count"] += 1

    # sorted() is stable and dicts keep insertion order
    ranked = sorted(groups.values(), key=lambda g: g["count"], reverse=True)
    return ranked[:top]


@router.get("/recent", response_model=list[RecentComparison])
async def recent_comparisons() -> list[dict]:
    """
    GET /api/recent

    Returns the 5 newest comparisons: [{id, created_at, template, tone, criteria, item_a, item_b}]
    """
    rows = await db.list_recent_comparisons(limit=RECENT_LIMIT)
    log("INFO", "recent comparisons loaded", count=len(rows))
    return rows


@router.get("/trending", response_model=list[TrendingComparison])
async def trending_comparisons() -> list[dict]:
    """
    GET /api/trending

    Returns up to 5 groups from the newest 100 comparisons: [{item_a, item_b, template, count}]
    """
    rows = await db.list_trending_window(limit=TRENDING_WINDOW)
    trends = aggregate_trending(rows)
    log("INFO", "trending comparisons loaded", window=len(rows), groups=len(trends))
    return trends
