"""
CompareAnything Backend — Shared Comparison API (GET /api/comparisons/{id})

Read-only permalink view of one stored comparison.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from compare_anything import db
from compare_anything.config import log
from compare_anything.errors import StorageReadFailure
from compare_anything.models import ComparisonRecord, SharedComparisonResponse

router = APIRouter(prefix="/api/comparisons", tags=["comparisons"])

# What a client produces when it builds a link from a missing id
INVALID_IDS = {"", "undefined", "null"}


def template_label(template: str | None) -> str:
    """'cars' → 'Cars'; no template → 'Anything'."""
    if not template:
        return "Anything"
    return template[0].upper() + template[1:]


def _render(state: str, status_code: int, record: ComparisonRecord | None = None) -> JSONResponse:
    body = SharedComparisonResponse(
        state=state,
        comparison=record,
        template_label=template_label(record.template) if record else None,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


@router.get("", response_model=SharedComparisonResponse)
async def missing_comparison_id() -> JSONResponse:
    """GET /api/comparisons without an id is an invalid link."""
    return _render("invalid_link", 400)


@router.get("/{comparison_id}", response_model=SharedComparisonResponse)
async def get_shared_comparison(comparison_id: str) -> JSONResponse:
    """
    GET /api/comparisons/{id}

    Returns:
        200 { "state": "ok", "comparison": ComparisonRecord, "template_label": str }
        400 { "state": "invalid_link" } — no storage query is made
        404 { "state": "not_found" } — unknown id or storage error
    """
    comparison_id = comparison_id.strip()
    if comparison_id in INVALID_IDS:
        log("INFO", "invalid comparison link", comparison_id=comparison_id or "none")
        return _render("invalid_link", 400)

    try:
        row = await db.get_comparison(comparison_id)
    except StorageReadFailure:
        return _render("not_found", 404)

    if row is None:
        log("INFO", "comparison not found", comparison_id=comparison_id)
        return _render("not_found", 404)

    try:
        record = ComparisonRecord.model_validate(row)
    except ValidationError as e:
        log("ERROR", "stored comparison is malformed", comparison_id=comparison_id, error=str(e)[:300])
        return _render("not_found", 404)

    return _render("ok", 200, record)
