"""
CompareAnything Backend — Compare API (POST /api/compare)

Validate → build prompt → call LLM → parse → persist → respond.
"""

import time

from fastapi import APIRouter, Request

from compare_anything import db, llm
from compare_anything.config import generate_error_code, log, settings
from compare_anything.errors import CompareError, InvalidInput, UnparsableCompletion
from compare_anything.limits import limiter
from compare_anything.models import CompareRequest, CompareResponse
from compare_anything.prompts import build_compare_prompt

router = APIRouter(prefix="/api/compare", tags=["compare"])


def _text(value: object) -> str | None:
    """Non-strings and blank strings count as absent. Text is otherwise kept verbatim."""
    if not isinstance(value, str) or not value.strip():
        return None
    return value


def _tag(value: object) -> str | None:
    return value if isinstance(value, str) else None


@router.post("", response_model=CompareResponse)
@limiter.limit(settings.compare_rate_limit)
async def compare(request: Request, body: CompareRequest) -> CompareResponse:
    """
    POST /api/compare

    Returns: { "result": ComparisonResult, "id": str | null }
    id is null when the comparison could not be stored.
    """
    item_a = _text(body.item_a)
    item_b = _text(body.item_b)
    if not item_a or not item_b:
        raise InvalidInput(error_code=generate_error_code())

    criteria = _text(body.criteria)
    tone = _tag(body.tone)
    template_key = _tag(body.template_key)
    mode = _tag(body.mode)
    start = time.perf_counter()
    log("INFO", "compare started", tone=tone, template=template_key, mode=mode,
        has_criteria=criteria is not None)

    try:
        messages = build_compare_prompt(
            item_a,
            item_b,
            criteria=criteria,
            tone=tone,
            template_key=template_key,
            mode=mode,
        )
        raw = await llm.call_llm(messages)

        outcome = llm.parse_comparison(raw)
        if isinstance(outcome, llm.ParseFailed):
            code = generate_error_code()
            log("ERROR", "llm output validation failed", reason=outcome.reason,
                raw_output=raw[:500] + "..." if len(raw) > 500 else raw, error_code=code)
            raise UnparsableCompletion(error_code=code, reason=outcome.reason)
        result = outcome.result

        persisted = await db.insert_comparison(
            item_a,
            item_b,
            result.model_dump(by_alias=True),
            criteria=criteria,
            tone=tone,
            template=template_key,
        )
    except CompareError:
        raise
    except Exception as e:
        code = generate_error_code()
        log("ERROR", "compare failed", error=str(e), error_code=code)
        raise CompareError(error_code=code) from e

    comparison_id = persisted.id if isinstance(persisted, db.Persisted) else None
    duration_ms = int((time.perf_counter() - start) * 1000)
    log("INFO", "compare completed", comparison_id=comparison_id, persisted=comparison_id is not None,
        duration_ms=duration_ms)
    return CompareResponse(result=result, id=comparison_id)
