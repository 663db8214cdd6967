"""
Single source of truth for all Pydantic models (requests, responses, stored rows, LLM output).
The compare request and the ComparisonResult use camelCase on the wire; stored rows use snake_case columns.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic.alias_generators import to_camel


_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# Model replies are matched on the camelCase wire names only.
_CAMEL_WIRE = ConfigDict(alias_generator=to_camel)


# -----------------------------------------------------------------------------
# Request Models
# -----------------------------------------------------------------------------


class CompareRequest(BaseModel):
    """Body of POST /api/compare.

    Fields are untyped so a wrong-typed value never turns into a 422; the route
    treats non-strings as absent and checks the items itself (400).
    """

    model_config = _CAMEL

    item_a: Any = Field(None, description="Thing A, free text")
    item_b: Any = Field(None, description="Thing B, free text")
    criteria: Any = Field(None, description="What the user cares about")
    tone: Any = Field(None, description="'serious' | 'balanced' | 'chaotic'")
    template_key: Any = Field(None, description="'generic' | 'cars' | 'jobs' | 'homes' | 'quotes'")
    mode: Any = Field(None, description="'basic' | 'expert'")


# -----------------------------------------------------------------------------
# LLM Response Models (for structured output validation)
# -----------------------------------------------------------------------------


class Aspect(BaseModel):
    model_config = _CAMEL_WIRE

    name: StrictStr
    item_a: StrictStr
    item_b: StrictStr


class ComparisonResult(BaseModel):
    """
    The model's reply. Strings must be strings and arrays must be arrays;
    absent or null arrays become empty lists. Unknown keys are dropped.
    """

    model_config = _CAMEL_WIRE

    summary: StrictStr
    aspects: list[Aspect] = []
    pros_a: list[StrictStr] = []
    cons_a: list[StrictStr] = []
    pros_b: list[StrictStr] = []
    cons_b: list[StrictStr] = []
    verdict: StrictStr
    fun_title: StrictStr = ""

    @field_validator("aspects", "pros_a", "cons_a", "pros_b", "cons_b", mode="before")
    @classmethod
    def null_list_to_empty(cls, value: object) -> object:
        return [] if value is None else value


# -----------------------------------------------------------------------------
# Response Models
# -----------------------------------------------------------------------------


class CompareResponse(BaseModel):
    result: ComparisonResult
    id: Optional[str] = None


class RecentComparison(BaseModel):
    id: str
    created_at: datetime
    template: Optional[str] = None
    tone: Optional[str] = None
    criteria: Optional[str] = None
    item_a: Optional[str] = None
    item_b: Optional[str] = None


class TrendingComparison(BaseModel):
    item_a: Optional[str] = None
    item_b: Optional[str] = None
    template: Optional[str] = None
    count: int


class ComparisonRecord(BaseModel):
    id: str
    created_at: datetime
    template: Optional[str] = None
    tone: Optional[str] = None
    criteria: Optional[str] = None
    item_a: Optional[str] = None
    item_b: Optional[str] = None
    result: ComparisonResult


class SharedComparisonResponse(BaseModel):
    state: Literal["ok", "invalid_link", "not_found"]
    comparison: Optional[ComparisonRecord] = None
    template_label: Optional[str] = None
