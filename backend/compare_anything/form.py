"""
CompareAnything — Client Form State

Everything the compare form holds between requests, and the transitions
that never touch the network: template presets, swap, reset, reloading a
past comparison, building the request and the share link.
The network side lives in client.py.
"""

from dataclasses import dataclass, field
from typing import Optional

TONES = ("serious", "balanced", "chaotic")
MODES = ("basic", "expert")


@dataclass(frozen=True)
class TemplatePreset:
    key: str
    label: str
    item_a_label: str
    item_b_label: str
    item_a_placeholder: str
    item_b_placeholder: str
    criteria_placeholder: str


TEMPLATES: dict[str, TemplatePreset] = {
    "generic": TemplatePreset(
        key="generic",
        label="Anything",
        item_a_label="Thing A",
        item_b_label="Thing B",
        item_a_placeholder="e.g. Pineapple on pizza",
        item_b_placeholder="e.g. Pizza without pineapple",
        criteria_placeholder="e.g. taste, cost, how much your friends will judge you...",
    ),
    "cars": TemplatePreset(
        key="cars",
        label="Cars",
        item_a_label="Car A",
        item_b_label="Car B",
        item_a_placeholder="e.g. A 2012 Toyota Corolla with 150,000km...",
        item_b_placeholder="e.g. A 2017 Mazda 3 with 90,000km...",
        criteria_placeholder="e.g. long-term reliability, running costs, resale value...",
    ),
    "jobs": TemplatePreset(
        key="jobs",
        label="Jobs",
        item_a_label="Job offer A",
        item_b_label="Job offer B",
        item_a_placeholder="e.g. Senior dev at a startup, $120k, fully remote",
        item_b_placeholder="e.g. Mid-level dev at a bank, $105k, 3 days in office",
        criteria_placeholder="e.g. growth, stability, work-life balance...",
    ),
    "homes": TemplatePreset(
        key="homes",
        label="Homes",
        item_a_label="Home A",
        item_b_label="Home B",
        item_a_placeholder="e.g. 2-bed apartment in the city, $650/week",
        item_b_placeholder="e.g. 3-bed house in the suburbs, $580/week",
        criteria_placeholder="e.g. commute, space, noise, long-term value...",
    ),
    "quotes": TemplatePreset(
        key="quotes",
        label="Quotes",
        item_a_label="Quote A",
        item_b_label="Quote B",
        item_a_placeholder="e.g. Roofer 1: $8,400, 10-year warranty, starts next month",
        item_b_placeholder="e.g. Roofer 2: $7,200, 5-year warranty, starts next week",
        criteria_placeholder="e.g. price, what's included, warranty, trust...",
    ),
}
DEFAULT_TEMPLATE = "generic"


def get_template(key: Optional[str]) -> TemplatePreset:
    """Preset for `key`; unknown or missing keys fall back to the generic preset."""
    return TEMPLATES.get(key or DEFAULT_TEMPLATE, TEMPLATES[DEFAULT_TEMPLATE])


@dataclass
class FormState:
    item_a: str = ""
    item_b: str = ""
    criteria: str = ""
    tone: str = "balanced"
    template_key: str = DEFAULT_TEMPLATE
    mode: str = "basic"

    loading: bool = False
    error: Optional[str] = None
    result: Optional[dict] = None
    comparison_id: Optional[str] = None

    recent: list[dict] = field(default_factory=list)
    trending: list[dict] = field(default_factory=list)

    @property
    def template(self) -> TemplatePreset:
        return get_template(self.template_key)

    def apply_template(self, key: str) -> None:
        """Switch preset. Only labels change; the key is sent along with the request."""
        self.template_key = get_template(key).key

    def swap_items(self) -> None:
        self.item_a, self.item_b = self.item_b, self.item_a

    def reset(self) -> None:
        """Clear inputs and the last result. Fetched recent/trending lists are kept."""
        self.item_a = ""
        self.item_b = ""
        self.criteria = ""
        self.tone = "balanced"
        self.template_key = DEFAULT_TEMPLATE
        self.mode = "basic"
        self.error = None
        self.result = None
        self.comparison_id = None

    def load_previous(self, row: dict) -> None:
        """Put a recent or trending row's inputs back into the form."""
        self.item_a = row.get("item_a") or ""
        self.item_b = row.get("item_b") or ""
        self.template_key = get_template(row.get("template")).key
        if "criteria" in row:
            self.criteria = row.get("criteria") or ""
        if row.get("tone") in TONES:
            self.tone = row["tone"]
        self.error = None

    load_recent = load_previous
    load_trending = load_previous

    def build_request(self) -> Optional[dict]:
        """
        The POST /api/compare body, or None (with `error` set) when an item is blank.
        """
        if not self.item_a.strip() or not self.item_b.strip():
            self.error = "Please fill in both items."
            return None
        self.error = None
        return {
            "itemA": self.item_a,
            "itemB": self.item_b,
            "criteria": self.criteria or None,
            "tone": self.tone,
            "templateKey": self.template_key,
            "mode": self.mode if self.mode in MODES else "basic",
        }

    def share_url(self, base_url: str) -> Optional[str]:
        """Permalink for the last stored comparison, or None if it was not stored."""
        if not self.comparison_id:
            return None
        return f"{base_url.rstrip('/')}/c/{self.comparison_id}"
