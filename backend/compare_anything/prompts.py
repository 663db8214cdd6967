"""
CompareAnything Backend — LLM Prompt Templates

All prompts are defined here. llm.py sends whatever build_compare_prompt returns.
"""


# -----------------------------------------------------------------------------
# 1. Tone / criteria / mode instructions
# -----------------------------------------------------------------------------

TONE_INSTRUCTIONS = {
    "serious": "Use a formal, precise tone with no humour at all.",
    "balanced": "Use a friendly, conversational tone with a bit of light humour.",
    "chaotic": (
        "Use a playful, slightly unhinged, comedic tone with witty jabs, "
        "but stay respectful and not offensive."
    ),
}
DEFAULT_TONE_INSTRUCTION = "Use a clear, professional tone with minimal humour."

TEMPLATE_HINTS = {
    "generic": "",
    "cars": "Both items are vehicles. Think like a pragmatic car buyer: reliability, running costs, safety, resale value.",
    "jobs": "Both items are job offers or career options. Think about pay, growth, stability, culture and work-life balance.",
    "homes": "Both items are places to live. Think about price, location, space, condition and long-term value.",
    "quotes": "Both items are quotes or offers from suppliers. Think about price, scope, inclusions, risk and trustworthiness.",
}

BASIC_MODE_INSTRUCTION = (
    "Keep it concise: 3-4 aspects, and 3-5 short bullet points in each pros/cons list."
)
EXPERT_MODE_INSTRUCTION = (
    "Expert mode: go deeper. Use 6-8 aspects with specific, detailed comparisons, "
    "and 5-8 substantive bullet points in each pros/cons list. "
    "Keep exactly the same JSON structure."
)


def tone_instruction(tone: str | None) -> str:
    """Map a tone tag to its instruction. Unknown or missing tags get the professional default."""
    return TONE_INSTRUCTIONS.get(tone or "", DEFAULT_TONE_INSTRUCTION)


def criteria_instruction(criteria: str | None) -> str:
    if criteria:
        return f"The user cares about: {criteria}. Focus the comparison on those aspects."
    return "Choose the most relevant aspects to compare based on common sense."


# -----------------------------------------------------------------------------
# 2. build_compare_prompt
# -----------------------------------------------------------------------------

COMPARE_SYSTEM_PROMPT = """
You are CompareAnything, an AI that compares any two things.

You must respond as strict JSON matching this TypeScript type:

type ComparisonResult = {
  summary: string;
  aspects: {
    name: string;
    itemA: string;
    itemB: string;
  }[];
  prosA: string[];
  consA: string[];
  prosB: string[];
  consB: string[];
  verdict: string;
  funTitle: string;
};

Rules:
- Do NOT include backticks or markdown.
- Do NOT add commentary before or after the JSON.
- Make sure the JSON is valid and parseable.
""".strip()


def build_compare_prompt(
    item_a: str,
    item_b: str,
    criteria: str | None = None,
    tone: str | None = None,
    template_key: str | None = None,
    mode: str | None = None,
) -> list[dict]:
    """
    Build the system + user messages for one comparison.

    Input:
        item_a, item_b: The two things, already trimmed and non-empty
        criteria: Optional focus text
        tone: 'serious' | 'balanced' | 'chaotic' | None
        template_key: Optional domain preset; adds a framing hint when recognised
        mode: 'expert' for richer output, anything else is concise

    Returns:
        [{"role": "system", ...}, {"role": "user", ...}]
    """
    system_parts = [COMPARE_SYSTEM_PROMPT]
    system_parts.append(EXPERT_MODE_INSTRUCTION if mode == "expert" else BASIC_MODE_INSTRUCTION)
    hint = TEMPLATE_HINTS.get(template_key or "", "")
    if hint:
        system_parts.append(hint)

    user_content = (
        "Compare the following two items.\n\n"
        f"Item A:\n{item_a}\n\n"
        f"Item B:\n{item_b}\n\n"
        f"{criteria_instruction(criteria)}\n\n"
        f"{tone_instruction(tone)}"
    )

    return [
        {"role": "system", "content": "\n\n".join(system_parts)},
        {"role": "user", "content": user_content},
    ]
