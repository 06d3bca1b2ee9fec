"""
Prompts for answer judgment.

The judgment service is asked for a single JSON object:
    {"isCorrect": bool, "errorType": "syntax" | "calculation" | "conceptual" | null,
     "feedback": str, "encouragement": str}

Anything else it returns is handled by the oracle parser's lexical fallback.
"""
from __future__ import annotations

from aristotle.core.models import AnswerAttempt, Item, ItemType

# =============================================================================
# System Prompt
# =============================================================================

SYSTEM_PROMPT = """You are Aristotle, a patient mathematics tutor for secondary-school students.
You judge one student answer at a time. Be supportive but precise.

CLASSIFY ERRORS:
- syntax: the answer is incomplete, unreadable, or not a mathematical statement
- calculation: the method is right but an arithmetic step is wrong
- conceptual: the method or the underlying idea is wrong
- null: the answer is correct

If the answer is incorrect, explain why and guide toward the right approach
without giving the final answer away."""


# =============================================================================
# Per-type instructions
# =============================================================================

MULTIPLE_CHOICE_INSTRUCTIONS = """The student picked one of the listed options.
Judge whether the chosen option is the correct one."""

FREE_FORM_INSTRUCTIONS = """The student wrote a working step or a final answer.
Analyze:
1. Mathematical accuracy
2. Logical progression from the previous steps
3. Whether the method suits the problem"""

OUTPUT_FORMAT = """Return JSON only:
{
  "isCorrect": boolean,
  "errorType": "syntax" | "calculation" | "conceptual" | null,
  "feedback": "Specific feedback about the answer (2-3 sentences)",
  "encouragement": "Encouraging message (1 sentence)"
}"""


def build_judgment_prompt(
    item: Item,
    attempt: AnswerAttempt,
    history: list[AnswerAttempt],
) -> str:
    """Assemble the full judging prompt for one attempt."""
    if item.item_type is ItemType.MULTIPLE_CHOICE:
        instructions = MULTIPLE_CHOICE_INSTRUCTIONS
    else:
        instructions = FREE_FORM_INSTRUCTIONS

    lines = [
        SYSTEM_PROMPT,
        "",
        instructions,
        "",
        f"Problem: {item.prompt}",
    ]
    if item.options:
        lines.append("Options: " + " | ".join(item.options))
    lines.append(f"Reference answer: {item.reference_answer}")

    previous = " -> ".join(a.content for a in history) if history else "None"
    lines.append(f"Previous steps: {previous}")
    lines.append(f"Current answer: {attempt.content}")
    lines.append("")
    lines.append(OUTPUT_FORMAT)
    return "\n".join(lines)
